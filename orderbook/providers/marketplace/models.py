"""
Marketplace API Models

Request and response bodies of the orderbook REST API. Order records
themselves are shared with the engine (see orderbook.core.orders.models).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from orderbook.core.orders.models import CurrencyToken, MarketplaceFee


class CreateOrderRequest(BaseModel):
    """Signed order submitted to the offer or listing endpoint."""

    signature: str
    orderbook: str
    chain_id: str = Field(..., alias="chainId")
    parameters: Dict[str, Any]
    source: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class CreateOrderResponse(BaseModel):
    """Marketplace acknowledgement of a new order."""

    order_id: str = Field(..., alias="orderId")

    model_config = ConfigDict(populate_by_name=True)


class CancelOrderRequest(BaseModel):
    """Off-chain cancellation payload."""

    order_id: str = Field(..., alias="orderId")
    signature: str

    model_config = ConfigDict(populate_by_name=True)


class SupportedCurrenciesResponse(BaseModel):
    currencies: List[CurrencyToken] = Field(default_factory=list)


class OrderbookFeeResponse(BaseModel):
    marketplace_fees: List[MarketplaceFee] = Field(default_factory=list, alias="marketplaceFees")

    model_config = ConfigDict(populate_by_name=True)
