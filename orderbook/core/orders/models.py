"""
Order Models

Marketplace-level items, protocol order input, fetched orders, operation
parameters, and results.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..execution.models import TransactionReceipt


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ItemType(IntEnum):
    """Settlement protocol item types."""

    NATIVE = 0
    ERC20 = 1
    ERC721 = 2
    ERC1155 = 3


class CancellationType(str, Enum):
    """Where a cancellation is recorded."""

    ON_CHAIN = "on-chain"
    OFF_CHAIN = "off-chain"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# =============================================================================
# Fees
# =============================================================================


class Fee(_FrozenModel):
    """Order fee passed through to consideration."""

    recipient: str
    basis_points: int = Field(..., alias="basisPoints", ge=0, le=10_000)


class MarketplaceFee(_FrozenModel):
    """Fee entry as returned by the marketplace API."""

    fee_type: str = Field("", alias="feeType")
    basis_points: int = Field(..., alias="basisPoints", ge=0, le=10_000)
    recipient: str = ""


# =============================================================================
# Items
# =============================================================================


class _TradeItem(_Model):
    contract: str = Field(..., description="Token contract address")
    token_id: str = Field(..., alias="tokenId", description="Token identifier")
    price: str = Field(..., description="Price in smallest currency units")
    duration: Optional[int] = Field(None, description="Order lifetime in milliseconds")
    item_type: ItemType = Field(ItemType.ERC721, alias="itemType")

    @field_validator("price")
    @classmethod
    def _price_is_integer(cls, value: str) -> str:
        if not value.isdigit():
            raise ValueError("price must be a non-negative integer string")
        return value

    @property
    def requires_quantity(self) -> bool:
        return self.item_type == ItemType.ERC1155


class OfferItem(_TradeItem):
    """Buyer pays currency for a token."""

    currency_contract_address: str = Field(..., alias="currencyContractAddress")


class ListingItem(_TradeItem):
    """Seller offers a token for currency."""

    currency_contract_address: Optional[str] = Field(None, alias="currencyContractAddress")

    @property
    def is_native_currency(self) -> bool:
        return not self.currency_contract_address or self.currency_contract_address == ZERO_ADDRESS


# =============================================================================
# Protocol order input
# =============================================================================


class InputItem(_Model):
    """Offer or consideration entry of an order input."""

    item_type: Optional[ItemType] = Field(None, alias="itemType")
    token: Optional[str] = None
    identifier: Optional[str] = None
    amount: Optional[str] = None
    recipient: Optional[str] = None


class CreateOrderInput(_Model):
    """Protocol order input produced by the order builders."""

    offerer: str
    end_time: str = Field(..., alias="endTime")
    offer: List[InputItem]
    consideration: List[InputItem]
    fees: List[Fee] = Field(default_factory=list)
    zone: str = ZERO_ADDRESS
    restricted_by_zone: bool = Field(True, alias="restrictedByZone")
    allow_partial_fills: Optional[bool] = Field(None, alias="allowPartialFills")
    conduit_key: Optional[str] = Field(None, alias="conduitKey")

    def to_payload(self) -> Dict[str, Any]:
        """camelCase payload with absent fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# =============================================================================
# Orders
# =============================================================================


class OrderWithCounter(_FrozenModel):
    """Signed order: parameters plus signature."""

    parameters: Dict[str, Any]
    signature: str


class OffChainCancel(_FrozenModel):
    """Signature authorising the marketplace to drop an order."""

    order_id: str = Field(..., alias="orderId")
    signature: str


class GetOrderResponse(_FrozenModel):
    """Order record fetched from the marketplace."""

    order_id: str = Field("", alias="orderId")
    order: OrderWithCounter
    extra_data: Optional[str] = Field(None, alias="extraData")

    @property
    def components(self) -> Dict[str, Any]:
        """Order components used for on-chain cancellation."""
        return dict(self.order.parameters)


class CurrencyToken(_FrozenModel):
    """Currency accepted by an orderbook."""

    symbol: str = ""
    decimals: int = 18
    contract_address: Optional[str] = Field(None, alias="contractAddress")


# =============================================================================
# Parameters
# =============================================================================


class CreateOfferParams(_Model):
    items: List[OfferItem] = Field(default_factory=list)
    orderbook: str = "DOMA"
    source: Optional[str] = None
    marketplace_fees: List[MarketplaceFee] = Field(default_factory=list, alias="marketplaceFees")


class CreateListingParams(_Model):
    items: List[ListingItem] = Field(default_factory=list)
    orderbook: str = "DOMA"
    source: Optional[str] = None
    marketplace_fees: List[MarketplaceFee] = Field(default_factory=list, alias="marketplaceFees")


class BuyListingParams(_Model):
    order_id: str = Field(..., alias="orderId")


class AcceptOfferParams(_Model):
    order_id: str = Field(..., alias="orderId")


class CancelListingParams(_Model):
    order_id: str = Field(..., alias="orderId")
    cancellation_type: CancellationType = Field(CancellationType.OFF_CHAIN, alias="cancellationType")


class CancelOfferParams(_Model):
    order_id: str = Field(..., alias="orderId")
    cancellation_type: CancellationType = Field(CancellationType.OFF_CHAIN, alias="cancellationType")


# =============================================================================
# Results
# =============================================================================


class OperationResult(_FrozenModel):
    """Outcome of an on-chain or off-chain operation."""

    transaction_hash: Optional[str] = Field(None, alias="transactionHash")
    gas_used: int = Field(0, alias="gasUsed")
    gas_price: int = Field(0, alias="gasPrice")
    status: Literal["success", "reverted"] = "success"

    @classmethod
    def from_receipt(cls, receipt: TransactionReceipt) -> "OperationResult":
        return cls(
            transactionHash=receipt.transaction_hash,
            gasUsed=receipt.gas_used,
            gasPrice=receipt.gas_price,
            status="success" if receipt.is_success else "reverted",
        )

    @classmethod
    def off_chain(cls) -> "OperationResult":
        return cls(transactionHash=None, gasUsed=0, gasPrice=0, status="success")


class CreatedOrder(_FrozenModel):
    order_id: str = Field(..., alias="orderId")
    order_data: OrderWithCounter = Field(..., alias="orderData")


class CreateOrderResult(_FrozenModel):
    orders: List[CreatedOrder] = Field(default_factory=list)
