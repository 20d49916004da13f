"""
Marketplace Provider

Client for the Doma orderbook REST API: order lookup and submission,
off-chain cancellation, supported currencies and fees.
"""

from .models import (
    CancelOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    OrderbookFeeResponse,
    SupportedCurrenciesResponse,
)
from .client import MarketplaceClient, get_marketplace_client

__all__ = [
    # Models
    "CancelOrderRequest",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderbookFeeResponse",
    "SupportedCurrenciesResponse",
    # Client
    "MarketplaceClient",
    "get_marketplace_client",
]
