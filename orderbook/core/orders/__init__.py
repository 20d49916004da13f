"""
Orders

Order models, order input builders, balance/approval requirements and
off-chain cancellation signatures.
"""

from .models import (
    AcceptOfferParams,
    BuyListingParams,
    CancellationType,
    CancelListingParams,
    CancelOfferParams,
    CreatedOrder,
    CreateListingParams,
    CreateOfferParams,
    CreateOrderInput,
    CreateOrderResult,
    CurrencyToken,
    Fee,
    GetOrderResponse,
    InputItem,
    ItemType,
    ListingItem,
    MarketplaceFee,
    OfferItem,
    OffChainCancel,
    OperationResult,
    OrderWithCounter,
    ZERO_ADDRESS,
)
from .builder import (
    build_listing_order_input,
    build_offer_order_input,
    compute_end_time,
    prepare_fees,
)
from .requirements import get_approval_actions, get_conversion_action
from .cancellation import create_off_chain_cancel_action

__all__ = [
    # Models
    "AcceptOfferParams",
    "BuyListingParams",
    "CancellationType",
    "CancelListingParams",
    "CancelOfferParams",
    "CreatedOrder",
    "CreateListingParams",
    "CreateOfferParams",
    "CreateOrderInput",
    "CreateOrderResult",
    "CurrencyToken",
    "Fee",
    "GetOrderResponse",
    "InputItem",
    "ItemType",
    "ListingItem",
    "MarketplaceFee",
    "OfferItem",
    "OffChainCancel",
    "OperationResult",
    "OrderWithCounter",
    "ZERO_ADDRESS",
    # Builders
    "build_listing_order_input",
    "build_offer_order_input",
    "compute_end_time",
    "prepare_fees",
    # Requirements
    "get_approval_actions",
    "get_conversion_action",
    # Cancellation
    "create_off_chain_cancel_action",
]
