"""
Order input builders.

Pure functions turning marketplace items into protocol order input. The offer
shape pays currency for a token; the listing shape offers a token for
currency.
"""

import time
from typing import List, Optional, Sequence

from ..execution.errors import OrderbookError, OrderbookErrorCode
from .models import (
    CreateOrderInput,
    Fee,
    InputItem,
    ItemType,
    ListingItem,
    MarketplaceFee,
    OfferItem,
)


MILLISECONDS_IN_SECOND = 1000


def compute_end_time(duration_ms: Optional[int], now_ms: Optional[int] = None) -> int:
    """
    Order expiry in seconds since epoch.

    Args:
        duration_ms: Order lifetime in milliseconds (must be positive)
        now_ms: Current time in milliseconds (default: wall clock)

    Returns:
        floor((now + duration) / 1000)
    """
    if not duration_ms or duration_ms <= 0:
        raise OrderbookError(
            OrderbookErrorCode.INVALID_PARAMETERS,
            "Order duration must be a positive number of milliseconds",
        )
    if now_ms is None:
        now_ms = int(time.time() * MILLISECONDS_IN_SECOND)
    return (now_ms + duration_ms) // MILLISECONDS_IN_SECOND


def prepare_fees(marketplace_fees: Optional[Sequence[MarketplaceFee]]) -> List[Fee]:
    """Convert marketplace fee entries into order fees, dropping empty ones."""
    return [
        Fee(recipient=fee.recipient, basisPoints=fee.basis_points)
        for fee in marketplace_fees or []
        if fee.recipient and fee.basis_points > 0
    ]


def _token_item(item: OfferItem | ListingItem, recipient: Optional[str] = None) -> InputItem:
    if item.requires_quantity:
        return InputItem(
            itemType=ItemType.ERC1155,
            token=item.contract,
            identifier=item.token_id,
            amount="1",
            recipient=recipient,
        )
    return InputItem(
        itemType=ItemType.ERC721,
        token=item.contract,
        identifier=item.token_id,
        recipient=recipient,
    )


def build_offer_order_input(
    item: OfferItem,
    buyer_address: str,
    end_time: int,
    fees: List[Fee],
    zone: str,
) -> CreateOrderInput:
    """Offer: the buyer's currency on the offer side, the token in consideration."""
    offerer = buyer_address

    return CreateOrderInput(
        offerer=offerer,
        endTime=str(end_time),
        offer=[InputItem(token=item.currency_contract_address, amount=item.price)],
        consideration=[_token_item(item, recipient=offerer)],
        fees=fees,
        zone=zone,
        restrictedByZone=True,
        allowPartialFills=False,
    )


def build_listing_order_input(
    item: ListingItem,
    seller_address: str,
    end_time: int,
    fees: List[Fee],
    zone: str,
) -> CreateOrderInput:
    """Listing: the token on the offer side, the seller's price in consideration."""
    offerer = seller_address

    if item.is_native_currency:
        payment = InputItem(amount=item.price, recipient=offerer)
    else:
        payment = InputItem(
            token=item.currency_contract_address,
            amount=item.price,
            recipient=offerer,
        )

    return CreateOrderInput(
        offerer=offerer,
        endTime=str(end_time),
        offer=[_token_item(item)],
        consideration=[payment],
        fees=fees,
        zone=zone,
        restrictedByZone=True,
    )
