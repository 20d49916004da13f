"""
Operation Handlers

One handler per orderbook operation. Each builds its action list, runs it
through the executor and reports the outcome to the marketplace.
"""

from .base import OperationHandler
from .accept_offer import AcceptOfferHandler
from .buy_listing import BuyListingHandler
from .cancel import CancelListingHandler, CancelOfferHandler, CancelOrderHandler
from .create_listing import CreateListingHandler
from .create_offer import CreateOfferHandler

__all__ = [
    "OperationHandler",
    "AcceptOfferHandler",
    "BuyListingHandler",
    "CancelListingHandler",
    "CancelOfferHandler",
    "CancelOrderHandler",
    "CreateListingHandler",
    "CreateOfferHandler",
]
