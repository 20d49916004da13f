"""
Buy Listing

Fetches a listing from the marketplace and fulfils it on chain.
"""

import logging

from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..orders.models import BuyListingParams, OperationResult
from .base import OperationHandler


logger = logging.getLogger(__name__)


class BuyListingHandler(OperationHandler[BuyListingParams, OperationResult]):
    """Purchase a listed token."""

    failure_code = OrderbookErrorCode.BUY_LISTING_FAILED

    async def execute(self, params: BuyListingParams) -> OperationResult:
        try:
            wallet_address = await self.get_wallet_address()

            listing = await self.api_client.get_listing(params.order_id, wallet_address)
            if listing is None:
                raise OrderbookError(
                    OrderbookErrorCode.ORDER_NOT_FOUND,
                    "Listing not found",
                    context={"order_id": params.order_id},
                )

            # Zone-restricted listings carry extra data and are filled one unit at a time
            actions = await self.protocol.fulfill_order(
                listing.order,
                extra_data=listing.extra_data or "",
                units_to_fill=1 if listing.extra_data else None,
                accounts_address=wallet_address,
            )

            receipt = await self.execute_blockchain_operation(actions)
            logger.info(f"Bought listing {params.order_id} in tx {receipt.transaction_hash}")
            return self.to_result(receipt)
        except Exception as e:
            raise self.wrap_error(e, params) from e
