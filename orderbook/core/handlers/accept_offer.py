"""
Accept Offer

Fetches an offer from the marketplace and fulfils it on chain, sending the
offered currency to the token owner.
"""

import logging

from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..orders.models import AcceptOfferParams, OperationResult
from .base import OperationHandler


logger = logging.getLogger(__name__)


class AcceptOfferHandler(OperationHandler[AcceptOfferParams, OperationResult]):
    """Sell a token into an existing offer."""

    failure_code = OrderbookErrorCode.ACCEPT_OFFER_FAILED

    async def execute(self, params: AcceptOfferParams) -> OperationResult:
        try:
            wallet_address = await self.get_wallet_address()

            offer = await self.api_client.get_offer(params.order_id, wallet_address)
            if offer is None:
                raise OrderbookError(
                    OrderbookErrorCode.ORDER_NOT_FOUND,
                    "Offer not found",
                    context={"order_id": params.order_id},
                )

            actions = await self.protocol.fulfill_order(
                offer.order,
                extra_data=offer.extra_data or "",
                recipient_address=wallet_address,
                accounts_address=wallet_address,
            )

            receipt = await self.execute_blockchain_operation(actions)
            logger.info(f"Accepted offer {params.order_id} in tx {receipt.transaction_hash}")
            return self.to_result(receipt)
        except Exception as e:
            raise self.wrap_error(e, params) from e
