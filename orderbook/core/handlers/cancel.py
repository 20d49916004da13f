"""
Order cancellation handlers.

Off-chain: sign a cancellation message and hand it to the marketplace. No
transaction is sent, so the result carries no hash.

On-chain: cancel the order's components through the settlement protocol and
wait for the receipt.
"""

import logging
from abc import abstractmethod
from typing import Optional, Union

from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..execution.models import CancelOrderAction
from ..orders.cancellation import create_off_chain_cancel_action
from ..orders.models import (
    CancellationType,
    CancelListingParams,
    CancelOfferParams,
    GetOrderResponse,
    OffChainCancel,
    OperationResult,
)
from .base import OperationHandler


logger = logging.getLogger(__name__)

CancelParams = Union[CancelListingParams, CancelOfferParams]


class CancelOrderHandler(OperationHandler[CancelParams, OperationResult]):
    """Shared flow for cancelling a listing or an offer."""

    #: "Listing" / "Offer", used in messages
    order_kind: str = "Order"

    @abstractmethod
    async def fetch_order(self, order_id: str, wallet_address: str) -> Optional[GetOrderResponse]:
        ...

    @abstractmethod
    async def submit_cancellation(self, order_id: str, signature: str) -> None:
        ...

    async def execute(self, params: CancelParams) -> OperationResult:
        try:
            wallet_address = await self.get_wallet_address()

            order = await self.fetch_order(params.order_id, wallet_address)
            if order is None:
                raise OrderbookError(
                    OrderbookErrorCode.ORDER_NOT_FOUND,
                    f"{self.order_kind} not found",
                    context={"order_id": params.order_id},
                )

            if params.cancellation_type == CancellationType.OFF_CHAIN:
                return await self._cancel_off_chain(params.order_id)
            if params.cancellation_type == CancellationType.ON_CHAIN:
                return await self._cancel_on_chain(params.order_id, order)

            raise OrderbookError(
                OrderbookErrorCode.INVALID_PARAMETERS,
                f"Unknown cancellation type: {params.cancellation_type}",
            )
        except Exception as e:
            raise self.wrap_error(e, params) from e

    async def _cancel_off_chain(self, order_id: str) -> OperationResult:
        protocol_address = await self.protocol.get_contract_address()
        action = create_off_chain_cancel_action(
            self.signer,
            order_id,
            protocol_address,
            self.numeric_chain_id,
        )

        cancel: OffChainCancel = await self.execute_blockchain_operation([action])
        await self.submit_cancellation(order_id, cancel.signature)

        logger.info(f"{self.order_kind} {order_id} cancelled off-chain")
        return OperationResult.off_chain()

    async def _cancel_on_chain(self, order_id: str, order: GetOrderResponse) -> OperationResult:
        transact = await self.protocol.cancel_orders([order.components])
        receipt = await self.execute_blockchain_operation([CancelOrderAction(transact=transact)])

        logger.info(f"{self.order_kind} {order_id} cancelled in tx {receipt.transaction_hash}")
        return self.to_result(receipt)


class CancelListingHandler(CancelOrderHandler):
    failure_code = OrderbookErrorCode.LISTING_CANCELLATION_FAILED
    order_kind = "Listing"

    async def fetch_order(self, order_id: str, wallet_address: str) -> Optional[GetOrderResponse]:
        return await self.api_client.get_listing(order_id, wallet_address)

    async def submit_cancellation(self, order_id: str, signature: str) -> None:
        await self.api_client.cancel_listing(order_id, signature)


class CancelOfferHandler(CancelOrderHandler):
    failure_code = OrderbookErrorCode.OFFER_CANCELLATION_FAILED
    order_kind = "Offer"

    async def fetch_order(self, order_id: str, wallet_address: str) -> Optional[GetOrderResponse]:
        return await self.api_client.get_offer(order_id, wallet_address)

    async def submit_cancellation(self, order_id: str, signature: str) -> None:
        await self.api_client.cancel_offer(order_id, signature)
