"""
Create Listing

Puts one or more tokens up for sale. Each token contract is approved for the
protocol operator if needed; one item is signed as a single order, several
with one bulk signature. Every signed order is then submitted to the
marketplace.
"""

import logging
from typing import List, Set

from ...config import settings
from ...providers.marketplace.models import CreateOrderRequest
from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..execution.models import Action
from ..orders.builder import build_listing_order_input, compute_end_time, prepare_fees
from ..orders.models import (
    CreatedOrder,
    CreateListingParams,
    CreateOrderInput,
    CreateOrderResult,
    OrderWithCounter,
)
from ..orders.requirements import get_approval_actions
from .base import OperationHandler


logger = logging.getLogger(__name__)


class CreateListingHandler(OperationHandler[CreateListingParams, CreateOrderResult]):
    """List tokens for sale."""

    failure_code = OrderbookErrorCode.LISTING_CREATION_FAILED

    async def execute(self, params: CreateListingParams) -> CreateOrderResult:
        try:
            if not params.items:
                raise OrderbookError(
                    OrderbookErrorCode.INVALID_PARAMETERS,
                    "At least one item must be provided",
                )

            wallet_address = await self.get_wallet_address()
            fees = prepare_fees(params.marketplace_fees)
            zone = self.chains.zone_for(self.chain_id)

            order_inputs = [
                build_listing_order_input(
                    item,
                    wallet_address,
                    compute_end_time(item.duration),
                    fees,
                    zone,
                )
                for item in params.items
            ]

            actions = await self._approval_actions(order_inputs)
            if len(order_inputs) == 1:
                actions.extend(await self.protocol.create_order(order_inputs[0], wallet_address))
            else:
                actions.extend(await self.protocol.create_bulk_orders(order_inputs, wallet_address))

            result = await self.execute_blockchain_operation(actions)
            orders: List[OrderWithCounter] = result if isinstance(result, list) else [result]

            created = []
            for order in orders:
                response = await self.api_client.create_listing(
                    CreateOrderRequest(
                        signature=order.signature,
                        orderbook=params.orderbook,
                        chainId=self.chain_id,
                        parameters=order.parameters,
                        source=params.source or settings.marketplace_source,
                    )
                )
                created.append(CreatedOrder(orderId=response.order_id, orderData=order))

            logger.info(f"Listed {len(created)} order(s) on {self.chain_id}")
            return CreateOrderResult(orders=created)
        except Exception as e:
            raise self.wrap_error(e, params) from e

    async def _approval_actions(self, order_inputs: List[CreateOrderInput]) -> List[Action]:
        """Approvals across all items, at most one per token contract."""
        operator = await self.protocol.get_contract_address()
        actions: List[Action] = []
        seen: Set[str] = set()

        for order_input in order_inputs:
            for approval in await get_approval_actions(
                self.signer,
                order_input,
                operator,
                self.numeric_chain_id,
            ):
                if approval.token.lower() in seen:
                    continue
                seen.add(approval.token.lower())
                actions.append(approval)

        return actions
