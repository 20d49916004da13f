"""
Create Offer

Signs a bid for a single token and registers it with the marketplace:
1. Approve the protocol to move the offer currency (if needed)
2. Wrap native currency to cover a wrapped-native shortfall (if needed)
3. Sign the order
4. Submit the signed order to the marketplace
"""

import logging
from typing import List, Optional, Sequence

from ...config import settings
from ...providers.marketplace.models import CreateOrderRequest
from ..execution.errors import OrderbookError, OrderbookErrorCode
from ..execution.models import Action
from ..orders.builder import build_offer_order_input, compute_end_time, prepare_fees
from ..orders.models import (
    CreatedOrder,
    CreateOfferParams,
    CreateOrderResult,
    CurrencyToken,
    Fee,
    OfferItem,
    OrderWithCounter,
)
from ..orders.requirements import get_approval_actions, get_conversion_action
from .base import OperationHandler


logger = logging.getLogger(__name__)


class CreateOfferHandler(OperationHandler[CreateOfferParams, CreateOrderResult]):
    """Create an offer on one token."""

    failure_code = OrderbookErrorCode.OFFER_CREATION_FAILED

    def __init__(
        self,
        *args,
        currencies: Optional[Sequence[CurrencyToken]] = None,
        default_duration_ms: Optional[int] = None,
        **kwargs,
    ):
        """
        Args:
            currencies: Supported currencies of the orderbook. The first one is
                treated as the wrapped-native token when the chain registry has
                none configured. Fetched from the marketplace when omitted.
            default_duration_ms: Lifetime for items without a duration
        """
        super().__init__(*args, **kwargs)
        self.currencies: Optional[List[CurrencyToken]] = None if currencies is None else list(currencies)
        self.default_duration_ms = default_duration_ms or settings.default_offer_duration_ms

    async def execute(self, params: CreateOfferParams) -> CreateOrderResult:
        try:
            self._validate_items(params.items)
            wallet_address = await self.get_wallet_address()
            fees = prepare_fees(params.marketplace_fees)

            return await self._handle_single_offer(params.items[0], wallet_address, fees, params)
        except Exception as e:
            raise self.wrap_error(e, params) from e

    def _validate_items(self, items: List[OfferItem]) -> None:
        if not items:
            raise OrderbookError(
                OrderbookErrorCode.INVALID_PARAMETERS,
                "At least one item must be provided",
            )
        if len(items) != 1:
            raise OrderbookError(
                OrderbookErrorCode.UNSUPPORTED_MULTI_ITEM_OFFER,
                "Offer of multiple items is not supported",
                context={"item_count": len(items)},
            )

    async def _wrapped_native_address(self, item: OfferItem, orderbook: str) -> Optional[str]:
        configured = self.chains.wrapped_native_for(self.chain_id)
        if configured:
            return configured
        if self.currencies is None:
            self.currencies = await self.api_client.get_supported_currencies(
                self.chain_id,
                item.contract,
                orderbook,
            )
            logger.debug(f"Fetched {len(self.currencies)} supported currencies for {item.contract}")
        if self.currencies:
            return self.currencies[0].contract_address
        return None

    async def _handle_single_offer(
        self,
        item: OfferItem,
        wallet_address: str,
        fees: List[Fee],
        params: CreateOfferParams,
    ) -> CreateOrderResult:
        duration = self.default_duration_ms if item.duration is None else item.duration
        end_time = compute_end_time(duration)

        create_order_input = build_offer_order_input(
            item,
            wallet_address,
            end_time,
            fees,
            self.chains.zone_for(self.chain_id),
        )

        operator = await self.protocol.get_contract_address()
        actions: List[Action] = []
        actions.extend(
            await get_approval_actions(
                self.signer,
                create_order_input,
                operator,
                self.numeric_chain_id,
            )
        )

        wrapped_native = await self._wrapped_native_address(item, params.orderbook)
        if wrapped_native and wrapped_native.lower() == item.currency_contract_address.lower():
            conversion = await get_conversion_action(
                self.signer,
                wallet_address,
                wrapped_native,
                int(item.price),
                self.numeric_chain_id,
            )
            if conversion is not None:
                logger.info(f"Wrapping {conversion.amount} wei to fund offer on {item.contract}")
                actions.append(conversion)

        actions.extend(await self.protocol.create_order(create_order_input, wallet_address))

        order: OrderWithCounter = await self.execute_blockchain_operation(actions)

        response = await self.api_client.create_offer(
            CreateOrderRequest(
                signature=order.signature,
                orderbook=params.orderbook,
                chainId=self.chain_id,
                parameters=order.parameters,
                source=params.source or settings.marketplace_source,
            )
        )

        return CreateOrderResult(
            orders=[CreatedOrder(orderId=response.order_id, orderData=order)],
        )
