"""
Tests for buying listings and accepting offers.
"""

import pytest
from unittest.mock import AsyncMock

from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.execution.models import ApprovalAction, ExchangeAction, ProgressState
from orderbook.core.handlers import AcceptOfferHandler, BuyListingHandler
from orderbook.core.orders.models import (
    AcceptOfferParams,
    BuyListingParams,
    GetOrderResponse,
    OrderWithCounter,
)


CHAIN_ID = "eip155:97476"
WALLET = "0x1111111111111111111111111111111111111111"
SEAPORT = "0x2222222222222222222222222222222222222222"
WETH = "0x4444444444444444444444444444444444444444"

ORDER = OrderWithCounter(parameters={"offerer": "0x7777777777777777777777777777777777777777"}, signature="0xabc")


def _fetched(extra_data=None):
    return GetOrderResponse(orderId="order-1", order=ORDER, extraData=extra_data)


class TestBuyListing:
    @pytest.mark.asyncio
    async def test_fulfils_listing(self, api_client, signer, protocol, chains, make_pending_tx):
        tx = make_pending_tx()
        api_client.get_listing = AsyncMock(return_value=_fetched())
        protocol.fulfill_order = AsyncMock(return_value=[ExchangeAction(transact=AsyncMock(return_value=tx))])
        handler = BuyListingHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)

        result = await handler.execute(BuyListingParams(orderId="order-1"))

        assert result.transaction_hash == tx.hash
        assert result.gas_used == 21000
        assert result.gas_price == 1_000_000_000
        assert result.status == "success"

        api_client.get_listing.assert_awaited_once_with("order-1", WALLET)
        kwargs = protocol.fulfill_order.await_args.kwargs
        assert protocol.fulfill_order.await_args.args == (ORDER,)
        assert kwargs["extra_data"] == ""
        assert kwargs["units_to_fill"] is None

    @pytest.mark.asyncio
    async def test_zone_extra_data_fills_single_unit(self, api_client, signer, protocol, chains, make_pending_tx):
        api_client.get_listing = AsyncMock(return_value=_fetched(extra_data="0xdead"))
        protocol.fulfill_order = AsyncMock(
            return_value=[ExchangeAction(transact=AsyncMock(return_value=make_pending_tx()))]
        )
        handler = BuyListingHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)

        await handler.execute(BuyListingParams(orderId="order-1"))

        kwargs = protocol.fulfill_order.await_args.kwargs
        assert kwargs["extra_data"] == "0xdead"
        assert kwargs["units_to_fill"] == 1

    @pytest.mark.asyncio
    async def test_payment_approval_precedes_exchange(self, api_client, signer, protocol, chains, make_pending_tx):
        snapshots = []
        api_client.get_listing = AsyncMock(return_value=_fetched())
        protocol.fulfill_order = AsyncMock(return_value=[
            ApprovalAction(token=WETH, operator=SEAPORT, transact=AsyncMock(return_value=make_pending_tx())),
            ExchangeAction(transact=AsyncMock(return_value=make_pending_tx())),
        ])
        handler = BuyListingHandler(
            api_client, signer, CHAIN_ID, protocol, on_progress=snapshots.append, chains=chains,
        )

        await handler.execute(BuyListingParams(orderId="order-1"))

        assert len(snapshots[-1]) == 2
        assert all(s.progress_state == ProgressState.COMPLETED for s in snapshots[-1])

    @pytest.mark.asyncio
    async def test_missing_listing_runs_nothing(self, api_client, signer, protocol, chains):
        """Marketplace has no such listing: fail without any progress."""
        snapshots = []
        handler = BuyListingHandler(
            api_client, signer, CHAIN_ID, protocol, on_progress=snapshots.append, chains=chains,
        )

        with pytest.raises(OrderbookError) as exc:
            await handler.execute(BuyListingParams(orderId="missing"))

        assert exc.value.codes == [OrderbookErrorCode.BUY_LISTING_FAILED, OrderbookErrorCode.ORDER_NOT_FOUND]
        assert exc.value.message == "Listing not found"
        assert snapshots == []
        protocol.fulfill_order.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_transaction(self, api_client, signer, protocol, chains):
        api_client.get_listing = AsyncMock(return_value=_fetched())
        protocol.fulfill_order = AsyncMock(
            return_value=[ExchangeAction(transact=AsyncMock(side_effect=RuntimeError("user denied")))]
        )
        handler = BuyListingHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)

        with pytest.raises(OrderbookError) as exc:
            await handler.execute(BuyListingParams(orderId="order-1"))

        assert exc.value.codes == [
            OrderbookErrorCode.BUY_LISTING_FAILED,
            OrderbookErrorCode.SEAPORT_TRANSACTION_FAILED,
        ]
        assert exc.value.context["params"].order_id == "order-1"
        assert exc.value.context["progress"][0].progress_state == ProgressState.FAILED


class TestAcceptOffer:
    @pytest.mark.asyncio
    async def test_proceeds_go_to_wallet(self, api_client, signer, protocol, chains, make_pending_tx):
        tx = make_pending_tx()
        api_client.get_offer = AsyncMock(return_value=_fetched())
        protocol.fulfill_order = AsyncMock(return_value=[ExchangeAction(transact=AsyncMock(return_value=tx))])
        handler = AcceptOfferHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)

        result = await handler.execute(AcceptOfferParams(orderId="order-1"))

        assert result.transaction_hash == tx.hash
        api_client.get_offer.assert_awaited_once_with("order-1", WALLET)
        assert protocol.fulfill_order.await_args.kwargs["recipient_address"] == WALLET

    @pytest.mark.asyncio
    async def test_missing_offer(self, api_client, signer, protocol, chains):
        handler = AcceptOfferHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)

        with pytest.raises(OrderbookError) as exc:
            await handler.execute(AcceptOfferParams(orderId="missing"))

        assert exc.value.codes == [OrderbookErrorCode.ACCEPT_OFFER_FAILED, OrderbookErrorCode.ORDER_NOT_FOUND]
        assert exc.value.message == "Offer not found"
