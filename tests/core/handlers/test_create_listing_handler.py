"""
Tests for listing creation.
"""

import pytest
from unittest.mock import AsyncMock

from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.execution.models import ActionType, CreateBulkOrdersAction, CreateOrderAction
from orderbook.core.handlers import CreateListingHandler
from orderbook.core.orders.models import CreateListingParams, OrderWithCounter
from orderbook.providers.marketplace.models import CreateOrderResponse


CHAIN_ID = "eip155:97476"
WALLET = "0x1111111111111111111111111111111111111111"
SEAPORT = "0x2222222222222222222222222222222222222222"
NFT = "0x5555555555555555555555555555555555555555"


def _item(token_id="1", **overrides):
    data = {"contract": NFT, "tokenId": token_id, "price": "500", "duration": 86_400_000}
    data.update(overrides)
    return data


def _order(n):
    return OrderWithCounter(parameters={"salt": str(n)}, signature=f"0xsig{n}")


@pytest.fixture
def handler(api_client, signer, protocol, chains):
    responses = iter(CreateOrderResponse(orderId=f"listing-{i}") for i in range(1, 10))
    api_client.create_listing = AsyncMock(side_effect=lambda request: next(responses))
    return CreateListingHandler(api_client, signer, CHAIN_ID, protocol, chains=chains)


@pytest.mark.asyncio
async def test_single_item_signed_as_one_order(handler, protocol, api_client):
    protocol.create_order = AsyncMock(
        return_value=[CreateOrderAction(create_order=AsyncMock(return_value=_order(1)))]
    )

    result = await handler.execute(CreateListingParams(items=[_item()]))

    assert [o.order_id for o in result.orders] == ["listing-1"]
    protocol.create_bulk_orders.assert_not_awaited()

    order_input = protocol.create_order.await_args.args[0]
    assert order_input.offer[0].token == NFT
    assert order_input.consideration[0].recipient == WALLET
    assert api_client.create_listing.await_args.args[0].signature == "0xsig1"


@pytest.mark.asyncio
async def test_several_items_use_bulk_signature(handler, protocol, api_client):
    protocol.create_bulk_orders = AsyncMock(
        return_value=[CreateBulkOrdersAction(create_bulk_orders=AsyncMock(return_value=[_order(1), _order(2)]))]
    )

    result = await handler.execute(CreateListingParams(items=[_item("1"), _item("2")]))

    assert [o.order_id for o in result.orders] == ["listing-1", "listing-2"]
    order_inputs, offerer = protocol.create_bulk_orders.await_args.args
    assert len(order_inputs) == 2
    assert offerer == WALLET
    assert api_client.create_listing.await_count == 2


@pytest.mark.asyncio
async def test_collection_approved_once(handler, protocol, signer):
    signer.provider.is_approved_for_all = AsyncMock(return_value=False)
    protocol.create_bulk_orders = AsyncMock(
        return_value=[CreateBulkOrdersAction(create_bulk_orders=AsyncMock(return_value=[_order(1), _order(2)]))]
    )
    snapshots = []
    handler.on_progress = snapshots.append

    await handler.execute(CreateListingParams(items=[_item("1"), _item("2")]))

    assert [s.action_type for s in snapshots[-1]] == [ActionType.APPROVAL, ActionType.CREATE_BULK]
    approval_tx = signer.send_transaction.await_args.args[0]
    assert approval_tx.to_address == NFT
    assert SEAPORT[2:] in approval_tx.data


@pytest.mark.asyncio
async def test_missing_duration_rejected(handler, protocol):
    with pytest.raises(OrderbookError) as exc:
        await handler.execute(CreateListingParams(items=[_item(duration=None)]))

    assert exc.value.codes == [OrderbookErrorCode.LISTING_CREATION_FAILED, OrderbookErrorCode.INVALID_PARAMETERS]
    protocol.create_order.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_chain_has_no_zone(api_client, signer, protocol, chains):
    handler = CreateListingHandler(api_client, signer, "eip155:1", protocol, chains=chains)

    with pytest.raises(OrderbookError) as exc:
        await handler.execute(CreateListingParams(items=[_item()]))

    assert OrderbookErrorCode.INVALID_PARAMETERS in exc.value.codes
