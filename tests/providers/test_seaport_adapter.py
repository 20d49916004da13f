"""
Tests for translating settlement SDK use cases into engine actions.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.execution.executor import execute_all_actions
from orderbook.core.execution.models import (
    ActionType,
    ApprovalAction,
    CreateOrderAction,
    ExchangeAction,
    TransactionType,
)
from orderbook.core.handlers import BuyListingHandler, CancelListingHandler
from orderbook.core.orders.models import (
    BuyListingParams,
    CancelListingParams,
    CancellationType,
    CreateOrderInput,
    GetOrderResponse,
    InputItem,
    OrderWithCounter,
)
from orderbook.providers.rpc import RpcPendingTransaction
from orderbook.providers.seaport import SeaportAdapter


WALLET = "0x1111111111111111111111111111111111111111"
SEAPORT = "0x2222222222222222222222222222222222222222"
WETH = "0x4444444444444444444444444444444444444444"
TX_HASH = "0x" + "ab" * 32


def _order_input():
    return CreateOrderInput(
        offerer=WALLET,
        endTime="100",
        offer=[InputItem(token=WETH, amount="5")],
        consideration=[],
    )


@pytest.mark.asyncio
async def test_contract_address_from_sdk_attribute(signer):
    adapter = SeaportAdapter(SimpleNamespace(contract=SimpleNamespace(address=SEAPORT)), signer, 97476)

    assert await adapter.get_contract_address() == SEAPORT


@pytest.mark.asyncio
async def test_create_order_translates_use_case(signer, make_pending_tx):
    tx = make_pending_tx()
    sdk = MagicMock()
    sdk.create_order = AsyncMock(return_value={
        "actions": [
            {
                "type": "approval",
                "token": WETH,
                "operator": SEAPORT,
                "itemType": 1,
                "transactionMethods": {"transact": AsyncMock(return_value=tx)},
            },
            {
                "type": "create",
                "createOrder": AsyncMock(return_value={"parameters": {"offerer": WALLET}, "signature": "0xsig"}),
            },
        ],
    })
    adapter = SeaportAdapter(sdk, signer, 97476)

    actions = await adapter.create_order(_order_input(), WALLET)

    assert [a.type for a in actions] == [ActionType.APPROVAL, ActionType.CREATE]
    assert isinstance(actions[0], ApprovalAction)
    assert actions[0].token == WETH
    assert isinstance(actions[1], CreateOrderAction)

    payload, offerer = sdk.create_order.await_args.args
    assert payload["endTime"] == "100"
    assert offerer == WALLET

    order = await execute_all_actions(actions)
    assert order == OrderWithCounter(parameters={"offerer": WALLET}, signature="0xsig")


@pytest.mark.asyncio
async def test_fulfill_order_passes_options(signer, make_pending_tx):
    sdk = MagicMock()
    sdk.fulfill_order = MagicMock(return_value=SimpleNamespace(actions=[
        SimpleNamespace(type="exchange", transaction_methods=SimpleNamespace(transact=AsyncMock(return_value=make_pending_tx()))),
    ]))
    adapter = SeaportAdapter(sdk, signer, 97476)
    order = OrderWithCounter(parameters={"offerer": WALLET}, signature="0xsig")

    [action] = await adapter.fulfill_order(order, extra_data="0xdead", units_to_fill=1, recipient_address=WALLET)

    assert isinstance(action, ExchangeAction)
    kwargs = sdk.fulfill_order.call_args.kwargs
    assert kwargs["order"] == {"parameters": {"offerer": WALLET}, "signature": "0xsig"}
    assert kwargs["extra_data"] == "0xdead"
    assert kwargs["units_to_fill"] == 1
    assert kwargs["recipient_address"] == WALLET
    assert "accounts_address" not in kwargs


@pytest.mark.asyncio
async def test_bare_hash_becomes_pending_transaction(signer):
    sdk = MagicMock()
    sdk.cancel_orders = MagicMock(return_value={"transact": AsyncMock(return_value=TX_HASH)})
    adapter = SeaportAdapter(sdk, signer, 97476)

    transact = await adapter.cancel_orders([{"offerer": WALLET}])
    pending = await transact()

    assert isinstance(pending, RpcPendingTransaction)
    assert pending.hash == TX_HASH
    assert pending.chain_id == 97476


@pytest.mark.asyncio
async def test_transaction_request_is_sent_by_signer(signer):
    sdk = MagicMock()
    sdk.cancel_orders = MagicMock(return_value={
        "transact": AsyncMock(return_value={"to": SEAPORT, "data": "0xfd9f1e10", "value": "0x0"}),
    })
    adapter = SeaportAdapter(sdk, signer, 97476)

    transact = await adapter.cancel_orders([{"offerer": WALLET}])
    await transact()

    tx = signer.send_transaction.await_args.args[0]
    assert tx.to_address == SEAPORT
    assert tx.from_address == WALLET
    assert tx.data == "0xfd9f1e10"
    assert tx.tx_type == TransactionType.CANCEL


@pytest.mark.asyncio
async def test_unknown_action_type(signer):
    sdk = MagicMock()
    sdk.create_order = AsyncMock(return_value={"actions": [{"type": "teleport"}]})
    adapter = SeaportAdapter(sdk, signer, 97476)

    with pytest.raises(OrderbookError) as exc:
        await adapter.create_order(_order_input(), WALLET)

    assert exc.value.code == OrderbookErrorCode.UNKNOWN_ERROR


def _sdk_transaction(status=1):
    """ethers-style handle whose receipt uses the SDK's own field names."""
    receipt = SimpleNamespace(hash=TX_HASH, gasUsed=50000, gasPrice=7, status=status)
    return SimpleNamespace(hash=TX_HASH, chain_id=97476, wait=AsyncMock(return_value=receipt))


@pytest.mark.asyncio
async def test_sdk_receipt_is_mapped_for_buy_listing(api_client, signer, chains):
    sdk = MagicMock()
    sdk.fulfill_order = AsyncMock(return_value={
        "actions": [{"type": "exchange", "transactionMethods": {"transact": AsyncMock(return_value=_sdk_transaction())}}],
    })
    api_client.get_listing = AsyncMock(return_value=GetOrderResponse(
        orderId="order-1",
        order=OrderWithCounter(parameters={"offerer": WALLET}, signature="0xsig"),
    ))
    handler = BuyListingHandler(api_client, signer, "eip155:97476", SeaportAdapter(sdk, signer, 97476), chains=chains)

    result = await handler.execute(BuyListingParams(orderId="order-1"))

    assert result.transaction_hash == TX_HASH
    assert result.gas_used == 50000
    assert result.gas_price == 7
    assert result.status == "success"


@pytest.mark.asyncio
async def test_sdk_receipt_status_zero_is_reverted(signer):
    sdk = MagicMock()
    sdk.cancel_orders = MagicMock(return_value={"transact": MagicMock(return_value=_sdk_transaction(status=0))})
    adapter = SeaportAdapter(sdk, signer, 97476)

    transact = await adapter.cancel_orders([{"offerer": WALLET}])
    receipt = await (await transact()).wait()

    assert receipt.transaction_hash == TX_HASH
    assert not receipt.is_success


@pytest.mark.asyncio
async def test_async_sdk_cancel_runs_on_chain(api_client, signer, chains, make_pending_tx):
    tx = make_pending_tx()

    class AsyncSdk:
        def __init__(self):
            self.cancelled = None

        async def cancel_orders(self, orders):
            self.cancelled = orders
            return {"transact": AsyncMock(return_value=tx)}

    sdk = AsyncSdk()
    components = {"offerer": WALLET, "counter": "0"}
    api_client.get_listing = AsyncMock(return_value=GetOrderResponse(
        orderId="order-1",
        order=OrderWithCounter(parameters=components, signature="0xsig"),
    ))
    handler = CancelListingHandler(api_client, signer, "eip155:97476", SeaportAdapter(sdk, signer, 97476), chains=chains)

    result = await handler.execute(
        CancelListingParams(orderId="order-1", cancellationType=CancellationType.ON_CHAIN)
    )

    assert result.transaction_hash == tx.hash
    assert sdk.cancelled == [components]
