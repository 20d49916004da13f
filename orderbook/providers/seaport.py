"""
Settlement protocol interface and SDK adapter.

Handlers only depend on ``SettlementProtocol``. ``SeaportAdapter`` wraps a
Seaport-style SDK object (anything exposing create_order / fulfill_order /
cancel_orders that return "use cases" with an ``actions`` list) and
translates its loosely-typed actions, orders and transaction handles into
the engine's own types.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from orderbook.core.execution.errors import OrderbookError, OrderbookErrorCode
from orderbook.core.execution.models import (
    Action,
    ActionType,
    ApprovalAction,
    CancelOrderAction,
    ConversionAction,
    CreateBulkOrdersAction,
    CreateOrderAction,
    ExchangeAction,
    PendingTransaction,
    TransactionReceipt,
    TransactionType,
    TransactMethod,
)
from orderbook.core.execution.tx_builder import TransactionBuilder, parse_hex_int
from orderbook.core.orders.models import CreateOrderInput, OrderWithCounter

from .rpc import RpcPendingTransaction

logger = logging.getLogger(__name__)


class SettlementProtocol(Protocol):
    """What the engine needs from the order-settlement protocol."""

    async def get_contract_address(self) -> str:
        ...

    async def create_order(self, order_input: CreateOrderInput, offerer: str) -> List[Action]:
        ...

    async def create_bulk_orders(
        self,
        order_inputs: List[CreateOrderInput],
        offerer: str,
    ) -> List[Action]:
        ...

    async def fulfill_order(
        self,
        order: OrderWithCounter,
        *,
        extra_data: str = "",
        units_to_fill: Optional[int] = None,
        recipient_address: Optional[str] = None,
        accounts_address: Optional[str] = None,
    ) -> List[Action]:
        ...

    async def cancel_orders(self, orders: List[Dict[str, Any]]) -> TransactMethod:
        ...


def _field(obj: Any, *names: str) -> Any:
    """Read the first present attribute or key among ``names``."""
    for name in names:
        if isinstance(obj, dict):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class SeaportAdapter:
    """
    Adapts a Seaport-style SDK to ``SettlementProtocol``.

    Args:
        sdk: SDK instance bound to the wallet
        signer: Signer used to broadcast raw transaction requests and to
            resolve bare transaction hashes into pending handles
        chain_id: Numeric chain id
    """

    def __init__(self, sdk: Any, signer: Any, chain_id: int):
        self.sdk = sdk
        self.signer = signer
        self.chain_id = chain_id

    async def get_contract_address(self) -> str:
        getter = _field(self.sdk, "get_contract_address")
        if callable(getter):
            return await _maybe_await(getter())

        contract = _field(self.sdk, "contract")
        address = _field(self.sdk, "contract_address") or _field(contract, "address")
        if callable(address):
            address = await _maybe_await(address())
        if not address:
            raise OrderbookError(
                OrderbookErrorCode.INVALID_PARAMETERS,
                "Settlement protocol contract address unavailable",
            )
        return address

    async def create_order(self, order_input: CreateOrderInput, offerer: str) -> List[Action]:
        use_case = await _maybe_await(self.sdk.create_order(order_input.to_payload(), offerer))
        return self._translate_actions(_field(use_case, "actions") or [])

    async def create_bulk_orders(
        self,
        order_inputs: List[CreateOrderInput],
        offerer: str,
    ) -> List[Action]:
        payloads = [order_input.to_payload() for order_input in order_inputs]
        use_case = await _maybe_await(self.sdk.create_bulk_orders(payloads, offerer))
        return self._translate_actions(_field(use_case, "actions") or [])

    async def fulfill_order(
        self,
        order: OrderWithCounter,
        *,
        extra_data: str = "",
        units_to_fill: Optional[int] = None,
        recipient_address: Optional[str] = None,
        accounts_address: Optional[str] = None,
    ) -> List[Action]:
        kwargs: Dict[str, Any] = {
            "order": order.model_dump(),
            "extra_data": extra_data,
        }
        if units_to_fill is not None:
            kwargs["units_to_fill"] = units_to_fill
        if recipient_address:
            kwargs["recipient_address"] = recipient_address
        if accounts_address:
            kwargs["accounts_address"] = accounts_address

        use_case = await _maybe_await(self.sdk.fulfill_order(**kwargs))
        return self._translate_actions(_field(use_case, "actions") or [])

    async def cancel_orders(self, orders: List[Dict[str, Any]]) -> TransactMethod:
        methods = await _maybe_await(self.sdk.cancel_orders(orders))
        return self._wrap_transact(methods, TransactionType.CANCEL)

    # =========================================================================
    # Translation
    # =========================================================================

    def _translate_actions(self, sdk_actions: List[Any]) -> List[Action]:
        return [self._translate_action(action) for action in sdk_actions]

    def _translate_action(self, sdk_action: Any) -> Action:
        raw_type = _field(sdk_action, "type")
        try:
            action_type = ActionType(raw_type)
        except ValueError:
            raise OrderbookError(
                OrderbookErrorCode.UNKNOWN_ERROR,
                f"Unsupported protocol action type: {raw_type!r}",
            ) from None

        if action_type == ActionType.CREATE:
            create = _field(sdk_action, "create_order", "createOrder")

            async def create_order() -> OrderWithCounter:
                return self._to_order(await _maybe_await(create()))

            return CreateOrderAction(create_order=create_order)

        if action_type == ActionType.CREATE_BULK:
            create_bulk = _field(sdk_action, "create_bulk_orders", "createBulkOrders")

            async def create_bulk_orders() -> List[OrderWithCounter]:
                return [self._to_order(o) for o in await _maybe_await(create_bulk())]

            return CreateBulkOrdersAction(create_bulk_orders=create_bulk_orders)

        methods = _field(sdk_action, "transaction_methods", "transactionMethods")
        if action_type == ActionType.APPROVAL:
            return ApprovalAction(
                token=_field(sdk_action, "token") or "",
                operator=_field(sdk_action, "operator") or "",
                transact=self._wrap_transact(methods, TransactionType.APPROVE),
                identifier_or_criteria=str(_field(sdk_action, "identifier_or_criteria", "identifierOrCriteria") or "0"),
                item_type=_field(sdk_action, "item_type", "itemType"),
            )
        if action_type == ActionType.EXCHANGE:
            return ExchangeAction(transact=self._wrap_transact(methods, TransactionType.EXCHANGE))
        if action_type == ActionType.CANCEL_ORDER:
            return CancelOrderAction(transact=self._wrap_transact(methods, TransactionType.CANCEL))
        if action_type == ActionType.CONVERSION:
            return ConversionAction(transact=self._wrap_transact(methods, TransactionType.WRAP))

        raise OrderbookError(
            OrderbookErrorCode.UNKNOWN_ERROR,
            f"Protocol returned an unexpected {action_type.value} action",
        )

    def _wrap_transact(self, methods: Any, tx_type: TransactionType) -> TransactMethod:
        transact: Optional[Callable[[], Any]] = _field(methods, "transact") if methods is not None else None
        if transact is None and callable(methods):
            transact = methods
        if transact is None:
            raise OrderbookError(
                OrderbookErrorCode.UNKNOWN_ERROR,
                "Protocol action has no transaction method",
            )

        async def run() -> PendingTransaction:
            return await self._to_pending(await _maybe_await(transact()), tx_type)

        return run

    async def _to_pending(self, result: Any, tx_type: TransactionType) -> PendingTransaction:
        """Normalise whatever the SDK returned into a pending transaction handle."""
        if isinstance(result, str):
            return RpcPendingTransaction(self.signer.provider, result, self.chain_id)

        if hasattr(result, "hash") and hasattr(result, "wait"):
            return _SdkPendingTransaction(result, getattr(result, "chain_id", None) or self.chain_id)

        to_address = _field(result, "to")
        if to_address:
            sender = _field(result, "from") or await self.signer.get_address()
            tx = TransactionBuilder.build_from_raw(
                chain_id=self.chain_id,
                from_address=sender,
                to_address=to_address,
                data=_field(result, "data") or "0x",
                value=parse_hex_int(_field(result, "value") or 0),
                tx_type=tx_type,
            )
            return await self.signer.send_transaction(tx)

        raise OrderbookError(
            OrderbookErrorCode.UNKNOWN_ERROR,
            f"Cannot interpret protocol transaction result: {result!r}",
        )

    @staticmethod
    def _to_order(result: Any) -> OrderWithCounter:
        if isinstance(result, OrderWithCounter):
            return result
        return OrderWithCounter(
            parameters=dict(_field(result, "parameters") or {}),
            signature=_field(result, "signature") or "",
        )


def _to_receipt(receipt: Any, tx_hash: str) -> TransactionReceipt:
    """Map an SDK receipt (ethers-style or JSON-RPC shaped) onto ``TransactionReceipt``."""
    if isinstance(receipt, TransactionReceipt):
        return receipt
    if receipt is None:
        raise OrderbookError(
            OrderbookErrorCode.SEAPORT_TRANSACTION_FAILED,
            f"No receipt returned for transaction {tx_hash}",
            context={"transactionHash": tx_hash},
        )

    status = _field(receipt, "status")
    return TransactionReceipt(
        transaction_hash=_field(receipt, "transaction_hash", "transactionHash", "hash") or tx_hash,
        block_number=parse_hex_int(_field(receipt, "block_number", "blockNumber")),
        block_hash=_field(receipt, "block_hash", "blockHash"),
        gas_used=parse_hex_int(_field(receipt, "gas_used", "gasUsed")),
        gas_price=parse_hex_int(
            _field(receipt, "effective_gas_price", "effectiveGasPrice", "gas_price", "gasPrice")
        ),
        status=1 if status is None else parse_hex_int(status),
    )


class _SdkPendingTransaction:
    """SDK transaction handle pinned to a chain, yielding engine receipts."""

    def __init__(self, inner: Any, chain_id: int):
        self._inner = inner
        self.hash = inner.hash
        self.chain_id = chain_id

    async def wait(self) -> TransactionReceipt:
        return _to_receipt(await _maybe_await(self._inner.wait()), self.hash)
