"""
Action and transaction models for the execution engine.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union


class ActionType(str, Enum):
    """Kinds of executable steps."""
    APPROVAL = "approval"
    CREATE = "create"
    CREATE_BULK = "createBulk"
    OFFCHAIN_CANCEL = "offChainCancel"
    EXCHANGE = "exchange"
    CANCEL_ORDER = "cancelOrder"
    CONVERSION = "conversion"


class ProgressState(str, Enum):
    """Progress step lifecycle."""
    NOT_STARTED = "not-started"  # Created, executor has not reached it
    PENDING = "pending"          # In flight
    SUBMITTED = "submitted"      # Transaction broadcast, awaiting receipt
    COMPLETED = "completed"
    FAILED = "failed"


class TransactionType(str, Enum):
    """Types of prepared transactions."""
    APPROVE = "approve"
    SET_APPROVAL_FOR_ALL = "set_approval_for_all"
    WRAP = "wrap"
    EXCHANGE = "exchange"
    CANCEL = "cancel"


@dataclass
class PreparedTransaction:
    """A transaction ready to be handed to the wallet for signing and broadcast."""
    tx_id: str                                  # Internal tracking ID
    tx_type: TransactionType
    chain_id: int
    from_address: str
    to_address: str
    data: str                                   # Encoded calldata (hex)
    value: int = 0                              # Wei to send
    description: str = ""
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to an eth_sendTransaction request object."""
        return {
            "from": self.from_address,
            "to": self.to_address,
            "data": self.data,
            "value": hex(self.value),
            "chainId": hex(self.chain_id),
        }


@dataclass(frozen=True)
class TransactionReceipt:
    """Mined transaction receipt."""
    transaction_hash: str
    block_number: int
    gas_used: int
    gas_price: int                              # Effective gas price (wei)
    status: int                                 # 1 = success, 0 = reverted
    block_hash: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == 1


class PendingTransaction(Protocol):
    """Handle on a broadcast transaction."""

    hash: str
    chain_id: int

    async def wait(self) -> TransactionReceipt:
        ...


TransactMethod = Callable[[], Awaitable[PendingTransaction]]


@dataclass(frozen=True)
class ApprovalAction:
    """Grant the protocol operator permission to move a token."""
    token: str
    operator: str
    transact: TransactMethod
    identifier_or_criteria: str = "0"
    item_type: Optional[int] = None
    type: ActionType = field(default=ActionType.APPROVAL, init=False)


@dataclass(frozen=True)
class CreateOrderAction:
    """Sign a single order. No transaction is broadcast."""
    create_order: Callable[[], Awaitable[Any]]
    type: ActionType = field(default=ActionType.CREATE, init=False)


@dataclass(frozen=True)
class CreateBulkOrdersAction:
    """Sign several orders with one bulk signature."""
    create_bulk_orders: Callable[[], Awaitable[Any]]
    type: ActionType = field(default=ActionType.CREATE_BULK, init=False)


@dataclass(frozen=True)
class OffChainCancelAction:
    """Sign an off-chain cancellation for the marketplace."""
    create_cancel_signature: Callable[[], Awaitable[Any]]
    type: ActionType = field(default=ActionType.OFFCHAIN_CANCEL, init=False)


@dataclass(frozen=True)
class ExchangeAction:
    """Fulfill an order on-chain."""
    transact: TransactMethod
    type: ActionType = field(default=ActionType.EXCHANGE, init=False)


@dataclass(frozen=True)
class CancelOrderAction:
    """Cancel orders on-chain."""
    transact: TransactMethod
    type: ActionType = field(default=ActionType.CANCEL_ORDER, init=False)


@dataclass(frozen=True)
class ConversionAction:
    """Wrap native currency into its ERC-20 form."""
    transact: TransactMethod
    amount: int = 0
    type: ActionType = field(default=ActionType.CONVERSION, init=False)


Action = Union[
    ApprovalAction,
    CreateOrderAction,
    CreateBulkOrdersAction,
    OffChainCancelAction,
    ExchangeAction,
    CancelOrderAction,
    ConversionAction,
]

TRANSACTION_ACTION_TYPES = (ApprovalAction, ExchangeAction, CancelOrderAction, ConversionAction)


@dataclass
class ProgressStep:
    """Observable state of one action."""
    index: int
    action_type: ActionType
    description: str
    progress_state: ProgressState = ProgressState.NOT_STARTED
    transaction_hash: Optional[str] = None
    chain_id: Optional[int] = None
    error: Optional[BaseException] = None

    @property
    def is_resolved(self) -> bool:
        return self.progress_state in {ProgressState.COMPLETED, ProgressState.FAILED}


ProgressCallback = Callable[[List[ProgressStep]], None]
