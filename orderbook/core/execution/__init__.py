"""
Action Execution Layer

Provides the engine that runs multi-step orderbook operations:
- Action models: the closed set of step types (approval, create, createBulk,
  offChainCancel, exchange, cancelOrder, conversion)
- Progress: per-step state reported to a caller callback
- execute_all_actions: strictly sequential executor
- TransactionBuilder: calldata for approvals and wrapping
- OrderbookError: the typed error with machine-readable codes

Usage:
    from orderbook.core.execution import execute_all_actions, ExchangeAction

    receipt = await execute_all_actions(
        [ExchangeAction(transact=fulfill)],
        on_progress=lambda steps: print(steps[-1].progress_state),
    )
"""

from .models import (
    Action,
    ActionType,
    ApprovalAction,
    CancelOrderAction,
    ConversionAction,
    CreateBulkOrdersAction,
    CreateOrderAction,
    ExchangeAction,
    OffChainCancelAction,
    PendingTransaction,
    PreparedTransaction,
    ProgressCallback,
    ProgressState,
    ProgressStep,
    TransactionReceipt,
    TransactionType,
    TransactMethod,
)

from .errors import (
    OrderbookError,
    OrderbookErrorCode,
)

from .progress import (
    Progress,
    prepare_action_steps,
)

from .tx_builder import (
    MAX_UINT256,
    TransactionBuilder,
)

from .executor import (
    execute_all_actions,
)

__all__ = [
    # Models
    "Action",
    "ActionType",
    "ApprovalAction",
    "CancelOrderAction",
    "ConversionAction",
    "CreateBulkOrdersAction",
    "CreateOrderAction",
    "ExchangeAction",
    "OffChainCancelAction",
    "PendingTransaction",
    "PreparedTransaction",
    "ProgressCallback",
    "ProgressState",
    "ProgressStep",
    "TransactionReceipt",
    "TransactionType",
    "TransactMethod",
    # Errors
    "OrderbookError",
    "OrderbookErrorCode",
    # Progress
    "Progress",
    "prepare_action_steps",
    # Transaction Builder
    "MAX_UINT256",
    "TransactionBuilder",
    # Executor
    "execute_all_actions",
]
