"""
Action executor.

Runs an ordered list of actions to completion:
- Signature steps (create, createBulk, offChainCancel) await their closure
- Transaction steps (approval, exchange, cancelOrder, conversion) broadcast,
  record the hash, then wait for the receipt
- The last action's result is returned
- A failing step is marked failed and re-raised with a step-type error code
"""

import logging
from typing import Any, Optional, Sequence, TypeVar, cast

from .errors import OrderbookError, OrderbookErrorCode
from .models import (
    Action,
    ActionType,
    ApprovalAction,
    CreateBulkOrdersAction,
    CreateOrderAction,
    OffChainCancelAction,
    ProgressCallback,
    TRANSACTION_ACTION_TYPES,
)
from .progress import Progress, prepare_action_steps


logger = logging.getLogger(__name__)

R = TypeVar("R")


_STEP_ERROR_CODES = {
    ActionType.APPROVAL: OrderbookErrorCode.SEAPORT_APPROVAL_FAILED,
    ActionType.CREATE: OrderbookErrorCode.SEAPORT_SIGNATURE_FAILED,
    ActionType.CREATE_BULK: OrderbookErrorCode.SEAPORT_SIGNATURE_FAILED,
    ActionType.OFFCHAIN_CANCEL: OrderbookErrorCode.OFFCHAIN_CANCEL_ORDER_FAILED,
    ActionType.EXCHANGE: OrderbookErrorCode.SEAPORT_TRANSACTION_FAILED,
    ActionType.CANCEL_ORDER: OrderbookErrorCode.SEAPORT_TRANSACTION_FAILED,
    ActionType.CONVERSION: OrderbookErrorCode.TOKEN_CONVERSION_FAILED,
}


async def _run_action(action: Action, index: int, progress: Progress) -> Any:
    """Execute one action, reporting submission for transaction steps."""
    if isinstance(action, CreateOrderAction):
        return await action.create_order()
    if isinstance(action, CreateBulkOrdersAction):
        return await action.create_bulk_orders()
    if isinstance(action, OffChainCancelAction):
        return await action.create_cancel_signature()
    if isinstance(action, TRANSACTION_ACTION_TYPES):
        tx = await action.transact()
        progress.set_transaction_submitted(index, tx.hash, int(tx.chain_id))
        logger.info(f"Transaction submitted for {action.type.value}: {tx.hash}")
        return await tx.wait()
    raise TypeError(f"Unsupported action: {action!r}")


def _step_error(action: Action, error: Exception, context: dict) -> OrderbookError:
    action_type = getattr(action, "type", None)
    code = _STEP_ERROR_CODES.get(action_type, OrderbookErrorCode.UNKNOWN_ERROR)

    if isinstance(action, ApprovalAction):
        message = f"Failed to approve {action.token or 'token'}"
    elif action_type is not None:
        message = f"Failed to {action_type.value}"
    else:
        message = "Failed to execute action"

    return OrderbookError(code, message, cause=error, context=context)


async def execute_all_actions(
    actions: Sequence[Action],
    on_progress: Optional[ProgressCallback] = None,
    chain_id: Optional[str] = None,
) -> R:
    """
    Execute actions strictly in order and return the final action's result.

    Args:
        actions: Ordered, non-empty list of actions
        on_progress: Called with a snapshot of all steps on every transition
        chain_id: CAIP-2 chain id recorded in error context

    Returns:
        The result of the last action (order, signature, or receipt)

    Raises:
        OrderbookError: INVALID_PARAMETERS for an empty list, a step-type code
            for a failing step, UNKNOWN_ERROR if no final result was produced
    """
    if not actions:
        raise OrderbookError(
            OrderbookErrorCode.INVALID_PARAMETERS,
            "No actions provided",
        )

    progress = Progress(prepare_action_steps(actions), on_progress)
    final_result: Optional[Any] = None
    last_index = len(actions) - 1

    logger.debug(f"Executing {len(actions)} actions: {[a.type.value for a in actions]}")

    for i, action in enumerate(actions):
        progress.mark_pending(i)

        try:
            result = await _run_action(action, i, progress)
        except Exception as e:
            progress.fail_step(i, e)
            logger.warning(f"Action {i} ({getattr(action, 'type', action)}) failed: {e}")
            raise _step_error(
                action,
                e,
                {
                    "chain_id": chain_id,
                    "action_type": getattr(action, "type", None),
                    "action_index": i,
                    "progress": progress.items,
                },
            ) from e

        progress.complete_step(i)

        if i == last_index:
            final_result = result

    if final_result is None:
        raise OrderbookError(
            OrderbookErrorCode.UNKNOWN_ERROR,
            "Final result not found",
            context={"chain_id": chain_id, "progress": progress.items},
        )

    return cast(R, final_result)
