"""
Progress tracking for action execution.

One ProgressStep is created per action up front. Every transition pushes a
snapshot of all steps to the caller's callback before execution moves on.
"""

import dataclasses
import logging
from typing import List, Optional, Sequence

from .models import (
    Action,
    ActionType,
    ApprovalAction,
    ConversionAction,
    ProgressCallback,
    ProgressState,
    ProgressStep,
)


logger = logging.getLogger(__name__)


_DESCRIPTIONS = {
    ActionType.APPROVAL: "Approve token for trading",
    ActionType.CREATE: "Sign order",
    ActionType.CREATE_BULK: "Sign orders",
    ActionType.OFFCHAIN_CANCEL: "Sign order cancellation",
    ActionType.EXCHANGE: "Fulfill order",
    ActionType.CANCEL_ORDER: "Cancel order on-chain",
    ActionType.CONVERSION: "Wrap native currency",
}


def describe_action(action: Action) -> str:
    """Human-readable label for a step."""
    if isinstance(action, ApprovalAction):
        return f"Approve {action.token} for trading"
    if isinstance(action, ConversionAction) and action.amount:
        return f"Wrap {action.amount} wei of native currency"
    return _DESCRIPTIONS[action.type]


def prepare_action_steps(actions: Sequence[Action]) -> List[ProgressStep]:
    return [
        ProgressStep(index=i, action_type=action.type, description=describe_action(action))
        for i, action in enumerate(actions)
    ]


class Progress:
    """
    Tracks the state of each step and reports transitions.

    The callback receives copies, so observers cannot mutate tracker state
    and every snapshot stays as it was when delivered.
    """

    def __init__(
        self,
        steps: List[ProgressStep],
        on_progress: Optional[ProgressCallback] = None,
    ):
        self._steps = steps
        self._on_progress = on_progress

    @property
    def items(self) -> List[ProgressStep]:
        return self.snapshot()

    def snapshot(self) -> List[ProgressStep]:
        return [dataclasses.replace(step) for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def update_step(self, index: int, **changes) -> None:
        """Apply field changes to one step and notify."""
        step = self._steps[index]
        for name, value in changes.items():
            setattr(step, name, value)
        self._notify()

    def mark_pending(self, index: int) -> None:
        self.update_step(index, progress_state=ProgressState.PENDING)

    def set_transaction_submitted(self, index: int, tx_hash: str, chain_id: int) -> None:
        self.update_step(
            index,
            progress_state=ProgressState.SUBMITTED,
            transaction_hash=tx_hash,
            chain_id=chain_id,
        )

    def complete_step(self, index: int) -> None:
        self.update_step(index, progress_state=ProgressState.COMPLETED)

    def fail_step(self, index: int, error: BaseException) -> None:
        self.update_step(index, progress_state=ProgressState.FAILED, error=error)

    def _notify(self) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(self.snapshot())
        except Exception:
            # Observer failures must not abort an operation mid-flight
            logger.exception("Progress callback raised")
