"""Manufacturing domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
HTTP responses.
"""

from __future__ import annotations

from typing import Optional


class WorkOrderNotFound(Exception):
    """The requested work order does not exist or has been soft-deleted."""


class WorkOrderAlreadyExists(Exception):
    """A live work order already exists for the order item."""


class InvalidStageTransition(Exception):
    """The work order cannot move to a next stage.

    Raised at the final stage and while the work order is on hold or
    cancelled.  ``current_stage`` is reported back to the caller.
    """

    def __init__(self, message: str, current_stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.current_stage = current_stage


class StageTransitionConflict(InvalidStageTransition):
    """Another transition moved the work order first (lost compare-and-swap)."""


class StageHistoryCorrupted(Exception):
    """Stage history breaks the single-active-entry invariant."""


class InvalidWorkOrderStatus(Exception):
    """A manual status change is not allowed from the current status."""


class WorkOrderStoreError(Exception):
    """The record store failed; the whole operation was rolled back."""
