"""Work order service layer (Use Cases).

Orchestrates the manufacturing pipeline: work order creation, manual
status management and the stage transition engine.  The service defines
the unit-of-work boundary; repositories run inside it.

Business rules enforced:
- Stages advance strictly forward, one at a time, along ``STAGE_SEQUENCE``.
- At most one live ``active`` stage entry per work order.
- ``status`` becomes ``completed`` only by reaching ``ready_to_ship``.
- On hold and cancelled work orders do not advance.
- Every transition is atomic: the closed entry, the opened entry, the work
  order update and the outbox events commit together or not at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from modules.manufacturing.constants import (
    BLOCKED_STATUSES,
    FINAL_STAGE,
    KANBAN_STAGES,
    MANUAL_STATUS_TRANSITIONS,
    PRIORITY_RANK,
    StageStatus,
    WorkOrderStatus,
    next_stage,
)
from modules.manufacturing.dtos import AdvanceStageDTO
from modules.manufacturing.events import (
    WorkOrderCompleted,
    WorkOrderCreated,
    WorkOrderStageAdvanced,
)
from modules.manufacturing.exceptions import (
    InvalidStageTransition,
    InvalidWorkOrderStatus,
    StageHistoryCorrupted,
    StageTransitionConflict,
    WorkOrderAlreadyExists,
    WorkOrderNotFound,
    WorkOrderStoreError,
)

if TYPE_CHECKING:
    from modules.manufacturing.dtos import CreateWorkOrderDTO, UpdateWorkOrderDTO
    from modules.manufacturing.models import WorkOrder, WorkOrderStage
    from modules.manufacturing.repositories.interfaces import IWorkOrderRepository

logger = structlog.get_logger(__name__)

# Fields that may be cleared through an update; the rest ignore ``None``.
NULLABLE_UPDATE_FIELDS = frozenset({"assigned_to", "due_date"})


@dataclass(frozen=True)
class StageTransitionResult:
    work_order: WorkOrder
    previous_stage: str
    current_stage: str


class WorkOrderService:
    """Application service for WorkOrder use-cases.

    Receives its repository via constructor injection.
    """

    def __init__(self, work_order_repository: IWorkOrderRepository) -> None:
        self._repo = work_order_repository

    # ------------------------------------------------------------------
    # Stage transition engine
    # ------------------------------------------------------------------

    def advance_stage(
        self,
        work_order_id: str,
        dto: Optional[AdvanceStageDTO] = None,
    ) -> StageTransitionResult:
        """Move a work order to the next stage of the pipeline.

        Steps (one transaction):
        1. Lock the work order row.
        2. Resolve the next stage; refuse at the final stage or when blocked.
        3. Close the active stage entry, if any.
        4. Open an active entry for the next stage.
        5. Compare-and-swap ``current_stage`` and update status/timestamps.
        6. Record ``WorkOrderStageAdvanced`` (and ``WorkOrderCompleted``).

        Raises:
            WorkOrderNotFound: unknown, malformed or soft-deleted id.
            InvalidStageTransition: final stage reached or status blocked.
            StageTransitionConflict: another transition won the race.
            StageHistoryCorrupted: active entries are inconsistent.
            WorkOrderStoreError: the database failed; nothing was written.
        """
        dto = dto or AdvanceStageDTO()
        log = logger.bind(work_order_id=str(work_order_id))

        try:
            with transaction.atomic():
                result = self._advance(str(work_order_id), dto)
        except DatabaseError as exc:
            log.error("work_order.stage_advance_failed", error=repr(exc))
            raise WorkOrderStoreError("Failed to advance work order stage") from exc

        log.info(
            "work_order.stage_advanced",
            previous_stage=result.previous_stage,
            current_stage=result.current_stage,
            status=result.work_order.status,
        )
        return result

    def _advance(self, work_order_id: str, dto: AdvanceStageDTO) -> StageTransitionResult:
        work_order = self._repo.get_for_update(work_order_id)
        if work_order is None:
            raise WorkOrderNotFound("Work order not found")

        previous_stage = work_order.current_stage
        log = logger.bind(work_order_id=work_order_id, current_stage=previous_stage)

        if work_order.status in BLOCKED_STATUSES:
            log.warning("work_order.advance_blocked", status=work_order.status)
            raise InvalidStageTransition(
                f"Work order is {work_order.status} and cannot advance",
                previous_stage,
            )

        upcoming = next_stage(previous_stage)
        if upcoming is None:
            log.warning("work_order.advance_at_final_stage")
            raise InvalidStageTransition(
                "Work order is already at the final stage", previous_stage
            )

        now = timezone.now()

        active_entries = self._repo.list_stages(
            work_order_id, status=StageStatus.ACTIVE
        )
        if len(active_entries) > 1 or (
            active_entries and active_entries[0].stage != previous_stage
        ):
            log.error(
                "work_order.stage_history_corrupted",
                active_stages=[entry.stage for entry in active_entries],
            )
            raise StageHistoryCorrupted(
                f"Work order {work_order_id} has inconsistent active stage entries"
            )
        if active_entries:
            self._repo.complete_stage(active_entries[0], completed_at=now)

        self._repo.open_stage(
            work_order,
            upcoming,
            started_at=now,
            assigned_to=dto.assigned_to,
            notes=dto.notes,
        )

        is_final = upcoming == FINAL_STAGE
        changes: Dict[str, Any] = {
            "current_stage": upcoming,
            "status": WorkOrderStatus.COMPLETED if is_final else WorkOrderStatus.IN_PROGRESS,
        }
        if is_final:
            changes["completed_at"] = now
        if work_order.started_at is None:
            changes["started_at"] = now

        updated = self._repo.update_stage_if_current(work_order, previous_stage, changes)
        if not updated:
            log.warning("work_order.stage_conflict", next_stage=upcoming)
            raise StageTransitionConflict(
                "Work order stage was changed by another request", previous_stage
            )
        for field, value in changes.items():
            setattr(work_order, field, value)

        work_order.add_domain_event(
            WorkOrderStageAdvanced(
                aggregate_id=work_order.id,
                previous_stage=previous_stage,
                current_stage=upcoming,
                assigned_to=dto.assigned_to,
            )
        )
        if is_final:
            work_order.add_domain_event(
                WorkOrderCompleted(
                    aggregate_id=work_order.id,
                    assigned_to=dto.assigned_to or work_order.assigned_to,
                )
            )
        self._repo.record_events(work_order)

        refreshed = self._repo.get_by_id(work_order_id) or work_order
        return StageTransitionResult(
            work_order=refreshed,
            previous_stage=previous_stage,
            current_stage=upcoming,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_work_order(self, dto: CreateWorkOrderDTO) -> WorkOrder:
        """Create a work order with its initial ``design_approved`` entry.

        Raises:
            WorkOrderAlreadyExists: a live work order exists for the item.
        """
        log = logger.bind(order_id=dto.order_id, order_item_id=dto.order_item_id)
        try:
            with transaction.atomic():
                if self._repo.exists_for_item(dto.order_item_id):
                    raise WorkOrderAlreadyExists(
                        f"A work order already exists for order item {dto.order_item_id}."
                    )
                work_order = self._repo.create(dto.model_dump())
                work_order.add_domain_event(
                    WorkOrderCreated(
                        aggregate_id=work_order.id,
                        order_item_id=work_order.order_item_id,
                    )
                )
                self._repo.record_events(work_order)
        except IntegrityError as exc:
            log.warning("work_order.duplicate_item")
            raise WorkOrderAlreadyExists(
                f"A work order already exists for order item {dto.order_item_id}."
            ) from exc

        log.info("work_order.creation_completed", work_order_id=str(work_order.id))
        return self._repo.get_by_id(str(work_order.id)) or work_order

    @transaction.atomic
    def update_work_order(self, work_order_id: str, dto: UpdateWorkOrderDTO) -> WorkOrder:
        """Apply descriptive changes and manual status changes.

        Raises:
            WorkOrderNotFound: work order does not exist.
            InvalidWorkOrderStatus: status change not allowed by hand.
        """
        work_order = self._repo.get_for_update(str(work_order_id))
        if work_order is None:
            raise WorkOrderNotFound("Work order not found")

        changes = {
            field: value
            for field, value in dto.changes().items()
            if value is not None or field in NULLABLE_UPDATE_FIELDS
        }

        new_status = changes.get("status")
        if new_status == work_order.status:
            changes.pop("status")
        elif new_status is not None:
            allowed = MANUAL_STATUS_TRANSITIONS.get(work_order.status, frozenset())
            if new_status not in allowed:
                logger.warning(
                    "work_order.invalid_status_change",
                    work_order_id=str(work_order_id),
                    current_status=work_order.status,
                    new_status=new_status,
                )
                raise InvalidWorkOrderStatus(
                    f"Cannot change status from {work_order.status} to {new_status}."
                )

        self._repo.update(work_order, changes)
        return self._repo.get_by_id(str(work_order_id)) or work_order

    def delete_work_order(self, work_order_id: str) -> None:
        """Soft-delete a work order and its stage history."""
        if not self._repo.delete(str(work_order_id)):
            raise WorkOrderNotFound("Work order not found")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_work_order(self, work_order_id: str) -> WorkOrder:
        work_order = self._repo.get_by_id(str(work_order_id))
        if work_order is None:
            raise WorkOrderNotFound("Work order not found")
        return work_order

    def list_work_orders(self, filters: Optional[Dict[str, Any]] = None):
        return self._repo.list(filters)

    def list_stage_history(
        self,
        work_order_id: str,
        stage: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[WorkOrderStage]:
        """Live stage entries in creation order; ``[]`` when nothing matches.

        Raises:
            WorkOrderStoreError: the stage history could not be read.
        """
        try:
            return self._repo.list_stages(str(work_order_id), stage=stage, status=status)
        except DatabaseError as exc:
            logger.error(
                "work_order.stage_history_failed",
                work_order_id=str(work_order_id),
                error=repr(exc),
            )
            raise WorkOrderStoreError("Failed to fetch stage history") from exc

    def board(self) -> Dict[str, List[WorkOrder]]:
        """Work orders per floor stage, urgent first then earliest due date."""
        columns: Dict[str, List[WorkOrder]] = {stage: [] for stage in KANBAN_STAGES}
        for work_order in sorted(self._repo.board(list(KANBAN_STAGES)), key=_board_key):
            columns[work_order.current_stage].append(work_order)
        return columns


def _board_key(work_order: WorkOrder):
    return (
        PRIORITY_RANK.get(work_order.priority, len(PRIORITY_RANK)),
        work_order.due_date is None,
        work_order.due_date or work_order.created_at,
    )
