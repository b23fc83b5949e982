"""Django ORM implementation of the WorkOrder repository.

Satisfies ``IWorkOrderRepository`` using Django's QuerySet API.  The
repository never opens the unit of work for the transition engine: the
service owns the ``transaction.atomic()`` block and every call below runs
inside it.

Concurrency control on stage transitions combines ``select_for_update()``
(ignored by backends without row locks) with a compare-and-swap update
filtered on ``current_stage``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from modules.core.outbox import record_domain_events
from modules.manufacturing.constants import (
    INITIAL_STAGE,
    Priority,
    StageStatus,
    WorkOrderStatus,
)
from modules.manufacturing.models import WorkOrder, WorkOrderStage
from modules.manufacturing.repositories.interfaces import IWorkOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "manufacturing"


class WorkOrderDjangoRepository(IWorkOrderRepository):
    """Concrete WorkOrder repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + initial stage entry)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> WorkOrder:
        """Create a work order and open its ``design_approved`` entry."""
        work_order = WorkOrder(
            order_id=data["order_id"],
            order_item_id=data["order_item_id"],
            title=data["title"],
            size=data.get("size") or "",
            sku=data.get("sku") or "",
            priority=data.get("priority") or Priority.NORMAL,
            assigned_to=data.get("assigned_to"),
            due_date=data.get("due_date"),
            notes=data.get("notes") or "",
            metadata=data.get("metadata"),
        )
        work_order.save()

        self.open_stage(
            work_order,
            INITIAL_STAGE,
            started_at=timezone.now(),
            assigned_to=work_order.assigned_to,
        )

        logger.info(
            "work_order.created",
            work_order_id=str(work_order.id),
            order_item_id=work_order.order_item_id,
        )
        return work_order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[WorkOrder]:
        """Retrieve a live work order with its stage history prefetched.

        Returns ``None`` for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return WorkOrder.objects.prefetch_related("stages").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[WorkOrder]:
        """Retrieve a live work order with a row-level lock (SELECT FOR UPDATE)."""
        try:
            return WorkOrder.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        """Live work orders; *filters* are plain ORM look-ups."""
        queryset = WorkOrder.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def exists_for_item(self, order_item_id: str) -> bool:
        return WorkOrder.objects.filter(order_item_id=order_item_id).exists()

    def board(self, stages: List[str]) -> List[WorkOrder]:
        return list(
            WorkOrder.objects.filter(current_stage__in=stages).exclude(
                status=WorkOrderStatus.CANCELLED
            )
        )

    # ------------------------------------------------------------------
    # Stage history
    # ------------------------------------------------------------------

    def list_stages(
        self,
        work_order_id: str,
        stage: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[WorkOrderStage]:
        """Live stage entries for a work order in creation order.

        A malformed ``work_order_id`` yields an empty list.
        """
        try:
            queryset = WorkOrderStage.objects.filter(work_order_id=work_order_id)
            if stage:
                queryset = queryset.filter(stage=stage)
            if status:
                queryset = queryset.filter(status=status)
            return list(queryset.order_by("created_at", "id"))
        except (ValueError, ValidationError):
            return []

    def complete_stage(self, entry: WorkOrderStage, completed_at: datetime) -> None:
        entry.status = StageStatus.COMPLETED
        entry.completed_at = completed_at
        entry.save(update_fields=["status", "completed_at"])

    def open_stage(
        self,
        work_order: WorkOrder,
        stage: str,
        started_at: datetime,
        assigned_to: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> WorkOrderStage:
        return WorkOrderStage.objects.create(
            work_order=work_order,
            stage=stage,
            status=StageStatus.ACTIVE,
            started_at=started_at,
            assigned_to=assigned_to,
            notes=notes or "",
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_stage_if_current(
        self,
        work_order: WorkOrder,
        expected_stage: str,
        changes: Dict[str, Any],
    ) -> int:
        """Compare-and-swap on ``current_stage``; returns rows updated."""
        return WorkOrder.objects.filter(
            id=work_order.id, current_stage=expected_stage
        ).update(updated_at=timezone.now(), **changes)

    def update(self, work_order: WorkOrder, changes: Dict[str, Any]) -> WorkOrder:
        if not changes:
            return work_order
        for field, value in changes.items():
            setattr(work_order, field, value)
        work_order.save(update_fields=list(changes))
        logger.info(
            "work_order.updated",
            work_order_id=str(work_order.id),
            fields=sorted(changes),
        )
        return work_order

    @transaction.atomic
    def save(self, entity: WorkOrder) -> WorkOrder:
        """Persist (create or update) a work order and its pending events."""
        entity.save()
        self.record_events(entity)
        return entity

    def record_events(self, work_order: WorkOrder) -> int:
        records = record_domain_events(work_order, topic=OUTBOX_TOPIC)
        return len(records)

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete a work order and its stage history."""
        work_order = self.get_for_update(id)
        if not work_order:
            return False
        stage_count, _ = WorkOrderStage.objects.filter(work_order=work_order).delete()
        work_order.delete()
        logger.info(
            "work_order.soft_deleted",
            work_order_id=str(id),
            stage_count=stage_count,
        )
        return True
