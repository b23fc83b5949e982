"""WorkOrder and WorkOrderStage models.

Business rules implemented:
- ``current_stage`` is always a stage catalog value.
- ``status`` is ``completed`` iff the work order reached ``ready_to_ship``
  through a transition; ``completed_at`` is set at the same time.
- At most one live ``active`` stage entry per work order (partial unique
  constraint, also checked by the transition engine).
- One live work order per external order item.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel), with
  partial indexes covering live rows only.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.manufacturing.constants import (
    FINAL_STAGE,
    INITIAL_STAGE,
    QUALITY_SCORE_MAX,
    ManufacturingStage,
    Priority,
    StageStatus,
    WorkOrderStatus,
    next_stage,
    progress_percent,
)
from shared.domain.events import DomainEventMixin


class WorkOrder(DomainEventMixin, SoftDeleteModel):
    """Unit of manufacturing work for one item of a customer order.

    ``order_id`` and ``order_item_id`` are opaque references owned by the
    commerce backend.  ``assigned_to`` references an artisan but is not a
    foreign key: the directory is consulted, never enforced.
    """

    order_id: models.CharField = models.CharField(max_length=255)
    order_item_id: models.CharField = models.CharField(max_length=255)
    title: models.CharField = models.CharField(max_length=255)
    size: models.CharField = models.CharField(max_length=50, blank=True, default="")
    sku: models.CharField = models.CharField(max_length=100, blank=True, default="")
    current_stage: models.CharField = models.CharField(
        max_length=30,
        choices=ManufacturingStage.choices,
        default=INITIAL_STAGE,
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=WorkOrderStatus.choices,
        default=WorkOrderStatus.PENDING,
    )
    priority: models.CharField = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.NORMAL,
    )
    assigned_to: models.CharField = models.CharField(  # noqa: DJ01
        max_length=255, null=True, blank=True, default=None
    )
    due_date: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    started_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    notes: models.TextField = models.TextField(blank=True, default="")
    metadata: models.JSONField = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "work_order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["deleted_at"],
                name="work_order_deleted_at_idx",
                condition=models.Q(deleted_at__isnull=True),
            ),
            models.Index(fields=["status"], name="work_order_status_idx"),
            models.Index(fields=["current_stage"], name="work_order_stage_idx"),
            models.Index(fields=["order_id"], name="work_order_order_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order_item_id"],
                condition=models.Q(deleted_at__isnull=True),
                name="work_order_unique_live_item",
            ),
        ]

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------

    @property
    def upcoming_stage(self) -> str | None:
        return next_stage(self.current_stage)

    @property
    def is_final_stage(self) -> bool:
        return self.current_stage == FINAL_STAGE

    @property
    def progress(self) -> int:
        return progress_percent(self.current_stage)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.title} [{self.current_stage}/{self.status}]"


class WorkOrderStage(SoftDeleteModel):
    """Audit entry: a work order occupying a stage for a span of time.

    Entries are opened ``active`` by the transition engine and closed
    ``completed`` when the work order moves on.  ``quality_score`` and
    ``issues`` are annotations filled by the floor (QC in particular).
    """

    work_order: models.ForeignKey = models.ForeignKey(
        "manufacturing.WorkOrder",
        on_delete=models.CASCADE,
        related_name="stages",
    )
    stage: models.CharField = models.CharField(
        max_length=30, choices=ManufacturingStage.choices
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=StageStatus.choices,
        default=StageStatus.PENDING,
    )
    started_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    assigned_to: models.CharField = models.CharField(  # noqa: DJ01
        max_length=255, null=True, blank=True, default=None
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    quality_score: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MaxValueValidator(QUALITY_SCORE_MAX)],
    )
    issues: models.JSONField = models.JSONField(null=True, blank=True)
    metadata: models.JSONField = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "work_order_stage"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["deleted_at"],
                name="wo_stage_deleted_at_idx",
                condition=models.Q(deleted_at__isnull=True),
            ),
            models.Index(
                fields=["work_order", "created_at"],
                name="wo_stage_order_created_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["work_order"],
                condition=models.Q(
                    status=StageStatus.ACTIVE, deleted_at__isnull=True
                ),
                name="wo_stage_single_active",
            ),
        ]

    @property
    def duration_seconds(self) -> float | None:
        if not self.started_at or not self.completed_at:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def __str__(self) -> str:
        return f"{self.work_order_id} : {self.stage} ({self.status})"
