"""Manufacturing domain constants.

The stage catalog is the fixed production pipeline every rug goes
through.  ``STAGE_SEQUENCE`` is built once at import time and never
mutated; transitions are strictly forward, one stage at a time.
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from django.db import models


class ManufacturingStage(models.TextChoices):
    DESIGN_APPROVED = "design_approved", "Design Approved"
    YARN_PLANNING = "yarn_planning", "Yarn Planning"
    TUFTING = "tufting", "Tufting"
    TRIMMING = "trimming", "Trimming"
    WASHING = "washing", "Washing"
    DRYING = "drying", "Drying"
    FINISHING = "finishing", "Finishing"
    QC = "qc", "Quality Check"
    PACKING = "packing", "Packing"
    READY_TO_SHIP = "ready_to_ship", "Ready to Ship"


class WorkOrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In Progress"
    ON_HOLD = "on_hold", "On Hold"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class StageStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"


class Priority(models.TextChoices):
    LOW = "low", "Low"
    NORMAL = "normal", "Normal"
    HIGH = "high", "High"
    URGENT = "urgent", "Urgent"


STAGE_SEQUENCE: Tuple[str, ...] = tuple(stage.value for stage in ManufacturingStage)

INITIAL_STAGE: str = ManufacturingStage.DESIGN_APPROVED.value
FINAL_STAGE: str = ManufacturingStage.READY_TO_SHIP.value

STAGE_LABELS: Dict[str, str] = dict(ManufacturingStage.choices)

# Board columns: the first and last stages are not worked on the floor.
KANBAN_STAGES: Tuple[str, ...] = STAGE_SEQUENCE[1:-1]

PRIORITY_RANK: Dict[str, int] = {
    Priority.URGENT: 0,
    Priority.HIGH: 1,
    Priority.NORMAL: 2,
    Priority.LOW: 3,
}

# Statuses from which the pipeline cannot be advanced.
BLOCKED_STATUSES: frozenset = frozenset(
    {WorkOrderStatus.ON_HOLD, WorkOrderStatus.CANCELLED}
)

# Status changes an operator may request by hand.  ``completed`` is only
# reachable by advancing into ``ready_to_ship``.
MANUAL_STATUS_TRANSITIONS: Dict[str, frozenset] = {
    WorkOrderStatus.PENDING: frozenset(
        {WorkOrderStatus.ON_HOLD, WorkOrderStatus.CANCELLED}
    ),
    WorkOrderStatus.IN_PROGRESS: frozenset(
        {WorkOrderStatus.ON_HOLD, WorkOrderStatus.CANCELLED}
    ),
    WorkOrderStatus.ON_HOLD: frozenset(
        {
            WorkOrderStatus.PENDING,
            WorkOrderStatus.IN_PROGRESS,
            WorkOrderStatus.CANCELLED,
        }
    ),
    WorkOrderStatus.COMPLETED: frozenset(),
    WorkOrderStatus.CANCELLED: frozenset(),
}

QUALITY_SCORE_MAX = 100


def next_stage(current: str) -> Optional[str]:
    """Return the stage right after *current*, or ``None``.

    ``None`` means *current* is the final stage or not a catalog value.
    """
    try:
        index = STAGE_SEQUENCE.index(current)
    except ValueError:
        return None
    if index + 1 >= len(STAGE_SEQUENCE):
        return None
    return STAGE_SEQUENCE[index + 1]


def stage_index(stage: str) -> int:
    """Zero-based position of *stage* in the pipeline (``ValueError`` if unknown)."""
    return STAGE_SEQUENCE.index(stage)


def progress_percent(stage: str) -> int:
    """Share of the pipeline completed once *stage* is reached (0–100)."""
    return round(stage_index(stage) * 100 / (len(STAGE_SEQUENCE) - 1))
