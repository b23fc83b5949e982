"""Domain events for the Manufacturing bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class WorkOrderCreated(DomainEvent):
    """Raised when a work order enters the pipeline."""

    order_item_id: str = ""


@dataclass(frozen=True)
class WorkOrderStageAdvanced(DomainEvent):
    """Raised on every successful stage transition."""

    previous_stage: str = ""
    current_stage: str = ""
    assigned_to: Optional[str] = None


@dataclass(frozen=True)
class WorkOrderCompleted(DomainEvent):
    """Raised when a work order reaches ``ready_to_ship``."""

    assigned_to: Optional[str] = None
