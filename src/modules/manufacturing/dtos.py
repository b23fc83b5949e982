"""Work order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateWorkOrderDTO``: input for work order creation.
- ``UpdateWorkOrderDTO``: partial update; unset fields are left untouched.
- ``AdvanceStageDTO``: optional annotations for a stage transition.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.manufacturing.constants import Priority, WorkOrderStatus


def _strip_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateWorkOrderDTO(BaseModel):
    """Immutable DTO for work order creation requests."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    order_item_id: str
    title: str
    size: str = ""
    sku: str = ""
    priority: str = Priority.NORMAL
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    notes: str = ""
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("order_id", "order_item_id", "title")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field may not be blank.")
        return v

    @field_validator("priority")
    @classmethod
    def priority_must_be_known(cls, v: str) -> str:
        if v not in Priority.values:
            raise ValueError(f"Unknown priority: {v}.")
        return v

    @field_validator("assigned_to")
    @classmethod
    def normalize_assignee(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)


class UpdateWorkOrderDTO(BaseModel):
    """Immutable DTO for partial work order updates.

    Only fields explicitly provided are applied (``model_fields_set``), so
    ``assigned_to=None`` clears the assignee while omitting it keeps it.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    size: Optional[str] = None
    sku: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    notes: Optional[str] = None

    @field_validator("priority")
    @classmethod
    def priority_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in Priority.values:
            raise ValueError(f"Unknown priority: {v}.")
        return v

    @field_validator("status")
    @classmethod
    def status_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in WorkOrderStatus.values:
            raise ValueError(f"Unknown status: {v}.")
        return v

    @field_validator("assigned_to")
    @classmethod
    def normalize_assignee(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)

    def changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class AdvanceStageDTO(BaseModel):
    """Immutable DTO for a stage transition request.

    Both annotations land on the newly opened stage entry.
    """

    model_config = ConfigDict(frozen=True)

    notes: Optional[str] = None
    assigned_to: Optional[str] = None

    @field_validator("assigned_to")
    @classmethod
    def normalize_assignee(cls, v: Optional[str]) -> Optional[str]:
        return _strip_or_none(v)
