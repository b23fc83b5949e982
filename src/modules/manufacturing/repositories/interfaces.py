"""Work order repository interface.

Extends ``IRepository[WorkOrder]`` with what the transition engine needs:
row-locked reads, stage history access and the compare-and-swap update on
``current_stage``.

The Service Layer depends exclusively on this contract.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.manufacturing.models import WorkOrder, WorkOrderStage


class IWorkOrderRepository(IRepository["WorkOrder"]):
    """Repository contract for the WorkOrder aggregate (work order + stages)."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> WorkOrder:
        """Create a work order together with its initial active stage entry."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[WorkOrder]:
        """Retrieve a live work order with a row-level lock."""

    @abstractmethod
    def exists_for_item(self, order_item_id: str) -> bool:
        """Whether a live work order already exists for the order item."""

    @abstractmethod
    def list_stages(
        self,
        work_order_id: str,
        stage: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[WorkOrderStage]:
        """Live stage entries, oldest first, optionally filtered."""

    @abstractmethod
    def complete_stage(self, entry: WorkOrderStage, completed_at: datetime) -> None:
        """Close an active stage entry."""

    @abstractmethod
    def open_stage(
        self,
        work_order: WorkOrder,
        stage: str,
        started_at: datetime,
        assigned_to: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> WorkOrderStage:
        """Insert a new active stage entry."""

    @abstractmethod
    def update_stage_if_current(
        self,
        work_order: WorkOrder,
        expected_stage: str,
        changes: Dict[str, Any],
    ) -> int:
        """Apply *changes* only if ``current_stage`` still equals *expected_stage*.

        Returns the number of rows updated (0 or 1).
        """

    @abstractmethod
    def update(self, work_order: WorkOrder, changes: Dict[str, Any]) -> WorkOrder:
        """Apply plain field changes to a work order."""

    @abstractmethod
    def board(self, stages: List[str]) -> List[WorkOrder]:
        """Live, non-cancelled work orders currently in one of *stages*."""

    @abstractmethod
    def record_events(self, work_order: WorkOrder) -> int:
        """Write the events collected on *work_order* to the outbox."""
