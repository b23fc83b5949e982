"""Event handlers for Manufacturing domain events."""

from __future__ import annotations

import structlog

from modules.manufacturing.events import (
    WorkOrderCompleted,
    WorkOrderCreated,
    WorkOrderStageAdvanced,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class WorkOrderCreatedHandler(IEventHandler[WorkOrderCreated]):
    def handle(self, event: WorkOrderCreated) -> None:
        logger.info(
            "work_order.event.created",
            work_order_id=str(event.aggregate_id),
            order_item_id=event.order_item_id,
        )


class WorkOrderStageAdvancedHandler(IEventHandler[WorkOrderStageAdvanced]):
    def handle(self, event: WorkOrderStageAdvanced) -> None:
        logger.info(
            "work_order.event.stage_advanced",
            work_order_id=str(event.aggregate_id),
            previous_stage=event.previous_stage,
            current_stage=event.current_stage,
        )


class WorkOrderCompletedHandler(IEventHandler[WorkOrderCompleted]):
    def handle(self, event: WorkOrderCompleted) -> None:
        logger.info(
            "work_order.event.completed",
            work_order_id=str(event.aggregate_id),
            assigned_to=event.assigned_to,
        )


work_order_created_handler = WorkOrderCreatedHandler()
work_order_stage_advanced_handler = WorkOrderStageAdvancedHandler()
work_order_completed_handler = WorkOrderCompletedHandler()
