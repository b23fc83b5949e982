"""Event handlers reacting to manufacturing events."""

from __future__ import annotations

import structlog

from modules.artisans.repositories.django_repository import ArtisanDjangoRepository
from modules.artisans.services import ArtisanService
from modules.manufacturing.events import WorkOrderCompleted
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class CompletedOrderStatsHandler(IEventHandler[WorkOrderCompleted]):
    """Credits the assigned artisan when a work order reaches ready_to_ship."""

    def handle(self, event: WorkOrderCompleted) -> None:
        if not event.assigned_to:
            logger.info(
                "artisan.completed_order_unassigned",
                work_order_id=str(event.aggregate_id),
            )
            return
        service = ArtisanService(repository=ArtisanDjangoRepository())
        service.record_completed_order(event.assigned_to)


completed_order_stats_handler = CompletedOrderStatsHandler()
