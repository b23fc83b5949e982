from django.apps import AppConfig


class ManufacturingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.manufacturing"
    label = "manufacturing"

    def ready(self) -> None:
        from modules.manufacturing.events import (
            WorkOrderCompleted,
            WorkOrderCreated,
            WorkOrderStageAdvanced,
        )
        from modules.manufacturing.handlers import (
            work_order_completed_handler,
            work_order_created_handler,
            work_order_stage_advanced_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(WorkOrderCreated, work_order_created_handler)
        event_bus.subscribe(WorkOrderStageAdvanced, work_order_stage_advanced_handler)
        event_bus.subscribe(WorkOrderCompleted, work_order_completed_handler)
