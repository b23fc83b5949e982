from django.apps import AppConfig


class ArtisansConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.artisans"
    label = "artisans"

    def ready(self) -> None:
        from modules.artisans.handlers import completed_order_stats_handler
        from modules.manufacturing.events import WorkOrderCompleted
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(WorkOrderCompleted, completed_order_stats_handler)
