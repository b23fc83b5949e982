"""Asynchronous tasks of the core module."""

import structlog
from celery import shared_task

from modules.core.outbox import relay_pending_events
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.debug_task")
def debug_task():
    """Diagnostic task used to check that workers are consuming."""
    logger.info("debug_task.executed", status="ok")
    return {"status": "ok", "message": "Celery is working"}


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size=None):
    """Relay pending outbox events to the in-process event bus."""
    result = relay_pending_events(event_bus, batch_size=batch_size)
    logger.info("outbox.relay_completed", **result)
    return result
