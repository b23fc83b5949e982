"""Transactional outbox: recording and relaying domain events.

``record_domain_events`` is called by repositories inside the unit of work
that mutated an aggregate.  ``relay_pending_events`` is the worker side,
run periodically by the ``core.publish_outbox_events`` Celery task.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.bus import IEventBus
from shared.domain.events import DomainEvent, event_from_payload

logger = structlog.get_logger(__name__)


def record_domain_events(entity: Any, topic: str) -> List[OutboxEvent]:
    """Persist the events collected on *entity* and clear them."""
    events: List[DomainEvent] = getattr(entity, "domain_events", [])
    records = [
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=serialize_event_payload(event),
            topic=topic,
        )
        for event in events
    ]
    if hasattr(entity, "clear_domain_events"):
        entity.clear_domain_events()
    return records


def relay_pending_events(
    bus: IEventBus,
    batch_size: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> Dict[str, int]:
    """Publish a batch of pending outbox events on *bus*.

    Each event runs in its own savepoint: a handler failure marks only that
    event as ``FAILED`` and leaves the rest of the batch untouched.
    """
    batch_size = batch_size or settings.OUTBOX_BATCH_SIZE
    max_retries = max_retries if max_retries is not None else settings.OUTBOX_MAX_RETRIES

    published = 0
    failed = 0
    with transaction.atomic():
        batch = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(
                Q(status=EventStatus.PENDING)
                | Q(status=EventStatus.FAILED, retry_count__lt=max_retries)
            )
            .order_by("created_at", "id")[:batch_size]
        )
        for record in batch:
            log = logger.bind(
                outbox_event_id=str(record.id),
                event_type=record.event_type,
                aggregate_id=record.aggregate_id,
            )
            try:
                with transaction.atomic():
                    event = event_from_payload(record.event_type, record.payload)
                    handler_count = bus.publish(event)
            except Exception as exc:  # noqa: BLE001 - recorded on the event row
                record.mark_as_failed(repr(exc))
                failed += 1
                log.warning("outbox.publish_failed", error=repr(exc))
                continue
            record.mark_as_published()
            published += 1
            log.info("outbox.published", handler_count=handler_count)

    return {"published": published, "failed": failed}


def serialize_event_payload(event: DomainEvent) -> Dict[str, Any]:
    data = asdict(event)
    normalized = _normalize_for_json(data)
    return json.loads(json.dumps(normalized))


def _normalize_for_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _normalize_for_json(val) for key, val in value.items()}
    return value
