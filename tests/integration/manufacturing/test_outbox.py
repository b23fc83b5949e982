"""Integration tests for outbox events written by the transition engine
and their relay to the in-process event bus."""

from __future__ import annotations

import pytest

from modules.artisans.models import Artisan
from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import relay_pending_events
from modules.core.tasks import publish_outbox_events
from modules.manufacturing.events import WorkOrderCompleted
from modules.manufacturing.exceptions import InvalidStageTransition
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.integration


def _event_types(work_order_id):
    return list(
        OutboxEvent.objects.filter(aggregate_id=str(work_order_id))
        .order_by("created_at", "id")
        .values_list("event_type", flat=True)
    )


def test_create_writes_outbox_event(make_work_order):
    work_order = make_work_order()

    event = OutboxEvent.objects.get(aggregate_id=str(work_order.id))
    assert event.event_type == "WorkOrderCreated"
    assert event.topic == "manufacturing"
    assert event.status == EventStatus.PENDING
    assert event.payload["order_item_id"] == work_order.order_item_id


def test_advance_writes_stage_advanced_event(make_work_order):
    work_order = make_work_order(advance=1)

    assert _event_types(work_order.id) == ["WorkOrderCreated", "WorkOrderStageAdvanced"]
    event = OutboxEvent.objects.get(event_type="WorkOrderStageAdvanced")
    assert event.payload["previous_stage"] == "design_approved"
    assert event.payload["current_stage"] == "yarn_planning"


def test_final_transition_also_writes_completed_event(make_work_order):
    work_order = make_work_order(advance=9, assigned_to="ahmed")

    types = _event_types(work_order.id)
    assert types.count("WorkOrderStageAdvanced") == 9
    assert types[-1] == "WorkOrderCompleted"
    completed = OutboxEvent.objects.get(event_type="WorkOrderCompleted")
    assert completed.payload["assigned_to"] == "ahmed"


def test_refused_transition_writes_nothing(work_order_service, make_work_order):
    work_order = make_work_order(advance=9)
    before = OutboxEvent.objects.count()

    with pytest.raises(InvalidStageTransition):
        work_order_service.advance_stage(str(work_order.id))

    assert OutboxEvent.objects.count() == before


# ===========================================================================
# Relay
# ===========================================================================


def test_relay_task_credits_assigned_artisan(make_work_order):
    artisan = Artisan.objects.create(name="Ahmed Benali", email="ahmed@atelier.ma")
    make_work_order(advance=9, assigned_to=str(artisan.id))

    result = publish_outbox_events()

    assert result["failed"] == 0
    assert result["published"] == OutboxEvent.objects.count()
    assert not OutboxEvent.objects.exclude(status=EventStatus.PUBLISHED).exists()
    artisan.refresh_from_db()
    assert artisan.completed_orders == 1


def test_relay_skips_unknown_assignee(make_work_order):
    make_work_order(advance=9, assigned_to="Someone Not In The Directory")

    result = publish_outbox_events()

    assert result["failed"] == 0


def test_published_events_are_not_relayed_twice(make_work_order):
    artisan = Artisan.objects.create(name="Fatima", email="fatima@atelier.ma")
    make_work_order(advance=9, assigned_to=str(artisan.id))

    publish_outbox_events()
    second = publish_outbox_events()

    assert second == {"published": 0, "failed": 0}
    artisan.refresh_from_db()
    assert artisan.completed_orders == 1


def test_handler_failure_marks_only_that_event(make_work_order):
    class Exploding:
        def handle(self, event):
            raise RuntimeError("stats service down")

    bus = InMemoryEventBus()
    bus.subscribe(WorkOrderCompleted, Exploding())
    make_work_order(advance=9)

    result = relay_pending_events(bus, batch_size=50, max_retries=3)

    assert result["failed"] == 1
    failed = OutboxEvent.objects.get(status=EventStatus.FAILED)
    assert failed.event_type == "WorkOrderCompleted"
    assert failed.retry_count == 1
    assert "stats service down" in failed.error_message
    assert OutboxEvent.objects.filter(status=EventStatus.PUBLISHED).count() == result["published"]


def test_failed_events_stop_after_max_retries(make_work_order):
    class Exploding:
        def handle(self, event):
            raise RuntimeError("boom")

    bus = InMemoryEventBus()
    bus.subscribe(WorkOrderCompleted, Exploding())
    make_work_order(advance=9)

    for _ in range(3):
        relay_pending_events(bus, batch_size=50, max_retries=2)

    failed = OutboxEvent.objects.get(status=EventStatus.FAILED)
    assert failed.retry_count == 2


def test_batch_size_limits_relay(make_work_order):
    make_work_order(advance=3)

    result = relay_pending_events(InMemoryEventBus(), batch_size=2)

    assert result == {"published": 2, "failed": 0}
    assert OutboxEvent.objects.filter(status=EventStatus.PENDING).count() == 2
