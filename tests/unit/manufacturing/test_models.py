"""Unit tests for WorkOrder / WorkOrderStage model behaviour."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.manufacturing.constants import StageStatus
from modules.manufacturing.models import WorkOrder, WorkOrderStage

pytestmark = pytest.mark.unit


def _persisted_work_order(**overrides) -> WorkOrder:
    data = {
        "order_id": "ORDER-1",
        "order_item_id": "ITEM-1",
        "title": "Abstract Wave 9x12",
    }
    data.update(overrides)
    return WorkOrder.objects.create(**data)


class TestWorkOrderDefaults:
    def test_defaults(self):
        work_order = WorkOrder(order_id="O", order_item_id="I", title="T")
        assert work_order.current_stage == "design_approved"
        assert work_order.status == "pending"
        assert work_order.priority == "normal"
        assert work_order.assigned_to is None

    def test_pipeline_helpers(self):
        work_order = WorkOrder(title="T", current_stage="qc")
        assert work_order.upcoming_stage == "packing"
        assert work_order.is_final_stage is False
        assert work_order.progress == 78

    def test_final_stage_helpers(self):
        work_order = WorkOrder(title="T", current_stage="ready_to_ship")
        assert work_order.upcoming_stage is None
        assert work_order.is_final_stage is True
        assert work_order.progress == 100

    def test_str(self):
        work_order = WorkOrder(title="Vintage Medallion 6x9", current_stage="tufting", status="in_progress")
        assert str(work_order) == "Vintage Medallion 6x9 [tufting/in_progress]"


class TestWorkOrderConstraints:
    def test_one_live_work_order_per_item(self):
        _persisted_work_order()
        with pytest.raises(IntegrityError), transaction.atomic():
            _persisted_work_order(order_id="ORDER-2")

    def test_item_reusable_after_soft_delete(self):
        first = _persisted_work_order()
        first.delete()

        second = _persisted_work_order()

        assert second.pk != first.pk
        assert WorkOrder.all_objects.filter(order_item_id="ITEM-1").count() == 2

    def test_single_active_stage_entry(self):
        work_order = _persisted_work_order()
        WorkOrderStage.objects.create(work_order=work_order, stage="design_approved", status=StageStatus.ACTIVE)
        with pytest.raises(IntegrityError), transaction.atomic():
            WorkOrderStage.objects.create(work_order=work_order, stage="yarn_planning", status=StageStatus.ACTIVE)

    def test_completed_entries_are_unrestricted(self):
        work_order = _persisted_work_order()
        for stage in ("design_approved", "yarn_planning", "tufting"):
            WorkOrderStage.objects.create(work_order=work_order, stage=stage, status=StageStatus.COMPLETED)
        assert work_order.stages.count() == 3


class TestWorkOrderStage:
    def test_duration_seconds(self):
        start = timezone.now()
        entry = WorkOrderStage(stage="washing", started_at=start, completed_at=start + timedelta(hours=2))
        assert entry.duration_seconds == 7200

    def test_duration_none_while_open(self):
        entry = WorkOrderStage(stage="washing", started_at=timezone.now())
        assert entry.duration_seconds is None

    def test_reverse_relation_hides_soft_deleted_entries(self):
        work_order = _persisted_work_order()
        kept = WorkOrderStage.objects.create(work_order=work_order, stage="design_approved", status=StageStatus.COMPLETED)
        removed = WorkOrderStage.objects.create(work_order=work_order, stage="yarn_planning", status=StageStatus.COMPLETED)
        removed.delete()

        assert list(work_order.stages.all()) == [kept]
        assert WorkOrderStage.all_objects.filter(work_order=work_order).count() == 2

    def test_history_ordered_by_creation(self):
        work_order = _persisted_work_order()
        first = WorkOrderStage.objects.create(work_order=work_order, stage="design_approved")
        second = WorkOrderStage.objects.create(work_order=work_order, stage="yarn_planning")
        assert list(work_order.stages.all()) == [first, second]
