"""Work order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.manufacturing.constants import (
    STAGE_SEQUENCE,
    Priority,
    StageStatus,
    WorkOrderStatus,
)
from modules.manufacturing.models import WorkOrder, WorkOrderStage

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateWorkOrderSerializer(serializers.Serializer):
    """Validates the work order creation payload."""

    order_id = serializers.CharField(max_length=255)
    order_item_id = serializers.CharField(max_length=255)
    title = serializers.CharField(max_length=255)
    size = serializers.CharField(max_length=50, required=False, default="", allow_blank=True)
    sku = serializers.CharField(max_length=100, required=False, default="", allow_blank=True)
    priority = serializers.ChoiceField(
        choices=Priority.choices, required=False, default=Priority.NORMAL
    )
    assigned_to = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True, default=None
    )
    due_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, default="", allow_blank=True)
    metadata = serializers.JSONField(required=False, allow_null=True, default=None)


class UpdateWorkOrderSerializer(serializers.Serializer):
    """Validates a partial update; only sent fields are forwarded."""

    title = serializers.CharField(max_length=255, required=False)
    size = serializers.CharField(max_length=50, required=False, allow_blank=True)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True)
    priority = serializers.ChoiceField(choices=Priority.choices, required=False)
    status = serializers.ChoiceField(choices=WorkOrderStatus.choices, required=False)
    assigned_to = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class AdvanceStageSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    assigned_to = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )


class StageHistoryQuerySerializer(serializers.Serializer):
    """Optional ``stage`` / ``status`` filters of the stage history endpoint."""

    stage = serializers.ChoiceField(choices=list(STAGE_SEQUENCE), required=False)
    status = serializers.ChoiceField(choices=StageStatus.choices, required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class WorkOrderStageSerializer(serializers.ModelSerializer):
    """Read serializer for stage history entries."""

    duration_seconds = serializers.FloatField(read_only=True, allow_null=True)

    class Meta:
        model = WorkOrderStage
        fields = [
            "id",
            "work_order_id",
            "stage",
            "status",
            "started_at",
            "completed_at",
            "duration_seconds",
            "assigned_to",
            "notes",
            "quality_score",
            "issues",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class WorkOrderSerializer(serializers.ModelSerializer):
    """Read serializer for work orders with nested stage history."""

    next_stage = serializers.CharField(source="upcoming_stage", read_only=True, allow_null=True)
    progress = serializers.IntegerField(read_only=True)
    stages = WorkOrderStageSerializer(many=True, read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            "id",
            "order_id",
            "order_item_id",
            "title",
            "size",
            "sku",
            "current_stage",
            "next_stage",
            "progress",
            "status",
            "priority",
            "assigned_to",
            "due_date",
            "started_at",
            "completed_at",
            "notes",
            "metadata",
            "created_at",
            "updated_at",
            "stages",
        ]
        read_only_fields = fields


class WorkOrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for lists and the board (no nested history)."""

    progress = serializers.IntegerField(read_only=True)

    class Meta:
        model = WorkOrder
        fields = [
            "id",
            "order_id",
            "order_item_id",
            "title",
            "size",
            "sku",
            "current_stage",
            "progress",
            "status",
            "priority",
            "assigned_to",
            "due_date",
            "created_at",
        ]
        read_only_fields = fields
