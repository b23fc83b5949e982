import django_filters

from modules.manufacturing.constants import (
    ManufacturingStage,
    Priority,
    WorkOrderStatus,
)
from modules.manufacturing.models import WorkOrder


class WorkOrderFilter(django_filters.FilterSet):
    stage = django_filters.ChoiceFilter(
        field_name="current_stage", choices=ManufacturingStage.choices
    )
    status = django_filters.ChoiceFilter(choices=WorkOrderStatus.choices)
    priority = django_filters.ChoiceFilter(choices=Priority.choices)
    assigned_to = django_filters.CharFilter(field_name="assigned_to", lookup_expr="exact")
    order_id = django_filters.CharFilter(field_name="order_id", lookup_expr="exact")
    due_before = django_filters.DateTimeFilter(field_name="due_date", lookup_expr="lte")
    due_after = django_filters.DateTimeFilter(field_name="due_date", lookup_expr="gte")

    class Meta:
        model = WorkOrder
        fields = [
            "stage",
            "status",
            "priority",
            "assigned_to",
            "order_id",
            "due_before",
            "due_after",
        ]
