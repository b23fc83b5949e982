import django.core.validators
import django.db.models.deletion
import uuid6
from django.db import migrations, models

STAGE_CHOICES = [
    ("design_approved", "Design Approved"),
    ("yarn_planning", "Yarn Planning"),
    ("tufting", "Tufting"),
    ("trimming", "Trimming"),
    ("washing", "Washing"),
    ("drying", "Drying"),
    ("finishing", "Finishing"),
    ("qc", "Quality Check"),
    ("packing", "Packing"),
    ("ready_to_ship", "Ready to Ship"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="WorkOrder",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("order_id", models.CharField(max_length=255)),
                ("order_item_id", models.CharField(max_length=255)),
                ("title", models.CharField(max_length=255)),
                ("size", models.CharField(blank=True, default="", max_length=50)),
                ("sku", models.CharField(blank=True, default="", max_length=100)),
                (
                    "current_stage",
                    models.CharField(
                        choices=STAGE_CHOICES,
                        default="design_approved",
                        max_length=30,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("in_progress", "In Progress"),
                            ("on_hold", "On Hold"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[
                            ("low", "Low"),
                            ("normal", "Normal"),
                            ("high", "High"),
                            ("urgent", "Urgent"),
                        ],
                        default="normal",
                        max_length=10,
                    ),
                ),
                (
                    "assigned_to",
                    models.CharField(
                        blank=True, default=None, max_length=255, null=True
                    ),
                ),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("metadata", models.JSONField(blank=True, null=True)),
            ],
            options={
                "db_table": "work_order",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        condition=models.Q(("deleted_at__isnull", True)),
                        fields=["deleted_at"],
                        name="work_order_deleted_at_idx",
                    ),
                    models.Index(fields=["status"], name="work_order_status_idx"),
                    models.Index(
                        fields=["current_stage"], name="work_order_stage_idx"
                    ),
                    models.Index(fields=["order_id"], name="work_order_order_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("deleted_at__isnull", True)),
                        fields=("order_item_id",),
                        name="work_order_unique_live_item",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="WorkOrderStage",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "deleted_at",
                    models.DateTimeField(blank=True, default=None, null=True),
                ),
                ("stage", models.CharField(choices=STAGE_CHOICES, max_length=30)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("active", "Active"),
                            ("completed", "Completed"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "assigned_to",
                    models.CharField(
                        blank=True, default=None, max_length=255, null=True
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "quality_score",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[django.core.validators.MaxValueValidator(100)],
                    ),
                ),
                ("issues", models.JSONField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, null=True)),
                (
                    "work_order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stages",
                        to="manufacturing.workorder",
                    ),
                ),
            ],
            options={
                "db_table": "work_order_stage",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        condition=models.Q(("deleted_at__isnull", True)),
                        fields=["deleted_at"],
                        name="wo_stage_deleted_at_idx",
                    ),
                    models.Index(
                        fields=["work_order", "created_at"],
                        name="wo_stage_order_created_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(
                            ("status", "active"), ("deleted_at__isnull", True)
                        ),
                        fields=("work_order",),
                        name="wo_stage_single_active",
                    ),
                ],
            },
        ),
    ]
