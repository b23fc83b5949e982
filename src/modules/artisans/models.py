"""Artisan directory model.

Business rules implemented:
- Email is unique among artisans.
- ``specialties`` only holds stage catalog values.
- ``average_rating`` stays within 0.00 to 5.00.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel), with a
  partial index covering live rows only.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.manufacturing.constants import STAGE_SEQUENCE

MAX_RATING = Decimal("5.00")


class Artisan(SoftDeleteModel):
    """A member of the production floor that work orders can be assigned to."""

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=50, blank=True, default="")
    role = models.CharField(max_length=100, blank=True, default="")
    specialties = models.JSONField(default=list, blank=True)
    active = models.BooleanField(default=True)
    completed_orders = models.PositiveIntegerField(default=0)
    average_rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(MAX_RATING)],
    )
    metadata = models.JSONField(null=True, blank=True)

    class Meta:
        db_table = "artisan"
        ordering = ["name"]
        indexes = [
            models.Index(
                fields=["deleted_at"],
                name="artisan_deleted_at_idx",
                condition=models.Q(deleted_at__isnull=True),
            ),
            models.Index(fields=["active"], name="artisan_active_idx"),
        ]

    def clean(self) -> None:
        super().clean()
        unknown = [stage for stage in self.specialties or [] if stage not in STAGE_SEQUENCE]
        if unknown:
            raise ValidationError(
                {"specialties": f"Unknown stages: {', '.join(map(str, unknown))}."}
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.role or 'artisan'})"
