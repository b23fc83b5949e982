"""Artisan DRF serializers for API input/output.

Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.artisans.models import Artisan


class ArtisanSerializer(serializers.ModelSerializer):
    """Read serializer for the Artisan resource."""

    class Meta:
        model = Artisan
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "role",
            "specialties",
            "active",
            "completed_orders",
            "average_rating",
            "metadata",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
