"""Django ORM implementation of the Artisan repository.

Methods return ``None`` instead of raising for missing entities; the
Service Layer decides how to translate that into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from modules.artisans.models import Artisan
from modules.artisans.repositories.interfaces import IArtisanRepository

logger = structlog.get_logger(__name__)


class ArtisanDjangoRepository(IArtisanRepository):
    """Concrete Artisan repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Artisan]:
        """Retrieve an artisan by primary key (``None`` for malformed IDs)."""
        try:
            return Artisan.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> QuerySet:
        queryset = Artisan.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Artisan) -> Artisan:
        """Persist (create or update) an artisan."""
        is_new = entity._state.adding
        entity.save()
        logger.info("artisan.saved", artisan_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        artisan = self.get_by_id(id)
        if not artisan:
            return False
        artisan.delete()
        logger.info("artisan.soft_deleted", artisan_id=str(id))
        return True

    def get_by_email(self, email: str) -> Optional[Artisan]:
        return Artisan.all_objects.filter(email__iexact=email).first()

    def increment_completed_orders(self, id: str) -> int:
        try:
            return Artisan.objects.filter(id=id).update(
                completed_orders=F("completed_orders") + 1,
                updated_at=timezone.now(),
            )
        except (ValueError, ValidationError):
            return 0
