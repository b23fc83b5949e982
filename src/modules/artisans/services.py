"""Artisan service layer (Use Cases).

Orchestrates business logic for the artisan directory, delegating
persistence to the injected ``IArtisanRepository``.

Business rules enforced here:
- Email must be unique among artisans.
- Specialties are stage catalog values (validated by the DTOs).
- Completed-order statistics only move through ``record_completed_order``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import transaction

from modules.artisans.exceptions import ArtisanAlreadyExists, ArtisanNotFound
from modules.artisans.models import Artisan

if TYPE_CHECKING:
    from modules.artisans.dtos import CreateArtisanDTO, UpdateArtisanDTO
    from modules.artisans.repositories.interfaces import IArtisanRepository

logger = structlog.get_logger(__name__)


class ArtisanService:
    """Application service for Artisan use-cases.

    Receives an ``IArtisanRepository`` via constructor injection.
    """

    def __init__(self, repository: IArtisanRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_artisan(self, dto: CreateArtisanDTO) -> Artisan:
        """Register a new artisan.

        Raises:
            ArtisanAlreadyExists: if the email is already taken.
        """
        log = logger.bind(email=dto.email)

        if self._repo.get_by_email(dto.email):
            log.warning("artisan.duplicate_email")
            raise ArtisanAlreadyExists("Email already registered.")

        artisan = Artisan(
            name=dto.name,
            email=dto.email,
            phone=dto.phone,
            role=dto.role,
            specialties=list(dto.specialties),
            active=dto.active,
            metadata=dto.metadata,
        )
        artisan = self._repo.save(artisan)
        log.info("artisan.created", artisan_id=str(artisan.id))
        return artisan

    @transaction.atomic
    def update_artisan(self, id: str, dto: UpdateArtisanDTO) -> Artisan:
        """Update an existing artisan with the supplied fields.

        Raises:
            ArtisanNotFound: if the artisan does not exist.
            ArtisanAlreadyExists: if the new email collides.
        """
        artisan = self._repo.get_by_id(id)
        if not artisan:
            raise ArtisanNotFound(f"Artisan {id} not found.")

        log = logger.bind(artisan_id=str(id))

        if dto.email is not None and dto.email.lower() != artisan.email.lower():
            if self._repo.get_by_email(dto.email):
                log.warning("artisan.duplicate_email")
                raise ArtisanAlreadyExists("Email already registered.")

        for field in (
            "name",
            "email",
            "phone",
            "role",
            "specialties",
            "active",
            "average_rating",
        ):
            value = getattr(dto, field)
            if value is not None:
                setattr(artisan, field, value)

        artisan = self._repo.save(artisan)
        log.info("artisan.updated")
        return artisan

    @transaction.atomic
    def delete_artisan(self, id: str) -> None:
        """Soft-delete an artisan.

        Raises:
            ArtisanNotFound: if the artisan does not exist.
        """
        if not self._repo.delete(id):
            raise ArtisanNotFound(f"Artisan {id} not found.")

    def record_completed_order(self, id: str) -> bool:
        """Count one more finished work order for the artisan.

        Work orders reference artisans loosely, so an unknown id is logged
        and ignored rather than raised.
        """
        updated = self._repo.increment_completed_orders(id)
        if not updated:
            logger.info("artisan.completed_order_skipped", artisan_ref=str(id))
            return False
        logger.info("artisan.completed_order_recorded", artisan_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_artisans(self, filters: Optional[Dict[str, Any]] = None):
        return self._repo.list(filters)

    def get_artisan(self, id: str) -> Artisan:
        """Retrieve a single artisan by ID.

        Raises:
            ArtisanNotFound: if the artisan does not exist.
        """
        artisan = self._repo.get_by_id(id)
        if not artisan:
            raise ArtisanNotFound(f"Artisan {id} not found.")
        return artisan
