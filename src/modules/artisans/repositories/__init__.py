"""Artisan repositories package."""

from modules.artisans.repositories.django_repository import ArtisanDjangoRepository
from modules.artisans.repositories.interfaces import IArtisanRepository

__all__ = ["ArtisanDjangoRepository", "IArtisanRepository"]
