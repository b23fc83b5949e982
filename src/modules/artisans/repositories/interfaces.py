"""Artisan repository interface.

Extends ``IRepository[Artisan]`` with the email look-up behind the
uniqueness rule and the completed-orders counter.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.artisans.models import Artisan


class IArtisanRepository(IRepository["Artisan"]):
    """Repository contract for the Artisan aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Artisan]:
        """Retrieve an artisan by email address."""

    @abstractmethod
    def increment_completed_orders(self, id: str) -> int:
        """Atomically add one completed order; returns rows updated."""
