"""Generic repository interface.

``IRepository[T]`` is the base contract that every module-level repository
interface extends.  Services depend on these abstractions and receive the
Django ORM implementations through their constructors, so unit tests can
swap in stubs without touching the database.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    ``T`` is the aggregate root managed by the repository
    (e.g. ``WorkOrder``, ``Artisan``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve a live (not soft-deleted) entity by primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List live entities with optional ORM look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Soft-delete an entity; ``False`` when nothing matched."""
