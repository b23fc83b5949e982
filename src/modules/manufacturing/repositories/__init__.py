"""Work order repositories package."""

from modules.manufacturing.repositories.django_repository import (
    WorkOrderDjangoRepository,
)
from modules.manufacturing.repositories.interfaces import IWorkOrderRepository

__all__ = ["IWorkOrderRepository", "WorkOrderDjangoRepository"]
