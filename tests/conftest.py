from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.manufacturing.dtos import AdvanceStageDTO, CreateWorkOrderDTO
from modules.manufacturing.repositories.django_repository import (
    WorkOrderDjangoRepository,
)
from modules.manufacturing.services import WorkOrderService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="floor-lead", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def work_order_service():
    return WorkOrderService(work_order_repository=WorkOrderDjangoRepository())


@pytest.fixture()
def make_work_order(work_order_service):
    """Factory creating work orders through the service, optionally advanced.

    ``advance`` is the number of transitions applied after creation.
    """
    counter = {"n": 0}

    def _make(advance: int = 0, **overrides):
        counter["n"] += 1
        data = {
            "order_id": f"ORDER-{counter['n']:04d}",
            "order_item_id": f"ITEM-{counter['n']:04d}",
            "title": "Custom Moroccan 5x7",
            "size": "5x7",
            "sku": "RUG-MOR-57",
        }
        data.update(overrides)
        work_order = work_order_service.create_work_order(CreateWorkOrderDTO(**data))
        for _ in range(advance):
            work_order_service.advance_stage(str(work_order.id), AdvanceStageDTO())
        return work_order_service.get_work_order(str(work_order.id))

    return _make
