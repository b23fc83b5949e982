"""Integration tests for throttling on the work order API."""

from __future__ import annotations

import pytest
from rest_framework.throttling import ScopedRateThrottle

pytestmark = pytest.mark.integration


@pytest.fixture()
def tight_rates(monkeypatch):
    monkeypatch.setitem(ScopedRateThrottle.THROTTLE_RATES, "stage_transition", "3/minute")
    monkeypatch.setitem(ScopedRateThrottle.THROTTLE_RATES, "work_order_listing", "5/minute")


def test_stage_transitions_are_throttled(auth_client, make_work_order, tight_rates):
    work_order = make_work_order()
    url = f"/api/v1/work-orders/{work_order.id}/stages/"

    for _ in range(3):
        response = auth_client.post(url, {}, format="json")
        assert response.status_code == 200

    response = auth_client.post(url, {}, format="json")
    assert response.status_code == 429
    assert response.json()["type"] == "client_error"


def test_history_reads_do_not_consume_transition_allowance(
    auth_client, make_work_order, tight_rates
):
    work_order = make_work_order()
    url = f"/api/v1/work-orders/{work_order.id}/stages/"

    for _ in range(10):
        assert auth_client.get(url).status_code == 200

    assert auth_client.post(url, {}, format="json").status_code == 200


def test_listing_has_its_own_limit(auth_client, tight_rates):
    for _ in range(5):
        assert auth_client.get("/api/v1/work-orders/").status_code == 200

    assert auth_client.get("/api/v1/work-orders/").status_code == 429
