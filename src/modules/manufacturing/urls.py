"""Manufacturing URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.manufacturing.views import WorkOrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register("work-orders", WorkOrderViewSet, basename="work-order")

urlpatterns = router.urls
