"""Artisan URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.artisans.views import ArtisanViewSet

router = DefaultRouter(trailing_slash=True)
router.register("artisans", ArtisanViewSet, basename="artisan")

urlpatterns = router.urls
