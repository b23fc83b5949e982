"""Artisan API views.

Exposes the ``ArtisanService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.artisans.dtos import CreateArtisanDTO, UpdateArtisanDTO
from modules.artisans.exceptions import ArtisanAlreadyExists, ArtisanNotFound
from modules.artisans.filters import ArtisanFilter
from modules.artisans.models import Artisan
from modules.artisans.repositories.django_repository import ArtisanDjangoRepository
from modules.artisans.serializers import ArtisanSerializer
from modules.artisans.services import ArtisanService

NOT_FOUND_MESSAGE = "Artisan not found"

UPDATABLE_FIELDS = (
    "name",
    "email",
    "phone",
    "role",
    "specialties",
    "active",
    "average_rating",
)


def _invalid(exc: PydanticValidationError) -> Response:
    return Response(
        {
            "message": "Invalid artisan payload.",
            "errors": exc.errors(include_url=False, include_context=False),
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class ArtisanViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the artisan directory.

    Uses ``ArtisanService`` with ``ArtisanDjangoRepository``.
    """

    filterset_class = ArtisanFilter
    search_fields = ["name", "email", "role"]
    ordering_fields = ["name", "created_at", "completed_orders", "average_rating"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Artisan.objects.all()
    serializer_class = ArtisanSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ArtisanService(repository=ArtisanDjangoRepository())

    def get_queryset(self):
        return self._service.list_artisans()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/artisans/{pk}/"""
        try:
            artisan = self._service.get_artisan(pk)
        except ArtisanNotFound:
            return Response(
                {"message": NOT_FOUND_MESSAGE}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(ArtisanSerializer(artisan).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/artisans/"""
        data = request.data
        try:
            dto = CreateArtisanDTO(
                name=data.get("name", ""),
                email=data.get("email", ""),
                phone=data.get("phone") or "",
                role=data.get("role") or "",
                specialties=data.get("specialties") or [],
                active=data.get("active", True),
                metadata=data.get("metadata"),
            )
        except PydanticValidationError as exc:
            return _invalid(exc)

        try:
            artisan = self._service.create_artisan(dto)
        except ArtisanAlreadyExists as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(ArtisanSerializer(artisan).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/artisans/{pk}/"""
        try:
            dto = UpdateArtisanDTO(
                **{field: request.data[field] for field in UPDATABLE_FIELDS if field in request.data}
            )
        except PydanticValidationError as exc:
            return _invalid(exc)

        try:
            artisan = self._service.update_artisan(pk, dto)
        except ArtisanNotFound:
            return Response(
                {"message": NOT_FOUND_MESSAGE}, status=status.HTTP_404_NOT_FOUND
            )
        except ArtisanAlreadyExists as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(ArtisanSerializer(artisan).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/artisans/{pk}/"""
        try:
            self._service.delete_artisan(pk)
        except ArtisanNotFound:
            return Response(
                {"message": NOT_FOUND_MESSAGE}, status=status.HTTP_404_NOT_FOUND
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
