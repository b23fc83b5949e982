"""Work order API views.

Exposes the ``WorkOrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes.  A stage transition that fails unexpectedly still
answers JSON ``{message, error}`` with status 500.
"""

from __future__ import annotations

import structlog
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.manufacturing.constants import STAGE_LABELS, STAGE_SEQUENCE
from modules.manufacturing.dtos import (
    AdvanceStageDTO,
    CreateWorkOrderDTO,
    UpdateWorkOrderDTO,
)
from modules.manufacturing.exceptions import (
    InvalidStageTransition,
    InvalidWorkOrderStatus,
    StageHistoryCorrupted,
    WorkOrderAlreadyExists,
    WorkOrderNotFound,
    WorkOrderStoreError,
)
from modules.manufacturing.filters import WorkOrderFilter
from modules.manufacturing.models import WorkOrder
from modules.manufacturing.repositories.django_repository import (
    WorkOrderDjangoRepository,
)
from modules.manufacturing.serializers import (
    AdvanceStageSerializer,
    CreateWorkOrderSerializer,
    StageHistoryQuerySerializer,
    UpdateWorkOrderSerializer,
    WorkOrderListSerializer,
    WorkOrderSerializer,
    WorkOrderStageSerializer,
)
from modules.manufacturing.services import WorkOrderService

logger = structlog.get_logger(__name__)

NOT_FOUND_MESSAGE = "Work order not found"


def _not_found() -> Response:
    return Response({"message": NOT_FOUND_MESSAGE}, status=status.HTTP_404_NOT_FOUND)


def _advance_failed(exc: Exception) -> Response:
    return Response(
        {"message": "Failed to advance stage", "error": str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class WorkOrderViewSet(GenericViewSet):
    """ViewSet for WorkOrder operations.

    Uses ``WorkOrderService`` with an injected repository.
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = WorkOrder.objects.all()
    filterset_class = WorkOrderFilter
    search_fields = ["title", "sku", "order_id"]
    ordering_fields = ["created_at", "due_date", "priority", "current_stage"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = WorkOrderService(
            work_order_repository=WorkOrderDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Scope throttling per action."""
        throttle_scope: str | None
        if self.action == "stages" and self.request.method == "POST":
            throttle_scope = "stage_transition"
        elif self.action in {"list", "retrieve", "board"}:
            throttle_scope = "work_order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_work_orders()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/work-orders/"""
        create_serializer = CreateWorkOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        try:
            dto = CreateWorkOrderDTO(**create_serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {
                    "message": "Invalid work order payload.",
                    "errors": exc.errors(include_url=False, include_context=False),
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            work_order = self._service.create_work_order(dto)
        except WorkOrderAlreadyExists as exc:
            return Response({"message": str(exc)}, status=status.HTTP_409_CONFLICT)

        out = WorkOrderSerializer(work_order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/work-orders/

        Filtering (stage, status, priority, assignee, order, due date) is
        handled by ``WorkOrderFilter``; search by title, SKU and order id.
        """
        queryset = self.filter_queryset(self.get_queryset())

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(queryset, request)
        serializer = WorkOrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/work-orders/{pk}/"""
        try:
            work_order = self._service.get_work_order(pk)
        except WorkOrderNotFound:
            return _not_found()
        return Response(WorkOrderSerializer(work_order).data)

    # ------------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/work-orders/{pk}/

        Stage changes are not accepted here; use ``POST .../stages/``.
        """
        update_serializer = UpdateWorkOrderSerializer(data=request.data, partial=True)
        update_serializer.is_valid(raise_exception=True)
        dto = UpdateWorkOrderDTO(**update_serializer.validated_data)

        try:
            work_order = self._service.update_work_order(pk, dto)
        except WorkOrderNotFound:
            return _not_found()
        except InvalidWorkOrderStatus as exc:
            return Response({"message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(WorkOrderSerializer(work_order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/work-orders/{pk}/ (soft delete)."""
        try:
            self._service.delete_work_order(pk)
        except WorkOrderNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Stage history / transition
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "post"], url_path="stages")
    def stages(self, request: Request, pk: str | None = None) -> Response:
        """GET  /api/v1/work-orders/{pk}/stages/  stage history.
        POST /api/v1/work-orders/{pk}/stages/  advance to the next stage.
        """
        if request.method == "POST":
            return self._advance(request, pk)
        return self._history(request, pk)

    def _history(self, request: Request, pk: str | None) -> Response:
        query = StageHistoryQuerySerializer(data=request.query_params)
        if not query.is_valid():
            field = next(iter(query.errors))
            return Response(
                {"message": f"Invalid {field} filter: {request.query_params.get(field)}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            entries = self._service.list_stage_history(
                pk,
                stage=query.validated_data.get("stage"),
                status=query.validated_data.get("status"),
            )
        except WorkOrderStoreError:
            return Response(
                {"message": "Failed to fetch stages"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {
                "stages": WorkOrderStageSerializer(entries, many=True).data,
                "available_stages": list(STAGE_SEQUENCE),
            }
        )

    def _advance(self, request: Request, pk: str | None) -> Response:
        advance_serializer = AdvanceStageSerializer(data=request.data)
        advance_serializer.is_valid(raise_exception=True)
        dto = AdvanceStageDTO(**advance_serializer.validated_data)

        try:
            result = self._service.advance_stage(pk, dto)
        except WorkOrderNotFound:
            return _not_found()
        except InvalidStageTransition as exc:
            return Response(
                {"message": str(exc), "current_stage": exc.current_stage},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except (WorkOrderStoreError, StageHistoryCorrupted) as exc:
            return _advance_failed(exc)
        except Exception as exc:
            logger.exception(
                "work_order.stage_advance_unexpected_error", work_order_id=pk
            )
            return _advance_failed(exc)

        return Response(
            {
                "work_order": WorkOrderSerializer(result.work_order).data,
                "previous_stage": result.previous_stage,
                "current_stage": result.current_stage,
            }
        )

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"])
    def board(self, request: Request) -> Response:
        """GET /api/v1/work-orders/board/

        One column per floor stage, most urgent work first.
        """
        columns = self._service.board()
        return Response(
            {
                "columns": [
                    {
                        "stage": stage,
                        "label": STAGE_LABELS[stage],
                        "count": len(work_orders),
                        "work_orders": WorkOrderListSerializer(work_orders, many=True).data,
                    }
                    for stage, work_orders in columns.items()
                ]
            }
        )
