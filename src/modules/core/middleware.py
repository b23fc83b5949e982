import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

logger = structlog.get_logger(__name__)


class CorrelationIdMiddleware:
    """Tag every request with a correlation ID.

    Uses the incoming ``X-Request-ID`` header when present, otherwise a new
    UUID4.  The ID is bound into structlog's context variables for the
    duration of the request, so every log line emitted while handling it
    (views, services, repositories) carries ``correlation_id``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid,
            method=request.method,
            path=request.path,
        )
        logger.info("request.started")

        try:
            response = self.get_response(request)
            logger.info("request.finished", status_code=response.status_code)
        finally:
            structlog.contextvars.clear_contextvars()
            correlation_id_var.reset(token)

        response[REQUEST_ID_HEADER] = cid
        return response
