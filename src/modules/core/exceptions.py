"""DRF exception handler producing one error envelope for the whole API.

Shape::

    {
        "type": "validation_error",
        "message": "Invalid input.",
        "errors": [{"code": "required", "detail": "...", "attr": "notes"}]
    }

Domain errors are translated by the views themselves; this handler only
reformats what DRF raises (validation, authentication, throttling, 404).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from rest_framework import exceptions
from rest_framework.views import exception_handler


def api_exception_handler(exc: Exception, context: Dict[str, Any]):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
        message = "Invalid input."
        errors = _flatten(exc.get_full_details())
    else:
        error_type = "client_error" if response.status_code < 500 else "server_error"
        detail = getattr(exc, "detail", str(exc))
        message = str(detail)
        code = getattr(detail, "code", None) or getattr(exc, "default_code", "error")
        errors = [{"code": code, "detail": message, "attr": None}]

    response.data = {"type": error_type, "message": message, "errors": errors}
    return response


def _flatten(details: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    if isinstance(details, dict) and "message" in details and "code" in details:
        return [{"code": details["code"], "detail": str(details["message"]), "attr": attr}]
    if isinstance(details, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in details.items():
            name = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                name = attr
            errors.extend(_flatten(value, name))
        return errors
    if isinstance(details, list):
        errors = []
        for index, value in enumerate(details):
            if not isinstance(value, (dict, list)) or _is_leaf(value):
                nested = attr
            else:
                nested = f"{attr}.{index}" if attr else str(index)
            errors.extend(_flatten(value, nested))
        return errors
    return [{"code": "invalid", "detail": str(details), "attr": attr}]


def _is_leaf(value: Any) -> bool:
    return isinstance(value, dict) and "message" in value and "code" in value
