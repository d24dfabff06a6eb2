"""Cross-module exceptions and the standardized API error envelope.

Every error response rendered by the API has the same shape::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "field" | null}]
    }

DRF raises framework errors (parse, validation, 404, 405) which are
converted by ``standard_exception_handler``; views build domain error
responses with ``error_response``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class StorageError(Exception):
    """The persistence layer could not complete a write.

    Never partially applied: the surrounding transaction is rolled back.
    Callers may retry the whole operation.
    """


class ConcurrentModification(StorageError):
    """A row changed between the validation read and the conditional write."""


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _error_type(status_code: int, exc: Optional[Exception] = None) -> str:
    if isinstance(exc, drf_exceptions.ValidationError):
        return "validation_error"
    if status_code >= 500:
        return "server_error"
    return "client_error"


def _flatten(details: Any, attr: Optional[str] = None) -> List[Dict[str, Any]]:
    """Flatten DRF ``get_full_details()`` output into a list of errors."""
    if isinstance(details, dict) and "message" in details and "code" in details:
        return [{"code": details["code"], "detail": str(details["message"]), "attr": attr}]
    if isinstance(details, dict):
        errors: List[Dict[str, Any]] = []
        for key, value in details.items():
            child_attr = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors":
                child_attr = attr
            errors.extend(_flatten(value, child_attr))
        return errors
    if isinstance(details, list):
        errors = []
        for index, value in enumerate(details):
            child_attr = attr
            if isinstance(value, dict) and "message" not in value:
                child_attr = f"{attr}.{index}" if attr else str(index)
            errors.extend(_flatten(value, child_attr))
        return errors
    return [{"code": "error", "detail": str(details), "attr": attr}]


def error_response(
    status_code: int,
    code: str,
    detail: str,
    attr: Optional[str] = None,
) -> Response:
    """Build a single-error response in the standard envelope."""
    return Response(
        {
            "type": _error_type(status_code),
            "errors": [{"code": code, "detail": detail, "attr": attr}],
        },
        status=status_code,
    )


def standard_exception_handler(
    exc: Exception, context: Dict[str, Any]
) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` rendering errors in the standard envelope.

    Unknown exceptions return ``None`` so Django reports them as 500s.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, drf_exceptions.APIException):
        errors = _flatten(exc.get_full_details())
    else:
        # Http404 / Django PermissionDenied: DRF already rendered ``detail``.
        code = "not_found" if response.status_code == 404 else "error"
        errors = [{"code": code, "detail": str(response.data.get("detail", "")), "attr": None}]

    logger.info(
        "api.error_response",
        status_code=response.status_code,
        error_codes=[error["code"] for error in errors],
    )
    response.data = {
        "type": _error_type(response.status_code, exc),
        "errors": errors,
    }
    return response


def validation_error_response(exc: PydanticValidationError) -> Response:
    """Render a Pydantic DTO validation failure as a 400 envelope."""
    errors = [
        {
            "code": error["type"],
            "detail": error["msg"],
            "attr": ".".join(str(part) for part in error["loc"]) or None,
        }
        for error in exc.errors()
    ]
    return Response(
        {"type": "validation_error", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def require_json_object(data: Any) -> Dict[str, Any]:
    """Return ``data`` if it is a mapping, else raise a 400 validation error."""
    if not isinstance(data, dict):
        raise drf_exceptions.ValidationError(
            {"non_field_errors": ["Expected a JSON object."]}, code="invalid"
        )
    return data
