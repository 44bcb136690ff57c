"""Infrastructure faults and the API-wide exception handler.

Business-rule failures never reach this module: they are returned as
``Failure`` results by the service layer.  What remains are faults the
caller cannot recover from (store unavailable, operation cancelled) and
DRF's own request errors.  ``api_exception_handler`` renders all of
them with the same body shape::

    {"type": "...", "errors": [{"code": "...", "detail": "..."}]}
"""

from __future__ import annotations

from typing import Any

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = structlog.get_logger(__name__)


class StoreUnavailable(Exception):
    """The persistence backend could not be reached or failed mid-operation."""


class OperationCancelled(Exception):
    """The caller signalled cancellation before the operation completed."""


def _error_body(error_type: str, code: str, detail: Any) -> dict[str, Any]:
    if isinstance(detail, dict):
        errors = [
            {"code": code, "detail": str(message), "attr": field}
            for field, messages in detail.items()
            for message in (messages if isinstance(messages, list) else [messages])
        ]
    elif isinstance(detail, list):
        errors = [{"code": code, "detail": str(message)} for message in detail]
    else:
        errors = [{"code": code, "detail": str(detail)}]
    return {"type": error_type, "errors": errors}


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error body."""
    if isinstance(exc, StoreUnavailable):
        logger.error("api.store_unavailable", error=str(exc))
        return Response(
            _error_body("server_error", "store_unavailable", "Customer store is unavailable."),
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    if isinstance(exc, OperationCancelled):
        logger.warning("api.operation_cancelled")
        return Response(
            _error_body("client_error", "operation_cancelled", "The operation was cancelled."),
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    error_type = "client_error" if response.status_code < 500 else "server_error"
    code = getattr(exc, "default_code", "error")
    response.data = _error_body(error_type, code, getattr(exc, "detail", response.data))
    return response
