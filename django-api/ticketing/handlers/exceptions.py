"""Map domain errors to HTTP responses.

Expected failures carry their stable code and user-safe message. Anything
else is logged in full and answered with a generic 500.
"""

from typing import Any

import structlog
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from ticketing.domain.errors import DomainError, ErrorCategory, ValidationFailedError

logger = structlog.get_logger(__name__)

STATUS_BY_CATEGORY: dict[ErrorCategory, int] = {
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.STATE_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.BUSINESS_RULE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCategory.INFRASTRUCTURE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_error_response(exc: DomainError) -> Response:
    data: dict[str, Any] = {"code": exc.code.value, "message": exc.message}
    if isinstance(exc, ValidationFailedError):
        data["errors"] = exc.errors
    return Response(data, status=STATUS_BY_CATEGORY[exc.category])


def exception_handler(exc: Exception, context: dict[str, Any]) -> Response:
    """DRF EXCEPTION_HANDLER entry point."""
    if isinstance(exc, DomainError):
        if exc.category is ErrorCategory.INFRASTRUCTURE:
            logger.error("domain_infrastructure_error", code=exc.code.value, detail=str(exc))
        else:
            logger.info("domain_error", code=exc.code.value)
        return domain_error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is not None:
        if response.status_code == status.HTTP_400_BAD_REQUEST:
            response.data = {
                "code": "VALIDATION_FAILED",
                "message": "Invalid or missing fields",
                "errors": response.data,
            }
        return response

    view = context.get("view")
    logger.exception("INTERNAL_SERVER_ERROR", view=type(view).__name__ if view else None)
    return Response(
        {"code": "INTERNAL_ERROR", "message": "Internal Server Error."},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
