"""Helper functions for constructing structured API error responses.

Keeping response construction in one module avoids duplicated boilerplate in
each FastAPI exception handler.  The request ID and a timezone-aware timestamp
are embedded automatically so every payload shares the same shape.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from recipe_ratio.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from recipe_ratio.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
]


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` enriched with metadata."""

    return ValidationErrorResponse(
        error_type=ErrorType.VALIDATION_ERROR,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str,
    status_code: int,
    path: str,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse`` enriched with metadata."""

    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=request_id or get_request_id(),
        path=path,
        retry_after=retry_after,
    )
