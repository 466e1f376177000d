"""Error response schemas for consistent error handling."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Types of errors that can occur."""

    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    DATABASE_ERROR = "database_error"
    NETWORK_ERROR = "network_error"
    INTERNAL_ERROR = "internal_error"
    TIMEOUT_ERROR = "timeout_error"


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_type": "network_error",
                "message": "Recipe catalog unavailable",
                "detail": "Failed to fetch recipe 42: Request failed",
                "status_code": 502,
                "timestamp": "2026-01-03T10:30:00Z",
                "request_id": "req_abc123xyz",
                "path": "/recipes/42/ingredients",
                "retry_after": 5,
            }
        }
    )

    error_type: ErrorType = Field(..., description="Category of error")
    message: str = Field(..., description="Human-readable error message")
    detail: str | None = Field(None, description="Additional error details or context")
    status_code: int = Field(..., description="HTTP status code")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When error occurred",
    )
    request_id: str | None = Field(None, description="Unique request identifier for tracking")
    path: str | None = Field(None, description="Request path that caused the error")
    retry_after: int | None = Field(
        None, description="Seconds to wait before retrying (for timeout/network errors)"
    )


class ValidationErrorDetail(BaseModel):
    """Details for validation errors."""

    field: str = Field(..., description="Field that failed validation")
    message: str = Field(..., description="Validation error message")
    value: Any = Field(None, description="Value that failed validation")


class ValidationErrorResponse(ErrorResponse):
    """Extended error response for validation errors."""

    error_type: ErrorType = Field(default=ErrorType.VALIDATION_ERROR)
    errors: list[ValidationErrorDetail] = Field(
        default_factory=list, description="List of validation errors"
    )
