"""Response envelopes returned by every use case.

Use cases never let an exception escape: the outcome, successful or not,
is wrapped in a ``ServiceResponse``. Failures carry an ``ErrorResponse``
with the machine-readable error code, the correlation ID of the operation
and, in development, debugging details.

Key models:
- **ServiceResponse**: Outcome envelope with status code and payload
- **ErrorResponse**: Error details with all metadata fields
- **ServiceInfo**: Service identification for multi-service debugging
"""

import traceback
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

from pydantic import BaseModel, Field

from src.core.config import Settings
from src.core.context import OperationContext, generate_request_id
from src.core.exceptions import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    Severity,
    StoreConfigError,
    ValidationError,
)


class ServiceInfo(BaseModel):
    """Service information for error context."""

    name: str = Field(..., description="Name of the service", examples=["StoreConfig"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error details attached to a failed ``ServiceResponse``."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["DUPLICATE_KEY", "NOT_FOUND", "OUT_OF_RANGE_RATE"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Duplicate fiscal region: MX, CDMX"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (offending field, record key)",
        examples=[{"field": "regions", "key": ["MX", "CDMX"]}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Operation correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, CRITICAL)",
        examples=["LOW", "CRITICAL"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this use-case invocation",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )


class ServiceResponse(BaseModel):
    """Outcome of a use case.

    ``code`` is a dotted outcome identifier such as
    ``FiscalConfiguration.Created``; ``data`` holds the payload on success
    and ``error`` the details on failure.
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    status_code: int = Field(..., description="HTTP-style status code")
    message: str = Field(..., description="Human-readable outcome")
    code: str = Field(
        ...,
        description="Dotted outcome identifier",
        examples=["FiscalConfiguration.Created", "FiscalConfiguration.NotFound"],
    )
    data: Any = Field(default=None, description="Payload of a successful outcome")
    error: ErrorResponse | None = Field(
        default=None, description="Error details of a failed outcome"
    )


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings.

    Args:
        settings: Application settings

    Returns:
        ServiceInfo: Instance with current service metadata
    """
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def status_for_error(exc: Exception) -> HTTPStatus:
    """Map an exception to the status code of its envelope."""
    if isinstance(exc, ValidationError):
        return HTTPStatus.BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return HTTPStatus.NOT_FOUND
    if isinstance(exc, ConflictError):
        return HTTPStatus.CONFLICT
    return HTTPStatus.INTERNAL_SERVER_ERROR


def success_response(
    data: Any,
    code: str,
    message: str,
    status_code: HTTPStatus = HTTPStatus.OK,
) -> ServiceResponse:
    """Build the envelope of a successful operation."""
    return ServiceResponse(
        success=True,
        status_code=int(status_code),
        message=message,
        code=code,
        data=data,
    )


def error_response(exc: Exception, code: str, settings: Settings) -> ServiceResponse:
    """Build the envelope of a failed operation.

    ``StoreConfigError`` instances keep their code, message, severity and
    context. Any other exception becomes an ``INTERNAL_ERROR`` whose
    message only names the exception type.

    Args:
        exc: The exception raised by the operation
        code: Dotted outcome identifier for the envelope
        settings: Application settings (environment and service metadata)

    Returns:
        ServiceResponse: Failed envelope with populated ``error``
    """
    status_code = status_for_error(exc)
    debug_info: dict[str, Any] | None = None

    if isinstance(exc, StoreConfigError):
        error_code = exc.error_code
        message = exc.message
        severity = exc.severity.value
        details = exc.context or None
        if settings.environment == "development":
            debug_info = {
                "stack_trace": exc.stack_trace,
                "error_context": exc.context or {},
                "exception_type": type(exc).__name__,
            }
            if exc.cause:
                debug_info["cause"] = {
                    "type": type(exc.cause).__name__,
                    "message": str(exc.cause),
                }
    else:
        error_code = ErrorCode.INTERNAL_ERROR.value
        message = f"Internal server error: {type(exc).__name__}"
        severity = Severity.CRITICAL.value
        details = None
        if settings.environment == "development":
            debug_info = {
                "stack_trace": traceback.format_exception(
                    type(exc), exc, exc.__traceback__
                ),
                "error_context": {"error": str(exc)},
                "exception_type": type(exc).__name__,
            }

    return ServiceResponse(
        success=False,
        status_code=int(status_code),
        message=message,
        code=code,
        error=ErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
            correlation_id=OperationContext.get_correlation_id(),
            request_id=generate_request_id(),
            severity=severity,
            service_info=get_service_info(settings),
            debug_info=debug_info,
        ),
    )
