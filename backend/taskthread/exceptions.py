"""
Structured exceptions and error responses for Taskthread.

Provides consistent error handling across the API with:
- Custom exception classes
- Structured error response format
- FastAPI exception handlers
"""

from typing import Any, Dict, Optional, List
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from taskthread.logging_config import get_logger


# =============================================================================
# Error Response Schema
# =============================================================================

class ErrorDetail(BaseModel):
    """Detail of a single error."""
    loc: Optional[List[str]] = None
    msg: str
    type: str


class ErrorResponse(BaseModel):
    """Structured error response format."""
    error: str  # Error code (e.g., "not_found", "upstream_call_failed")
    message: str  # Human-readable message
    details: Optional[List[ErrorDetail]] = None


# =============================================================================
# Custom Exceptions
# =============================================================================

class TaskthreadException(Exception):
    """Base exception for all Taskthread errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class NotFoundError(TaskthreadException):
    """Resource not found."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            error_code="not_found",
            status_code=status.HTTP_404_NOT_FOUND,
        )
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(TaskthreadException):
    """Request validation error."""

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="validation_error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )


class UpstreamCallError(TaskthreadException):
    """The text-generation service failed (network, timeout, non-2xx, empty body)."""

    def __init__(
        self,
        message: str,
        error_code: str = "upstream_call_failed",
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


class MalformedUpstreamPayloadError(UpstreamCallError):
    """The text-generation service answered, but not with the JSON shape we asked for."""

    def __init__(self, message: str, raw_payload: str):
        super().__init__(
            message=message,
            error_code="malformed_upstream_payload",
        )
        self.raw_payload = raw_payload


# =============================================================================
# Exception Handlers
# =============================================================================

async def taskthread_exception_handler(request: Request, exc: TaskthreadException) -> JSONResponse:
    """Handle TaskthreadException and return structured response."""
    if isinstance(exc, UpstreamCallError):
        # Upstream details stay in the logs
        get_logger("taskthread.error").error(f"Upstream failure on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": "The text-generation service failed to process the request",
                "details": None,
            },
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger = get_logger("taskthread.error")
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": None,
        },
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(TaskthreadException, taskthread_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
