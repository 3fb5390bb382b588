"""
Shared HTTP error classes and utilities for all scheduling services.

Provides:
- Base exception class for API errors
- Common subclasses (Validation, NotFound, Conflict, Service)
- Shared error response model
- Utility to convert exceptions to error responses
- FastAPI exception handler registration

Common Usage Patterns:
=====================

Basic Exception Usage:
>>> from services.common.http_errors import ValidationError, NotFoundError
>>>
>>> # Validation error with field context
>>> error = ValidationError("Duration must be positive", field="durationMinutes")
>>>
>>> # Resource not found
>>> error = NotFoundError("Employee", "42")

FastAPI Integration:
>>> from fastapi import FastAPI
>>> from services.common.http_errors import register_exception_handlers
>>>
>>> app = FastAPI()
>>> register_exception_handlers(app)

Error Response Shape:
====================
Every handler returns the same JSON body:

    {
      "timestamp": "2024-01-15T10:30:00",
      "status": 400,
      "error": "Bad Request",
      "type": "validation_error",
      "message": "Duration must be positive",
      "details": {"field": "durationMinutes", "code": "VALIDATION_FAILED"},
      "request_id": "7d6f..."
    }

Error Code Taxonomy:
===================
- VALIDATION_FAILED : Input validation errors (400)
- NOT_FOUND : Referenced record does not exist (400, see NotFoundError)
- CONFLICT : Booking rejected by a conflict guard (409)
- SERVICE_* / DATABASE_ERROR : Internal service errors (5xx)
- INTERNAL_ERROR : Anything unexpected (500)
"""

import uuid
from datetime import datetime
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from services.common.logging_config import log_http_error, request_id_var

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


class ErrorCode(str, Enum):
    """Standardized error codes for all scheduling services."""

    # ==========================================
    # GENERAL ERRORS (4xx client errors)
    # ==========================================
    VALIDATION_FAILED = "VALIDATION_FAILED"  # Input validation failed
    NOT_FOUND = "NOT_FOUND"  # Referenced record not found
    CONFLICT = "CONFLICT"  # Scheduling conflict

    # ==========================================
    # SERVICE ERRORS (5xx server errors)
    # ==========================================
    INTERNAL_ERROR = "INTERNAL_ERROR"  # Generic internal error
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"  # Service temporarily unavailable
    SERVICE_ERROR = "SERVICE_ERROR"  # Generic service error
    DATABASE_ERROR = "DATABASE_ERROR"  # Database connectivity/operation error


def _current_request_id() -> str:
    request_id = request_id_var.get()
    if request_id and request_id != "uninitialized":
        return request_id
    return str(uuid.uuid4())


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


class ErrorResponse(BaseModel):
    """
    Standardized error response model.

    Attributes:
        timestamp: ISO 8601 local timestamp of when the error occurred
        status: Numeric HTTP status code
        error: Short reason phrase for the status (e.g. "Bad Request")
        type: Error type categorization (e.g. "validation_error")
        message: Human-readable error message
        details: Optional field-level or contextual detail map
        request_id: Identifier for tracing the failing request
    """

    timestamp: str
    status: int
    error: str
    type: str
    message: str
    details: Optional[Dict[str, Any]] = None
    request_id: str


class CalendarAPIException(Exception):
    """
    Base exception class for all scheduling API errors.

    Every error raised by the core or the request boundary derives from this
    class so the exception handlers can render it with its own status code
    and the shared ErrorResponse shape.

    Args:
        message: The error message to display to users
        details: Optional dictionary with additional error context
        error_type: Error category string (defaults to "internal_error")
        error_code: Specific error code from ErrorCode enum
        status_code: HTTP status code (defaults to 500)
        request_id: Optional request ID (taken from context if not provided)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_type: str = "internal_error",
        error_code: Optional[ErrorCode] = None,
        status_code: int = 500,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.error_type = error_type
        self.error_code = error_code
        self.status_code = status_code
        self.timestamp = datetime.now().isoformat()
        self.request_id = request_id or _current_request_id()
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """
        Convert exception to ErrorResponse Pydantic model.

        Includes the error code in details if present.
        """
        details = {
            **self.details,
            **({"code": self.error_code.value} if self.error_code else {}),
        }
        return ErrorResponse(
            timestamp=self.timestamp,
            status=self.status_code,
            error=_reason_phrase(self.status_code),
            type=self.error_type,
            message=self.message,
            details=details if details else None,
            request_id=self.request_id,
        )


class ValidationError(CalendarAPIException):
    """
    Exception for invalid arguments (HTTP 400).

    Raised for non-positive durations, missing required timestamps, a
    proposed meeting without an owner, and malformed request parameters.

    Examples:
        >>> error = ValidationError("Duration must be positive")
        >>> error = ValidationError(
        ...     "Proposed meeting has no owner",
        ...     field="ownerId",
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        validation_details = details or {}
        if field:
            validation_details["field"] = field
        if value is not None:
            validation_details["value"] = str(value)
        super().__init__(
            message=message,
            details=validation_details,
            error_type="validation_error",
            error_code=ErrorCode.VALIDATION_FAILED,
            status_code=400,
        )
        self.field = field
        self.value = value


class NotFoundError(CalendarAPIException):
    """
    Exception for references to records that do not exist.

    Unknown owner, employee or participant ids are reported as a client
    error (HTTP 400), not 404, so clients that branch on "bad request" keep
    working. The NOT_FOUND code in details still distinguishes the case.
    Pass status_code=404 to opt into a distinct status.

    Examples:
        >>> error = NotFoundError("Employee", "42")
        >>> print(error.message)
        Employee 42 not found
        >>> error = NotFoundError(message="Owner not found with ID: 42")
    """

    def __init__(
        self,
        resource: Optional[str] = None,
        identifier: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
        status_code: int = 400,
    ):
        if message is None:
            if resource and identifier:
                message = f"{resource} {identifier} not found"
            elif resource:
                message = f"{resource} not found"
            else:
                message = "Resource not found"
        notfound_details = {
            **(details or {}),
            "resource": resource,
            "identifier": identifier,
        }
        super().__init__(
            message=message,
            details=notfound_details,
            error_type="not_found",
            error_code=ErrorCode.NOT_FOUND,
            status_code=status_code,
        )
        self.resource = resource
        self.identifier = identifier


class ConflictError(CalendarAPIException):
    """
    Exception for bookings rejected because attendees are busy (HTTP 409).

    Only raised when a booking guard is installed; plain booking never
    checks for overlaps.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            details=details,
            error_type="conflict_error",
            error_code=ErrorCode.CONFLICT,
            status_code=409,
        )


class ServiceError(CalendarAPIException):
    """
    Exception for internal service errors (HTTP 502).

    Used when a collaborator such as the database fails.

    Examples:
        >>> error = ServiceError(
        ...     "Database connection failed",
        ...     code=ErrorCode.DATABASE_ERROR,
        ... )
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.SERVICE_ERROR,
        status_code: int = 502,
    ):
        super().__init__(
            message=message,
            details=details,
            error_type="service_error",
            error_code=code,
            status_code=status_code,
        )


def validation_error_details(exc: RequestValidationError) -> Dict[str, str]:
    """Flatten FastAPI validation errors into a ``{field: message}`` map."""
    details: Dict[str, str] = {}
    for error in exc.errors():
        # loc looks like ("body", "startTime") or ("query", "ownerId")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body",)]
        if loc and loc[0] == "query":
            loc = loc[1:]
        field = ".".join(loc) or "request"
        details[field] = error.get("msg", "Invalid value")
    return details


def exception_to_response(exc: Exception) -> ErrorResponse:
    """
    Convert any exception to a standardized ErrorResponse.

    1. CalendarAPIException: Uses the built-in to_error_response() method
    2. RequestValidationError: 400 with a field-level details map
    3. HTTPException: Keeps the status code and normalizes the detail
    4. Generic Exception: Safe 500 response without leaking internals
    """
    timestamp = datetime.now().isoformat()
    if isinstance(exc, CalendarAPIException):
        return exc.to_error_response()
    elif isinstance(exc, RequestValidationError):
        return ErrorResponse(
            timestamp=timestamp,
            status=400,
            error=_reason_phrase(400),
            type="validation_error",
            message="Validation failed",
            details=validation_error_details(exc),
            request_id=_current_request_id(),
        )
    elif isinstance(exc, HTTPException):
        if isinstance(exc.detail, dict):
            message = str(exc.detail.get("message", "HTTP error"))
            details: Optional[Dict[str, Any]] = exc.detail
        else:
            message = str(exc.detail)
            details = None
        return ErrorResponse(
            timestamp=timestamp,
            status=exc.status_code,
            error=_reason_phrase(exc.status_code),
            type="http_error",
            message=message,
            details=details,
            request_id=_current_request_id(),
        )
    else:
        return ErrorResponse(
            timestamp=timestamp,
            status=500,
            error=_reason_phrase(500),
            type="internal_error",
            message=GENERIC_ERROR_MESSAGE,
            details=None,
            request_id=_current_request_id(),
        )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers for FastAPI applications.

    All handlers return JSON responses using the standardized ErrorResponse
    model and log the failure through log_http_error. Should be called
    during application initialization, before adding routes.
    """
    from fastapi import Request
    from fastapi.responses import JSONResponse

    def _render(request: Request, exc: Exception) -> JSONResponse:
        error_response = exception_to_response(exc)
        log_http_error(
            error_type=error_response.type,
            message=error_response.message,
            status_code=error_response.status,
            request_id=error_response.request_id,
            details=error_response.details,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(
            status_code=error_response.status, content=error_response.model_dump()
        )

    @app.exception_handler(CalendarAPIException)
    async def calendar_api_exception_handler(
        request: Request, exc: CalendarAPIException
    ) -> JSONResponse:
        return _render(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _render(request, exc)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        return _render(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """
        Catch any unhandled exception and return a safe 500 response.

        The original exception is logged with its traceback; nothing about
        it reaches the client.
        """
        from services.common.logging_config import get_logger

        get_logger(__name__).error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            exc_info=exc,
        )
        return _render(request, exc)
