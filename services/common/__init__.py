"""
Common utilities and configurations for the scheduling services.
"""

from services.common.http_errors import (
    CalendarAPIException,
    ConflictError,
    ErrorCode,
    ErrorResponse,
    NotFoundError,
    ServiceError,
    ValidationError,
    register_exception_handlers,
)
from services.common.logging_config import get_logger, setup_service_logging

__all__ = [
    "CalendarAPIException",
    "ConflictError",
    "ErrorCode",
    "ErrorResponse",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
    "get_logger",
    "register_exception_handlers",
    "setup_service_logging",
]
