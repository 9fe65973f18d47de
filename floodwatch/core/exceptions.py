"""
Exception hierarchy for the flood monitoring service.

Each exception carries the HTTP status it maps to when it escapes a request
handler; scheduled jobs only log them.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppException(Exception):
    """Base exception for the flood monitoring service."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DatabaseException(AppException):
    """Persistent store read or write failed."""

    default_message = "Database operation failed"


class ValidationException(AppException):
    """Inbound data is malformed or incomplete."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Invalid input"


class ClassificationException(AppException):
    """Remote classification service failed or answered garbage."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Classification service unavailable"


class NotificationException(AppException):
    """Alert could not be delivered to the chat."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Notification channel unavailable"


class ConfigurationException(AppException):
    """Settings failed validation at startup."""


class ResourceNotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


def create_http_exception(exc: AppException) -> HTTPException:
    """Convert an application exception to an HTTPException."""
    return HTTPException(
        status_code=exc.status_code,
        detail=exc.message or exc.default_message,
        headers={"X-Error-Details": str(exc.details)},
    )
