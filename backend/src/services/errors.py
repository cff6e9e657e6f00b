"""Domain errors raised by the service layer."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base error carrying the API error code and HTTP status."""

    error = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class NotFoundError(ServiceError):
    """Entity does not exist."""

    error = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(ServiceError):
    """Caller's workspace does not own the entity."""

    error = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN


class ValidationFailure(ServiceError):
    """Input the service layer cannot store."""

    error = "validation_error"
    status_code = status.HTTP_400_BAD_REQUEST


class ExternalServiceError(ServiceError):
    """Note generation provider failed or returned unusable output."""

    error = "external_service_error"
    status_code = status.HTTP_502_BAD_GATEWAY


__all__ = [
    "ServiceError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationFailure",
    "ExternalServiceError",
]
