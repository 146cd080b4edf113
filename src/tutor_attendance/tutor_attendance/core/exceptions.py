from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class ApiError(DomainError):
    """Raised when the tuition-center backend answers with a non-2xx status."""

    def __init__(self, message: str, *, status: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload


class TransientApiError(ApiError):
    """Timeouts, connection failures and 5xx answers. Safe to retry."""


class LocationError(DomainError):
    """Raised by a location provider when no fix can be produced."""


class LocationPermissionDeniedError(LocationError):
    pass


class LocationUnavailableError(LocationError):
    pass
