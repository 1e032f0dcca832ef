"""
Application error taxonomy.

Services raise these; the handlers registered in ``app.main`` turn them into
JSON responses with the matching status code.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """Base exception for all application errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Missing or malformed required input."""

    status_code = 400


class UnauthorizedError(AppError):
    """Missing or invalid actor identity."""

    status_code = 401


class ForbiddenError(AppError):
    """Actor is known but lacks the required role."""

    status_code = 403


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    status_code = 404


class ConflictError(AppError):
    """Uniqueness violation or a lost concurrent update."""

    status_code = 409


class ServiceUnavailableError(AppError):
    """The persistence layer cannot be reached."""

    status_code = 503
