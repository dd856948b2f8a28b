"""
Application error types.

Services and dependencies raise these instead of building HTTP responses
themselves; ``commerflow.server.exception_handlers`` maps each one to its
status code and JSON body.
"""

from typing import Any, Optional


class AppError(Exception):
    """
    Base exception for CommerFlow.
    """

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body: dict = {"detail": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Raised when a request is well-formed but violates a business rule."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class AuthenticationError(AppError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401
    code = "AUTHENTICATION_FAILED"
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Raised when an authenticated user lacks the required role."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "Not authorized"


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(AppError):
    """Raised when a write would duplicate an existing entity."""

    status_code = 409
    code = "CONFLICT"
    default_message = "Resource conflict"
