"""Unit tests for the application error types."""

import pytest

from commerflow.core.errors import (
    AppError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


@pytest.mark.parametrize(
    "error_cls,status_code,code",
    [
        (ValidationError, 400, "VALIDATION_ERROR"),
        (AuthenticationError, 401, "AUTHENTICATION_FAILED"),
        (AuthorizationError, 403, "FORBIDDEN"),
        (NotFoundError, 404, "NOT_FOUND"),
        (ConflictError, 409, "CONFLICT"),
    ],
)
def test_status_and_code(error_cls, status_code, code):
    error = error_cls()

    assert isinstance(error, AppError)
    assert error.status_code == status_code
    assert error.to_dict() == {"detail": error_cls.default_message, "code": code}


def test_message_and_details():
    error = NotFoundError("Product not found", details={"id": "p1"})

    assert str(error) == "Product not found"
    assert error.to_dict() == {"detail": "Product not found", "code": "NOT_FOUND", "details": {"id": "p1"}}
