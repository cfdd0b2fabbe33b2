"""Custom exception classes for the application."""
from typing import Any


class AppException(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, detail: Any = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotFoundError(AppException):
    """Resource not found."""
    pass


class WrongListingTypeError(NotFoundError):
    """Property exists, but under the other listing type.

    `detail` carries the actual listing type and canonical url path so the
    client can redirect.
    """
    pass


class DuplicateError(AppException):
    """Duplicate resource detected."""
    pass


class ValidationError(AppException):
    """Data validation error."""
    pass


class UnauthorizedError(AppException):
    """No caller identity supplied."""
    pass


class ForbiddenError(AppException):
    """Caller is not allowed to perform the operation."""
    pass
