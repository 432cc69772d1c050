"""
Error taxonomy shared by the contacts service and the HTTP layer.

Every failure that can reach a client is one of these; the exception
handlers in ``contactbook.main`` render them as ``{"message": ..., "errors": ...}``
with the status code carried by the class.
"""

from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors

    def to_dict(self) -> dict:
        body: dict = {"message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailure(InvalidInput):
    """Raised by contact normalization when the record cannot be persisted."""


class Conflict(AppError):
    # Uniqueness violations are reported as bad requests, not 409.
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalFailure(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
