"""Application errors raised by services and rendered by the API exception handlers."""

from typing import Any, Optional


class AppError(Exception):
    """Base error with an HTTP status and optional structured details."""

    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details


class UnauthorizedError(AppError):
    status_code = 401


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409
