"""
Service error hierarchy.

Every error the core raises on purpose is a ServiceError carrying the HTTP
status it maps to, so the boundary never has to re-derive the kind.
"""

from typing import Iterable, Optional

from fastapi import status

from app.schemas.error import ErrorDetail, ErrorResponse


class ServiceError(Exception):
    """
    Base exception for all expected service failures.

    Subclasses fix the status code; details carry per-field problems.
    """

    code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Optional[Iterable[ErrorDetail]] = None):
        super().__init__(message)
        self.message = message
        self.details: list[ErrorDetail] = list(details or [])

    def add_detail(self, field: str, description: str) -> None:
        self.details.append(ErrorDetail(field=field, description=description))

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message, details=self.details)

    def __str__(self) -> str:
        res = self.message
        for d in self.details:
            res += f"\n- Field: {d.field}, Description: {d.description}"
        return res


class NotFoundError(ServiceError):
    """No matching (non-deleted) record."""

    code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "record not found", details=None):
        super().__init__(message, details)


class ConflictError(ServiceError):
    """Unique constraint violation."""

    code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "record already exists", details=None):
        super().__init__(message, details)


class WrongInputError(ServiceError):
    """Malformed or disallowed input."""

    code = status.HTTP_400_BAD_REQUEST


class InternalError(ServiceError):
    pass


class EventPublishError(InternalError):
    """The mutation committed but its domain event could not be sent."""
