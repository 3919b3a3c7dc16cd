"""Error taxonomy shared by the board services."""

from __future__ import annotations

from fastapi import status


class BoardError(Exception):
    """Base class for failures surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidArgumentError(BoardError):
    """A required field is missing, empty or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_argument"


class UnauthorizedError(BoardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ForbiddenError(BoardError):
    """The caller is neither the owner of the entity nor an admin."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFoundError(BoardError):
    """The entity is missing or has been soft-deleted."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(BoardError):
    """A uniqueness rule or a referential guard was violated."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class InternalError(BoardError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal"
