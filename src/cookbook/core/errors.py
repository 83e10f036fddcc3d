"""Typed error taxonomy shared by the cookbook services.

Services raise these; the API layer renders them through a single exception
handler registered in :mod:`cookbook.main`.
"""

from __future__ import annotations

from collections.abc import Iterable

from fastapi import status


class CookbookError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, object]:
        """Return the JSON body used by the exception handler."""
        return {"detail": self.message}


class ValidationError(CookbookError):
    """Request data is well-formed JSON but semantically unusable."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CookbookError):
    """A referenced recipe or attribute entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, missing: Iterable[object] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)

    def to_dict(self) -> dict[str, object]:
        body = super().to_dict()
        if self.missing:
            body["missing"] = self.missing
        return body


class PermissionDeniedError(CookbookError):
    """The actor may not mutate the target recipe."""

    status_code = status.HTTP_403_FORBIDDEN


class ConflictError(CookbookError):
    """A uniqueness constraint rejected the write."""

    status_code = status.HTTP_409_CONFLICT


class GenerationExhaustedError(CookbookError):
    """No free identifier was found within the attempt budget."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class TransactionAbortError(CookbookError):
    """A composite operation failed and its transaction was rolled back.

    When the cause is itself a :class:`CookbookError` its status code is
    reported instead of a generic server error.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if isinstance(self.cause, CookbookError):
            return self.cause.status_code
        return status.HTTP_500_INTERNAL_SERVER_ERROR

    def to_dict(self) -> dict[str, object]:
        if isinstance(self.cause, CookbookError):
            return self.cause.to_dict()
        return {"detail": self.message}


__all__ = [
    "CookbookError",
    "ConflictError",
    "GenerationExhaustedError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransactionAbortError",
    "ValidationError",
]
