"""Custom exceptions for the repository layer."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional


class RepositoryErrorKind(str, Enum):
    """Stable outcome tags callers can branch on."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class RepositoryError(RuntimeError):
    """Base exception raised when a repository operation fails."""

    kind: RepositoryErrorKind


class DuplicateKeyRepositoryError(RepositoryError):
    """Raised when a write would violate a unique field."""

    kind = RepositoryErrorKind.CONFLICT

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundRepositoryError(RepositoryError):
    """Raised when an expected document is missing."""

    kind = RepositoryErrorKind.NOT_FOUND

    def __init__(
        self,
        message: str = "Document was not found",
        *,
        filter: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.filter = dict(filter) if filter is not None else None


__all__ = [
    "DuplicateKeyRepositoryError",
    "NotFoundRepositoryError",
    "RepositoryError",
    "RepositoryErrorKind",
]
