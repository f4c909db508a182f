"""Repository layer to abstract MongoDB access patterns."""

from .base import MongoRepository
from .exceptions import (
    DuplicateKeyRepositoryError,
    NotFoundRepositoryError,
    RepositoryError,
    RepositoryErrorKind,
)

__all__ = [
    "DuplicateKeyRepositoryError",
    "MongoRepository",
    "NotFoundRepositoryError",
    "RepositoryError",
    "RepositoryErrorKind",
]
