"""Generic MongoDB repositories with application-declared unique fields.

Call ``configure_logging()`` once at startup to route the package loggers to
stderr at the level from ``DOCREPO_LOG_LEVEL``.
"""

from .db.store import DocumentStore, DuplicateKeyFailure, MotorDocumentStore, is_duplicate_key_error
from .log import configure_logging
from .models import BaseDocument, PyObjectId
from .repositories import (
    DuplicateKeyRepositoryError,
    MongoRepository,
    NotFoundRepositoryError,
    RepositoryError,
    RepositoryErrorKind,
)

__all__ = [
    "BaseDocument",
    "DocumentStore",
    "DuplicateKeyFailure",
    "DuplicateKeyRepositoryError",
    "MongoRepository",
    "MotorDocumentStore",
    "NotFoundRepositoryError",
    "PyObjectId",
    "RepositoryError",
    "RepositoryErrorKind",
    "configure_logging",
    "is_duplicate_key_error",
]
