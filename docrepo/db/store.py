"""Store-client boundary consumed by the repositories.

Everything driver-specific lives here: the repository only sees the
``DocumentStore`` protocol and the ``DuplicateKeyFailure`` variant, never
pymongo's numeric error codes.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

LOGGER = logging.getLogger(__name__)

# 11000 is the current server code; 11001 and 12582 are legacy variants still
# reported by older servers and mongos.
DUPLICATE_KEY_ERROR_CODES = frozenset({11000, 11001, 12582})

Filter = Mapping[str, Any]
RawDocument = Mapping[str, Any]
Update = Union[Mapping[str, Any], Sequence[Mapping[str, Any]]]


class DuplicateKeyFailure(Exception):
    """A store-native unique index rejected a write."""

    def __init__(self, collection: str, key_pattern: Sequence[str] = ()) -> None:
        self.collection = collection
        self.key_pattern = tuple(key_pattern)
        keys = ", ".join(self.key_pattern) or "<unknown>"
        super().__init__(f"duplicate key in '{collection}' on {keys}")


def is_duplicate_key_error(exc: BaseException) -> bool:
    """Return True when ``exc`` is the driver's duplicate-key failure."""

    if isinstance(exc, DuplicateKeyError):
        return True
    return getattr(exc, "code", None) in DUPLICATE_KEY_ERROR_CODES


def _duplicate_key_names(exc: BaseException) -> list[str]:
    details = getattr(exc, "details", None) or {}
    pattern = details.get("keyPattern") or details.get("keyValue") or {}
    return [str(key) for key in pattern]


class DocumentStore(Protocol):
    """Capability the repositories need from a document store."""

    async def insert(self, collection: str, document: RawDocument) -> RawDocument:
        ...

    async def query_one(
        self,
        collection: str,
        filter: Filter,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RawDocument]:
        ...

    async def query_many(self, collection: str, filter: Filter) -> list[RawDocument]:
        ...

    async def update_one(
        self, collection: str, filter: Filter, update: Update
    ) -> Optional[RawDocument]:
        ...

    async def delete_one(self, collection: str, filter: Filter) -> Optional[RawDocument]:
        ...


class MotorDocumentStore:
    """``DocumentStore`` backed by a Motor database handle."""

    def __init__(self, database: AsyncIOMotorDatabase) -> None:
        self._database = database

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._database

    def _collection(self, name: str) -> AsyncIOMotorCollection:
        return self._database[name]

    async def insert(self, collection: str, document: RawDocument) -> RawDocument:
        doc = dict(document)
        try:
            await self._collection(collection).insert_one(doc)
        except Exception as exc:
            if not is_duplicate_key_error(exc):
                raise
            raise DuplicateKeyFailure(collection, _duplicate_key_names(exc)) from exc
        return doc

    async def query_one(
        self,
        collection: str,
        filter: Filter,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RawDocument]:
        return await self._collection(collection).find_one(dict(filter), projection=projection)

    async def query_many(self, collection: str, filter: Filter) -> list[RawDocument]:
        cursor = self._collection(collection).find(dict(filter))
        return [doc async for doc in cursor]

    async def update_one(
        self, collection: str, filter: Filter, update: Update
    ) -> Optional[RawDocument]:
        try:
            return await self._collection(collection).find_one_and_update(
                dict(filter),
                list(update) if isinstance(update, Sequence) else dict(update),
                return_document=ReturnDocument.AFTER,
            )
        except Exception as exc:
            if not is_duplicate_key_error(exc):
                raise
            raise DuplicateKeyFailure(collection, _duplicate_key_names(exc)) from exc

    async def delete_one(self, collection: str, filter: Filter) -> Optional[RawDocument]:
        return await self._collection(collection).find_one_and_delete(dict(filter))


__all__ = [
    "DUPLICATE_KEY_ERROR_CODES",
    "DocumentStore",
    "DuplicateKeyFailure",
    "MotorDocumentStore",
    "is_duplicate_key_error",
]
