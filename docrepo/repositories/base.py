"""Generic MongoDB repository with application-declared unique fields."""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterable, Mapping, NoReturn, Union

from bson import ObjectId
from pydantic import BaseModel

from ..db.store import DocumentStore, DuplicateKeyFailure, Update
from ..models.document import BaseDocument, TDocument, stored_field_name
from .exceptions import DuplicateKeyRepositoryError, NotFoundRepositoryError

LOGGER = logging.getLogger(__name__)

SET_OPERATOR = "$set"

Payload = Union[Mapping[str, Any], BaseModel]


class MongoRepository(Generic[TDocument]):
    """CRUD access to one collection of ``TDocument``.

    Inserts rely on the store's unique indexes and translate the resulting
    duplicate-key failure. Updates cannot rely on that alone, so every
    declared unique field assigned through ``$set`` is checked against the
    other documents of the collection before the update is applied.

    The check and the update are separate round-trips. Two concurrent updates
    writing the same new value may both pass the check; only a store-native
    unique index on the field (see ``ensure_unique_indexes``) stops the second
    one.
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str,
        document_type: type[TDocument],
        unique_fields: Iterable[str] = (),
    ) -> None:
        self._store = store
        self._collection = collection
        self._document_type = document_type
        resolved: list[str] = []
        for name in unique_fields:
            key = stored_field_name(document_type, name)
            if key not in resolved:
                resolved.append(key)
        self._unique_fields: tuple[str, ...] = tuple(resolved)

    @property
    def collection(self) -> str:
        return self._collection

    @property
    def unique_fields(self) -> tuple[str, ...]:
        return self._unique_fields

    async def create(self, payload: Payload) -> TDocument:
        """Insert a new document, assigning ``_id`` when the payload has none."""

        data = self._payload_to_mapping(payload)
        id_key = stored_field_name(self._document_type, "id")
        if "id" in data and data.get(id_key) is None:
            data[id_key] = data.pop("id")
        if data.get(id_key) is None:
            data[id_key] = ObjectId()
        document = self._document_type.model_validate(data)
        LOGGER.debug("Inserting document into %s", self._collection)
        try:
            await self._store.insert(self._collection, document.to_mongo())
        except DuplicateKeyFailure as exc:
            self._raise_duplicate_key(exc)
        return document

    async def find_one(self, filter: Mapping[str, Any]) -> TDocument:
        doc = await self._store.query_one(self._collection, filter)
        if doc is None:
            self._raise_not_found(filter)
        return self._document_type.from_mongo(doc)

    async def find(self, filter: Mapping[str, Any]) -> list[TDocument]:
        docs = await self._store.query_many(self._collection, filter)
        return [self._document_type.from_mongo(doc) for doc in docs]

    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Update,
    ) -> TDocument:
        """Apply ``update`` to the document matching ``filter`` and return it.

        ``update`` is an operator mapping or an aggregation pipeline. Pipelines
        are passed to the store as-is and are not pre-checked; only store-native
        unique indexes guard them.

        Raises ``DuplicateKeyRepositoryError`` before touching the store when a
        declared unique field would take a value held by another document, and
        ``NotFoundRepositoryError`` when nothing matches ``filter``.
        """

        target_filter: Mapping[str, Any] = filter
        fields_to_check = self._fields_to_check(update)
        if fields_to_check:
            target = await self._store.query_one(self._collection, filter, projection={"_id": 1})
            if target is None:
                self._raise_not_found(filter)
            target_id = target["_id"]
            for key, value in fields_to_check:
                await self._check_for_duplicate(key, value, exclude_id=target_id)
            # Only the document that passed the check may be updated
            target_filter = {"$and": [dict(filter), {"_id": target_id}]}

        try:
            doc = await self._store.update_one(self._collection, target_filter, update)
        except DuplicateKeyFailure as exc:
            self._raise_duplicate_key(exc)
        if doc is None:
            self._raise_not_found(filter)
        return self._document_type.from_mongo(doc)

    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> TDocument:
        doc = await self._store.delete_one(self._collection, filter)
        if doc is None:
            self._raise_not_found(filter)
        return self._document_type.from_mongo(doc)

    def _payload_to_mapping(self, payload: Payload) -> dict[str, Any]:
        if isinstance(payload, BaseDocument):
            return payload.to_mongo()
        if isinstance(payload, BaseModel):
            return payload.model_dump(by_alias=True, exclude_unset=True)
        return dict(payload)

    def _fields_to_check(self, update: Update) -> list[tuple[str, Any]]:
        """Declared unique fields assigned by ``$set``, in declaration order."""

        assignments = update.get(SET_OPERATOR) if isinstance(update, Mapping) else None
        if not assignments:
            return []
        return [(key, assignments[key]) for key in self._unique_fields if key in assignments]

    async def _check_for_duplicate(self, key: str, value: Any, *, exclude_id: ObjectId) -> None:
        query = {key: value, "_id": {"$ne": exclude_id}}
        duplicate = await self._store.query_one(self._collection, query, projection={"_id": 1})
        if duplicate is not None:
            LOGGER.warning("Duplicate key error for %s field in %s", key, self._collection)
            raise DuplicateKeyRepositoryError(
                f"Duplicate key error: The value provided for the {key} field is already in use.",
                field=key,
            )

    def _raise_duplicate_key(self, exc: DuplicateKeyFailure) -> NoReturn:
        LOGGER.error(
            "Duplicate key error in %s on %s",
            self._collection,
            ", ".join(exc.key_pattern) or "<unknown>",
        )
        raise DuplicateKeyRepositoryError(
            "Duplicate key error: The value provided for a unique field is already in use.",
            field=exc.key_pattern[0] if len(exc.key_pattern) == 1 else None,
        ) from exc

    def _raise_not_found(self, filter: Mapping[str, Any]) -> NoReturn:
        LOGGER.warning("Document was not found in %s with filter %s", self._collection, filter)
        raise NotFoundRepositoryError(filter=filter)


__all__ = ["MongoRepository"]
