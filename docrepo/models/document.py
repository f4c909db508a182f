"""Base contract shared by every document stored through a repository."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .identifiers import PyObjectId

TDocument = TypeVar("TDocument", bound="BaseDocument")


class BaseDocument(BaseModel):
    """Minimal shape of a stored entity: an immutable ``_id`` plus typed fields.

    Subclasses declare their own fields with camelCase aliases matching the
    stored keys, the same way application documents do elsewhere.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: PyObjectId = Field(alias="_id", frozen=True)

    @classmethod
    def from_mongo(cls: type[TDocument], raw: Mapping[str, Any]) -> TDocument:
        """Build the typed document from a raw driver mapping."""

        return cls.model_validate(dict(raw))

    def to_mongo(self) -> dict[str, Any]:
        """Stored representation: aliased keys, native ``ObjectId`` values.

        Unset optional fields are left out rather than stored as null, so
        sparse unique indexes skip them.
        """

        return self.model_dump(by_alias=True, exclude_none=True)

    def to_plain(self) -> dict[str, Any]:
        """Application-safe representation with store wrapper types stripped."""

        return self.model_dump(by_alias=True, mode="json")


def stored_field_name(document_type: type[BaseModel], name: str) -> str:
    """Return the stored key for ``name``, accepting attribute names or aliases."""

    field = document_type.model_fields.get(name)
    if field is not None and field.alias:
        return field.alias
    return name


__all__ = ["BaseDocument", "TDocument", "stored_field_name"]
