"""Identifier types shared by every stored document."""

from __future__ import annotations

from typing import Annotated, Any

from bson import ObjectId
from pydantic.functional_serializers import PlainSerializer
from pydantic.functional_validators import BeforeValidator


def _validate_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not ObjectId.is_valid(text):
            raise ValueError("Invalid ObjectId hex string")
        return ObjectId(text)
    raise TypeError("ObjectId value must be str or ObjectId instance")


# Python-mode dumps keep the bson wrapper for the driver; JSON-mode dumps strip it.
PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_validate_object_id),
    PlainSerializer(lambda value: str(value), return_type=str, when_used="json"),
]

__all__ = ["PyObjectId"]
