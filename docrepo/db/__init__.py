import logging
from typing import Any, Iterable, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from ..config import get_settings
from .store import MotorDocumentStore

LOGGER = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


async def connect_to_mongo() -> AsyncIOMotorDatabase:
    global _client, _db
    settings = get_settings()
    uri = settings.require_mongo_uri()

    client = AsyncIOMotorClient(
        uri,
        maxPoolSize=settings.mongo_max_pool_size,
        serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        connectTimeoutMS=settings.connect_timeout_ms,
        socketTimeoutMS=settings.socket_timeout_ms,
        **({"directConnection": True} if settings.mongo_direct else {}),
    )
    try:
        await client.admin.command("ping")
    except Exception:
        client.close()
        LOGGER.error("MongoDB ping failed for db=%s", settings.mongo_db)
        raise

    _client = client
    _db = client[settings.mongo_db]
    LOGGER.info("MongoDB connected: db=%s", settings.mongo_db)
    return _db


async def close_mongo_connection() -> None:
    global _client, _db
    if _client:
        try:
            _client.close()
        finally:
            LOGGER.info("MongoDB connection closed")
        _client = None
        _db = None


def get_db() -> AsyncIOMotorDatabase:
    if _db is None:
        raise RuntimeError("MongoDB not connected. Did you call connect_to_mongo()?")
    return _db


def get_store() -> MotorDocumentStore:
    return MotorDocumentStore(get_db())


async def ensure_unique_indexes(
    db: AsyncIOMotorDatabase,
    collection: str,
    fields: Iterable[str],
    *,
    sparse: bool = False,
    partial_filter: Optional[Mapping[str, Any]] = None,
) -> None:
    """Back a repository's unique fields with store-native unique indexes.

    Pass ``sparse=True`` (or a ``partial_filter``) for optional fields, otherwise
    every document missing the field collides on null.
    """

    for field in fields:
        try:
            await db[collection].create_index(
                field,
                unique=True,
                sparse=sparse,
                **({"partialFilterExpression": dict(partial_filter)} if partial_filter else {}),
            )
        except Exception as exc:  # pragma: no cover - best-effort logging
            LOGGER.error("Failed to ensure unique index on %s.%s: %s", collection, field, exc)
        else:
            LOGGER.info("Ensured unique index on %s.%s", collection, field)
