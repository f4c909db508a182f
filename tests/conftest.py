from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
import sys

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docrepo.config import get_settings
from docrepo.db import close_mongo_connection, connect_to_mongo
from docrepo.db.store import MotorDocumentStore
from docrepo.repositories import MongoRepository

from reservation_documents import RESERVATIONS_COLLECTION, ReservationDocument


@pytest.fixture(autouse=True)
def _env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/test")
    monkeypatch.setenv("MONGO_DB_NAME", "docrepo-test")
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest_asyncio.fixture
async def mongo_client(monkeypatch: pytest.MonkeyPatch) -> AsyncIterator[AsyncMongoMockClient]:
    client = AsyncMongoMockClient()

    def _client_factory(*_args, **_kwargs) -> AsyncMongoMockClient:
        return client

    monkeypatch.setattr("docrepo.db.AsyncIOMotorClient", _client_factory)
    yield client
    client.close()


@pytest_asyncio.fixture
async def database(mongo_client: AsyncMongoMockClient):
    db = await connect_to_mongo()
    yield db
    await close_mongo_connection()


@pytest.fixture
def store(database) -> MotorDocumentStore:
    return MotorDocumentStore(database)


@pytest.fixture
def reservations(store: MotorDocumentStore) -> MongoRepository[ReservationDocument]:
    return MongoRepository(
        store,
        RESERVATIONS_COLLECTION,
        ReservationDocument,
        unique_fields=("user_id", "invoice_id"),
    )
