from __future__ import annotations

import logging

import pytest

from docrepo.config import ConfigurationError, get_settings
from docrepo.db import close_mongo_connection, connect_to_mongo, get_db, get_store
from docrepo.log import configure_logging


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MONGO_DIRECT", "true")
    monkeypatch.setenv("MONGO_SOCKET_TIMEOUT_MS", "9000")
    monkeypatch.setenv("DOCREPO_LOG_LEVEL", "debug")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.mongo_uri == "mongodb://localhost:27017/test"
    assert settings.mongo_db == "docrepo-test"
    assert settings.mongo_direct is True
    assert settings.socket_timeout_ms == 9000
    assert settings.log_level == "DEBUG"


def test_missing_mongo_uri_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MONGODB_URI", "MONGO_URI", "MONGO_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError, match="MONGODB_URI"):
        get_settings().require_mongo_uri()


@pytest.mark.asyncio
async def test_connect_requires_mongo_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MONGODB_URI", "MONGO_URI", "MONGO_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()

    with pytest.raises(ConfigurationError):
        await connect_to_mongo()


@pytest.mark.asyncio
async def test_connection_lifecycle(mongo_client) -> None:
    with pytest.raises(RuntimeError):
        get_db()

    db = await connect_to_mongo()
    assert get_db() is db
    assert get_store().database is db

    await close_mongo_connection()
    with pytest.raises(RuntimeError):
        get_db()


def test_configure_logging_uses_settings_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCREPO_LOG_LEVEL", "WARNING")
    get_settings.cache_clear()

    logger = configure_logging()
    assert logger.name == "docrepo"
    assert logger.level == logging.WARNING
    assert configure_logging("DEBUG").level == logging.DEBUG
