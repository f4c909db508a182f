import os
from functools import lru_cache
from pathlib import Path as _Path

from dotenv import load_dotenv as _load_dotenv
from pydantic import BaseModel, Field, field_validator

# Process environment wins over the .env file
_load_dotenv(dotenv_path=_Path(__file__).resolve().parent.parent / ".env", override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


class Settings(BaseModel):
    # Support multiple common env var names for Mongo connection string
    mongo_uri: str = Field(
        default_factory=lambda: (
            os.getenv("MONGODB_URI")
            or os.getenv("MONGO_URI")
            or os.getenv("MONGO_URL")
            or ""
        )
    )
    mongo_db: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "docrepo"))
    # Optional: force direct connection (applies to non-SRV URIs)
    mongo_direct: bool = Field(default_factory=lambda: _env_flag("MONGO_DIRECT"))
    mongo_max_pool_size: int = Field(default_factory=lambda: int(os.getenv("MONGO_MAX_POOL_SIZE", "20")))
    # Fast-fail defaults; the repository inherits these, it has no timeouts of its own
    server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "3000"))
    )
    connect_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", "3000")))
    socket_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "5000")))
    log_level: str = Field(default_factory=lambda: os.getenv("DOCREPO_LOG_LEVEL", "INFO"))

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"unsupported log level: {value}")
        return level

    def require_mongo_uri(self) -> str:
        if not self.mongo_uri:
            raise ConfigurationError("Missing MONGODB_URI env var for docrepo")
        return self.mongo_uri


@lru_cache()
def get_settings() -> Settings:
    return Settings()
