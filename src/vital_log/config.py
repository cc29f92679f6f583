"""Configuration loaded from environment variables.

Settings are grouped into small pydantic models and combined into
``AppConfig``. ``get_config()`` caches the result for the process; tests
call ``get_config.cache_clear()`` after changing the environment.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()

DEFAULT_DATA_DIR = Path.home() / ".vital-log"


class StorageConfig(BaseModel):
    """Local storage settings."""

    data_dir: Path = Field(default=DEFAULT_DATA_DIR, description="Directory holding the database")
    db_filename: str = Field(default="vital_log.db", description="SQLite database file name")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_filename


class SessionConfig(BaseModel):
    """Measurement session policies."""

    max_readings_per_session: int | None = Field(
        default=None, gt=0, description="Reading cap per session, None for unlimited"
    )
    auto_start_on_add: bool = Field(
        default=True, description="Start an inactive session when a reading or metric arrives"
    )
    restart_resets_clock: bool = Field(
        default=True, description="Calling start() on a session resets its start time"
    )


class SyncConfig(BaseModel):
    """Remote sync settings."""

    remote_url: str | None = Field(default=None, description="Base URL of the sync server")
    remote_token: str | None = Field(default=None, description="Bearer token for the sync server")
    user_id: str = Field(default="local", min_length=1, description="Remote user namespace")
    timeout_seconds: float = Field(default=30.0, gt=0.0, description="Timeout per remote call")

    @field_validator("remote_url")
    def strip_trailing_slash(cls, v):
        if v:
            return v.rstrip("/")
        return v


class ServerConfig(BaseModel):
    """Sync server settings."""

    host: str = Field(default="127.0.0.1", description="Bind host")
    port: int = Field(default=8000, gt=0, lt=65536, description="Bind port")
    token: str | None = Field(default=None, description="Required bearer token, if set")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    format: Literal["json", "console"] = Field(default="console", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _parse_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _parse_optional_int(val: str | None) -> int | None:
    if val is None or val.strip() == "" or val.strip().lower() in {"none", "unlimited"}:
        return None
    return int(val)


def _level_to_literal(val: str) -> Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
    v = val.strip().upper()
    return cast(
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "WARNING",
    )


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""
    data_dir = os.getenv("VITAL_LOG_DATA_DIR")

    storage = StorageConfig(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
    )

    session = SessionConfig(
        max_readings_per_session=_parse_optional_int(os.getenv("VITAL_LOG_MAX_READINGS")),
        auto_start_on_add=_parse_bool(os.getenv("VITAL_LOG_AUTO_START"), True),
        restart_resets_clock=_parse_bool(os.getenv("VITAL_LOG_RESTART_RESETS_CLOCK"), True),
    )

    sync = SyncConfig(
        remote_url=os.getenv("VITAL_LOG_REMOTE_URL") or None,
        remote_token=os.getenv("VITAL_LOG_REMOTE_TOKEN") or None,
        user_id=os.getenv("VITAL_LOG_USER_ID", "local"),
        timeout_seconds=float(os.getenv("VITAL_LOG_SYNC_TIMEOUT", "30.0")),
    )

    server = ServerConfig(
        host=os.getenv("VITAL_LOG_SERVER_HOST", "127.0.0.1"),
        port=int(os.getenv("VITAL_LOG_SERVER_PORT", "8000")),
        token=os.getenv("VITAL_LOG_SERVER_TOKEN") or None,
    )

    log_format = os.getenv("LOG_FORMAT", "console").strip().lower()
    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "WARNING")),
        format="json" if log_format == "json" else "console",
    )

    return AppConfig(
        storage=storage,
        session=session,
        sync=sync,
        server=server,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()
