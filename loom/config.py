"""
Loom configuration.

Settings are read from the environment (``LOOM_`` prefix) and an optional
``.env`` file in the working directory.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_db_path() -> Path:
    return Path.home() / ".loom" / "loom.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    db_path: Path = _default_db_path()

    # Verbose logging and SQL echo
    debug: bool = False
    log_json: bool = False

    # HTTP API (REST, SSE and the MCP endpoint)
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    # Change notification hub
    subscriber_queue_size: int = 10
    heartbeat_interval: float = 30.0

    @field_validator("db_path", mode="before")
    @classmethod
    def expand_db_path(cls, v):
        """Allow ``~`` in LOOM_DB_PATH."""
        return Path(v).expanduser()

    @field_validator("subscriber_queue_size")
    @classmethod
    def validate_queue_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("subscriber_queue_size must be at least 1")
        return v

    @property
    def database_url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db_path}"


@lru_cache
def get_settings() -> Settings:
    """Get the cached settings instance."""
    return Settings()
