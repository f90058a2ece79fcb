"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Database
    # ======================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/registrations.db",
        description="Database connection URL",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(
        default=3001,
        validation_alias=AliasChoices("port", "api_port"),
        description="API server port",
    )
    conflict_status_code: int = Field(
        default=409,
        ge=400,
        le=599,
        description="HTTP status for duplicate registrations (500 = legacy behaviour)",
    )

    # ======================
    # Keepalive
    # ======================
    origin: Optional[str] = Field(
        default=None, description="Externally reachable origin, enables self-ping"
    )
    keepalive_interval_seconds: float = Field(
        default=600, gt=0, description="Seconds between self-pings"
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def keepalive_enabled(self) -> bool:
        return bool(self.origin)

    @property
    def sqlite_path(self) -> Optional[Path]:
        """Filesystem path of a file-backed SQLite database, if any."""
        url = self.database_url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path == ":memory:" or path.startswith("file:"):
            return None
        return Path(path)

    def ensure_data_dir(self) -> None:
        """Create the directory holding the SQLite file when missing."""
        path = self.sqlite_path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "database_url": self._redact_url(self.database_url),
            "conflict_status_code": self.conflict_status_code,
            "keepalive": {
                "enabled": self.keepalive_enabled,
                "origin": self.origin or "(not set)",
                "interval_seconds": self.keepalive_interval_seconds,
            },
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Redact sensitive parts of database URL."""
        if "://" in url and "@" in url:
            proto, rest = url.split("://", 1)
            if "@" in rest:
                creds, host = rest.rsplit("@", 1)
                if ":" in creds:
                    user, _ = creds.split(":", 1)
                    return f"{proto}://{user}:***@{host}"
        return url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
