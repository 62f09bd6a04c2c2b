"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os

# Default DB lives next to the backend package
DEFAULT_SQLITE_PATH = Path(__file__).parent.parent.parent / "aggie.db"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    app_name: str = "Aggie Report API"
    version: str = "1.0.0"
    cors_allow_origins: str = field(default_factory=lambda: os.getenv("AGGIE_CORS_ALLOW_ORIGINS", "*"))
    api_prefix: str = "/api/v1"
    sqlite_path: str = field(default_factory=lambda: os.getenv("AGGIE_SQLITE_PATH", str(DEFAULT_SQLITE_PATH)))
    page_size: int = field(default_factory=lambda: _env_int("AGGIE_PAGE_SIZE", 25))
    batch_size: int = field(default_factory=lambda: _env_int("AGGIE_BATCH_SIZE", 10))
    default_role: str = field(default_factory=lambda: os.getenv("AGGIE_DEFAULT_ROLE", "viewer"))
    log_level: str = field(default_factory=lambda: os.getenv("AGGIE_LOG_LEVEL", "INFO"))

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


settings = Settings()
