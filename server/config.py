"""Configuration management for the channel bridge."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = Path(__file__).parent.parent / ".env"
    if not env_path.is_file():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and "=" in stripped:
            key, value = stripped.split("=", 1)
            key, value = key.strip(), value.strip().strip("'\"")
            if key and value and key not in os.environ:
                os.environ[key] = value


_load_env_file()


DEFAULT_APP_NAME = "Infobip Bridge"
DEFAULT_APP_VERSION = "0.1.0"
DEFAULT_IB_SEND_URL = "https://api.infobip.com/sms/1/text/advanced"


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


class Settings(BaseModel):
    """Application settings read from environment variables.

    Defaults are evaluated per instance, so tests can monkeypatch the
    environment and call `get_settings.cache_clear()`.
    """

    # App metadata
    app_name: str = Field(default_factory=lambda: os.getenv("APP_NAME", DEFAULT_APP_NAME))
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Environment
    env: str = Field(default_factory=lambda: os.getenv("ENV", "dev"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default_factory=lambda: os.getenv("CORS_ORIGINS", "*"))
    enable_docs: bool = Field(default_factory=lambda: os.getenv("ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default_factory=lambda: os.getenv("DOCS_URL", "/docs"))

    # Public domain gateways call back on when a channel has none of its own
    domain: str = Field(default_factory=lambda: os.getenv("COURIER_DOMAIN", "localhost"))

    # Infobip
    ib_send_url: str = Field(default_factory=lambda: os.getenv("IB_SEND_URL", DEFAULT_IB_SEND_URL))
    ib_http_timeout: float = Field(default_factory=lambda: _env_float("IB_HTTP_TIMEOUT", 30.0))

    # JSON file with the channels served by the in-memory backend
    channels_file: Optional[str] = Field(default_factory=lambda: os.getenv("CHANNELS_FILE"))

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
