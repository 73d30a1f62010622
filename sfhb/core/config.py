"""
Configuration helpers for the SFHB backend.

Settings are read once from environment variables (port, writer token, data
file path, CORS and TLS options) so that routers/services do not fetch
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    token: str
    data_file: str
    refresh_on_read: bool
    cors_enabled: bool
    cors_allow_origins: tuple[str, ...]
    tls_certfile: str
    tls_keyfile: str
    log_level: str

    @property
    def auth_enabled(self) -> bool:
        return bool(self.token)

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tls_certfile and self.tls_keyfile)


def _int(value: str | None, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _csv(value: str | None, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    items = tuple(x.strip() for x in (value or "").split(",") if x.strip())
    return items or default


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST") or "0.0.0.0",
        port=_int(os.getenv("PORT"), 8080),
        token=os.getenv("TOKEN", ""),
        data_file=os.getenv("DATA_FILE") or "./data.json",
        refresh_on_read=_bool(os.getenv("ARTICLES_REFRESH_ON_READ"), True),
        cors_enabled=_bool(os.getenv("CORS_ENABLED"), True),
        cors_allow_origins=_csv(os.getenv("CORS_ALLOW_ORIGINS"), ("*",)),
        tls_certfile=os.getenv("TLS_CERTFILE", ""),
        tls_keyfile=os.getenv("TLS_KEYFILE", ""),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
