"""
Configuration helpers for the newsdesk backend.

Routers and services receive a Settings object instead of reading os.environ
directly, so tests can swap the environment and call get_settings.cache_clear().
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

DEFAULT_ALLOWED_ORIGINS = (
    "https://by1.net",
    "https://www.by1.net",
    "http://localhost:3000",  # development
)

DEFAULT_FEED_SOURCES = (
    "https://feeds.feedburner.com/venturebeat/SZYF",
    "https://www.artificialintelligence-news.com/feed/",
    "https://www.unite.ai/feed/",
)


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    port: int
    admin_username: str
    admin_password: str
    jwt_secret: str
    token_ttl_seconds: int
    require_admin_token: bool
    data_dir: Path
    allowed_origins: tuple[str, ...]
    feed_sources: tuple[str, ...]
    feed_limit: int
    feed_timeout_seconds: float
    login_rate_limit: int
    login_rate_window_seconds: int
    trust_forwarded_for: bool
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            return default
        items = tuple(item.strip() for item in value.split(",") if item.strip())
        return items or default

    data_dir = os.getenv("DATA_DIR")
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        port=_int(os.getenv("PORT", "3001"), 3001),
        admin_username=os.getenv("ADMIN_USERNAME", ""),
        admin_password=os.getenv("ADMIN_PASSWORD", ""),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        token_ttl_seconds=_int(os.getenv("TOKEN_TTL_SECONDS", "86400"), 86400),
        require_admin_token=_bool(os.getenv("REQUIRE_ADMIN_TOKEN"), False),
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        allowed_origins=_list(os.getenv("ALLOWED_ORIGINS"), DEFAULT_ALLOWED_ORIGINS),
        feed_sources=_list(os.getenv("FEED_SOURCES"), DEFAULT_FEED_SOURCES),
        feed_limit=_int(os.getenv("FEED_LIMIT", "10"), 10),
        feed_timeout_seconds=_float(os.getenv("FEED_TIMEOUT_SECONDS", "10"), 10.0),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "0"), 0),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "300"), 300),
        trust_forwarded_for=_bool(os.getenv("TRUST_FORWARDED_FOR"), False),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
