from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from newsdesk.core import config as core_config  # noqa: E402

_VARS = (
    "PORT", "ADMIN_USERNAME", "ADMIN_PASSWORD", "JWT_SECRET", "TOKEN_TTL_SECONDS",
    "REQUIRE_ADMIN_TOKEN", "DATA_DIR", "ALLOWED_ORIGINS", "FEED_SOURCES", "FEED_LIMIT",
    "FEED_TIMEOUT_SECONDS", "LOGIN_RATE_LIMIT", "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    core_config.get_settings.cache_clear()
    yield monkeypatch
    core_config.get_settings.cache_clear()


def test_defaults(clean_env):
    settings = core_config.get_settings()
    assert settings.port == 3001
    assert settings.token_ttl_seconds == 86400
    assert settings.require_admin_token is False
    assert settings.admin_username == ""
    assert settings.jwt_secret == ""
    assert settings.data_dir == core_config.DEFAULT_DATA_DIR
    assert settings.allowed_origins == (
        "https://by1.net",
        "https://www.by1.net",
        "http://localhost:3000",
    )
    assert len(settings.feed_sources) == 3
    assert settings.feed_limit == 10
    assert settings.login_rate_limit == 0


def test_environment_overrides(clean_env, tmp_path):
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("REQUIRE_ADMIN_TOKEN", "yes")
    clean_env.setenv("DATA_DIR", str(tmp_path))
    clean_env.setenv("FEED_SOURCES", " https://a.test/rss , ,https://b.test/rss")
    clean_env.setenv("FEED_TIMEOUT_SECONDS", "2.5")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = core_config.get_settings()
    assert settings.port == 8080
    assert settings.require_admin_token is True
    assert settings.data_dir == tmp_path
    assert settings.feed_sources == ("https://a.test/rss", "https://b.test/rss")
    assert settings.feed_timeout_seconds == 2.5
    assert settings.log_level == "DEBUG"


def test_invalid_numbers_fall_back_to_defaults(clean_env):
    clean_env.setenv("PORT", "not-a-port")
    clean_env.setenv("FEED_LIMIT", "")
    settings = core_config.get_settings()
    assert settings.port == 3001
    assert settings.feed_limit == 10
