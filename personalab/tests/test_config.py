"""
Tests for configuration settings.
"""

import pytest

from personalab.infrastructure.config.settings import DEV_TOKEN_PREFIX, Settings

ENV_KEYS = (
    "DATABASE_URL",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
    "DB_POOL_TIMEOUT",
    "DEFAULT_LOCALE",
    "LIST_LIMIT",
    "AUTH_JWT_SECRET",
    "AUTH_JWT_ALGORITHM",
    "ENABLE_DEV_TOKENS",
    "CORS_ORIGINS",
    "CORS_METHODS",
    "CORS_HEADERS",
    "LOG_LEVEL",
    "UVICORN_HOST",
    "UVICORN_PORT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    """Test default configuration settings"""
    settings = Settings()

    assert settings.database_url == "sqlite:///./personalab.db"
    assert settings.db_pool_size == 5
    assert settings.db_max_overflow == 10
    assert settings.db_pool_timeout == 30
    assert settings.default_locale == "en-US"
    assert settings.list_limit == 100
    assert settings.auth_jwt_secret is None
    assert settings.auth_jwt_algorithm == "HS256"
    assert settings.enable_dev_tokens is False
    assert settings.dev_token_prefix == DEV_TOKEN_PREFIX
    assert settings.cors_origins == ["*"]
    assert settings.cors_methods == ["GET", "POST", "PATCH", "DELETE", "OPTIONS"]
    assert settings.log_level == "INFO"
    assert settings.uvicorn_port == 8000


def test_overrides(clean_env):
    """Test that environment variables override default settings"""
    clean_env.setenv("DATABASE_URL", "postgresql://user:secret@db:5432/personas")
    clean_env.setenv("DB_POOL_SIZE", "20")
    clean_env.setenv("DEFAULT_LOCALE", "pt-BR")
    clean_env.setenv("LIST_LIMIT", "25")
    clean_env.setenv("AUTH_JWT_SECRET", "s3cret")
    clean_env.setenv("ENABLE_DEV_TOKENS", "true")
    clean_env.setenv("CORS_ORIGINS", "http://localhost:3000, https://personas.example.com")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.db_pool_size == 20
    assert settings.default_locale == "pt-BR"
    assert settings.list_limit == 25
    assert settings.auth_jwt_secret == "s3cret"
    assert settings.enable_dev_tokens is True
    assert settings.cors_origins == ["http://localhost:3000", "https://personas.example.com"]
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "raw,expected",
    [("true", True), ("1", True), ("YES", True), ("on", True), ("false", False), ("0", False)],
)
def test_boolean_parsing(clean_env, raw, expected):
    clean_env.setenv("ENABLE_DEV_TOKENS", raw)
    assert Settings().enable_dev_tokens is expected


def test_empty_secret_is_unset(clean_env):
    clean_env.setenv("AUTH_JWT_SECRET", "")
    assert Settings().auth_jwt_secret is None



def test_dev_tokens_are_off_unless_enabled(clean_env):
    """Development tokens impersonate any user, so they need an explicit opt-in"""
    assert Settings().enable_dev_tokens is False

    clean_env.setenv("ENABLE_DEV_TOKENS", "")
    assert Settings().enable_dev_tokens is False
