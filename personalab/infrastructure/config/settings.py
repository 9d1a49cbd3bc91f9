"""Application settings and configuration

Every value is read from the process environment. A .env file in the working
directory is loaded first so local development does not need exported
variables.
"""

import os
import logging
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEV_TOKEN_PREFIX = "dev_test_token_"


def _get_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_list(key: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


class Settings:
    """Manages application settings and configuration"""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        # Database configuration
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./personalab.db")
        self.db_pool_size = int(os.getenv("DB_POOL_SIZE", "5"))
        self.db_max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "10"))
        self.db_pool_timeout = int(os.getenv("DB_POOL_TIMEOUT", "30"))

        # Persona defaults
        self.default_locale = os.getenv("DEFAULT_LOCALE", "en-US")
        self.list_limit = int(os.getenv("LIST_LIMIT", "100"))

        # Authentication settings
        self.auth_jwt_secret: Optional[str] = os.getenv("AUTH_JWT_SECRET") or None
        self.auth_jwt_algorithm = os.getenv("AUTH_JWT_ALGORITHM", "HS256")
        self.enable_dev_tokens = _get_bool("ENABLE_DEV_TOKENS", False)
        self.dev_token_prefix = DEV_TOKEN_PREFIX

        # CORS settings
        self.cors_origins = _get_list("CORS_ORIGINS", "*")
        self.cors_methods = _get_list("CORS_METHODS", "GET,POST,PATCH,DELETE,OPTIONS")
        self.cors_headers = _get_list("CORS_HEADERS", "*")

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Uvicorn server settings (for python -m personalab)
        self.uvicorn_host = os.getenv("UVICORN_HOST", "0.0.0.0")
        self.uvicorn_port = int(os.getenv("UVICORN_PORT", "8000"))



settings = Settings()
