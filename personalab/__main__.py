"""Run the API server: ``python -m personalab``."""

import logging
import sys

import uvicorn

from personalab.database import init_db
from personalab.infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


def main() -> int:
    if not init_db():
        logger.error("Database is not reachable; refusing to start")
        return 1
    uvicorn.run(
        "personalab.api.app:app",
        host=settings.uvicorn_host,
        port=settings.uvicorn_port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
