"""
FastAPI application for authoring and exporting UX personas.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from personalab import __version__
from personalab.api.errors import register_exception_handlers
from personalab.api.routes.personas import router as personas_router
from personalab.database import create_tables
from personalab.infrastructure.config.settings import settings
from personalab.schemas import HealthCheckResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="PersonaLab API",
    description="""
    API for UX persona documents.

    - Create, edit, delete and fork personas
    - Export a persona as executive PDF, detailed PDF, Markdown or JSON

    Authentication:
    - Mutations and the "mine" listing require a Bearer token
    - Reads and exports are open
    """,
    version=__version__,
    openapi_url="/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=settings.cors_methods,
    allow_headers=settings.cors_headers,
)

register_exception_handlers(app)

app.include_router(personas_router)


@app.get("/health", response_model=HealthCheckResponse, tags=["Health"])
async def health_check():
    """
    Simple health check endpoint.
    """
    return HealthCheckResponse(status="ok", version=__version__)


# Initialize database tables
try:
    create_tables()
except Exception as e:
    logger.warning(f"Database initialization failed: {e}")
