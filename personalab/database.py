from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
import logging

from personalab.infrastructure.config.settings import settings

# Set up logging
logger = logging.getLogger(__name__)

# Create Base instance
Base = declarative_base()

DATABASE_URL = settings.database_url


def _mask_url(url: str) -> str:
    """Hide the password part of a database URL for logging."""
    if "@" in url and ":" in url.split("@", 1)[0].split("//", 1)[-1]:
        creds, rest = url.split("@", 1)
        scheme, user_part = creds.split("//", 1)
        user = user_part.split(":", 1)[0]
        return f"{scheme}//{user}:***@{rest}"
    return url


def build_engine(url: str):
    """
    Create the SQLAlchemy engine for the given URL.

    SQLite gets a same-thread override (and a single shared connection when
    in-memory); other backends use a QueuePool sized from settings.
    """
    if url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(url, connect_args=connect_args, pool_pre_ping=True)

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,  # Verify connections before using them
    )


engine = build_engine(DATABASE_URL)
logger.info(f"Using database: {_mask_url(DATABASE_URL)}")

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency function to get a database session.
    Used with FastAPI's dependency injection system.

    Yields:
        Session: A SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None) -> None:
    """Create all tables defined in the models."""
    # Register the mapped classes on Base before create_all
    from personalab import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables are in place")


def init_db() -> bool:
    """
    Initialize the database connection and tables.

    Returns:
        bool: True if initialization was successful, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        create_tables()
        return True
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        return False
