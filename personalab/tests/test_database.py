"""
Tests for engine construction and database initialization.
"""

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from personalab import database
from personalab.database import _mask_url, build_engine, create_tables


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)
    engine.dispose()


def test_create_tables():
    engine = build_engine("sqlite://")
    create_tables(bind=engine)
    assert "personas" in inspect(engine).get_table_names()
    engine.dispose()


def test_init_db():
    assert database.init_db() is True


def test_mask_url():
    assert _mask_url("postgresql://app:secret@db:5432/personas") == "postgresql://app:***@db:5432/personas"
    assert _mask_url("sqlite:///./personalab.db") == "sqlite:///./personalab.db"
