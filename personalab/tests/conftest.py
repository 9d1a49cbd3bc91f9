"""
PyTest configuration and fixtures.
"""

import copy
import json
import os
from pathlib import Path

# Point the app at an in-memory store before any personalab module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENABLE_DEV_TOKENS"] = "true"
os.environ.pop("AUTH_JWT_SECRET", None)

import pytest
from fastapi.testclient import TestClient

from personalab.api.app import app
from personalab.database import Base, build_engine, get_db
from personalab.domain.models.persona_record import PersonaRecord
from personalab.domain.models.persona_schema import validate_persona_data
from personalab.infrastructure.persistence.persona_repository import PersonaRepository
from personalab.services.persona_service import PersonaService
from personalab.utils.timezone_utils import utc_now
from sqlalchemy.orm import sessionmaker

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURES_DIR / name, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def minimal_payload():
    """Smallest valid create payload: optional lists empty, texts near their minimum."""
    return load_fixture("persona_minimal.json")


@pytest.fixture
def full_payload():
    """Payload with every field filled, including non-ASCII text."""
    return load_fixture("persona_full.json")


@pytest.fixture
def long_payload(full_payload):
    """Payload with texts at their maximum length and long lists; spans several PDF pages."""
    payload = copy.deepcopy(full_payload)
    data = payload["data"]
    sentence = "Prefers predictable routines and explains every decision to the team. "

    def long_text(size: int) -> str:
        return (sentence * (size // len(sentence) + 1))[:size].strip()

    data["shortBio"] = long_text(1000)
    data["representativeStory"] = long_text(2200)
    data["notes"] = long_text(2200)
    for key in ("awareness", "consideration", "decision", "retention"):
        data["journey"][key] = long_text(1200)
    data["context"]["scenario"] = long_text(1200)
    data["context"]["environment"] = long_text(1200)
    data["goals"]["primary"] = [f"Goal {i}: {long_text(180)}" for i in range(25)]
    data["frustrations"]["painPoints"] = [f"Pain {i}: {long_text(180)}" for i in range(25)]
    # A single token wider than the page
    data["opportunities"] = ["x" * 400]
    return payload


@pytest.fixture
def minimal_data(minimal_payload):
    return validate_persona_data(minimal_payload["data"])


@pytest.fixture
def full_data(full_payload):
    return validate_persona_data(full_payload["data"])


@pytest.fixture
def make_record():
    """Build a PersonaRecord without touching the store."""

    def _make(payload, **overrides):
        now = utc_now()
        fields = {
            "id": "00000000-0000-4000-8000-000000000001",
            "user_id": "owner",
            "author_name": "Owner Name",
            "title": payload["title"],
            "locale": payload.get("locale", "en-US"),
            "is_public": payload.get("isPublic", True),
            "source_persona_id": None,
            "created_at": now,
            "updated_at": now,
            "data": validate_persona_data(payload["data"]),
        }
        fields.update(overrides)
        return PersonaRecord(**fields)

    return _make


@pytest.fixture
def db_engine():
    """Fresh in-memory database for each test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Get database session for each test."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db_session):
    return PersonaRepository(db_session)


@pytest.fixture
def service(repository):
    return PersonaService(repository)


@pytest.fixture
def client(db_session):
    """Create test client with database dependency override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Authorization headers for a development token user."""

    def _headers(user_id: str = "alice"):
        return {"Authorization": f"Bearer dev_test_token_{user_id}"}

    return _headers
