"""
Tests for the SQLAlchemy persona repository.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from personalab.domain.exceptions import StoreFailure, ValidationFailure
from personalab.domain.models.persona_record import PersonaScope
from personalab.infrastructure.persistence.persona_repository import PersonaRepository
from personalab.models import PersonaRow
from personalab.utils.timezone_utils import utc_now


def _insert(repository, payload, user_id="alice", is_public=True):
    return repository.insert(
        user_id=user_id,
        author_name=user_id.title(),
        title=payload["title"],
        locale=payload["locale"],
        is_public=is_public,
        source_persona_id=None,
        data=payload["data"],
    )


def test_insert_assigns_id_and_timestamps(repository, minimal_payload):
    record = _insert(repository, minimal_payload)
    assert len(record.id) == 36
    assert record.created_at == record.updated_at
    assert record.created_at.tzinfo is not None


def test_get_missing_returns_none(repository):
    assert repository.get("missing") is None


def test_replace_missing_returns_none(repository, minimal_payload):
    result = repository.replace(
        "missing",
        title="Title",
        locale="en-US",
        is_public=True,
        source_persona_id=None,
        data=minimal_payload["data"],
    )
    assert result is None


def test_delete(repository, minimal_payload):
    record = _insert(repository, minimal_payload)
    assert repository.delete(record.id) is True
    assert repository.delete(record.id) is False
    assert repository.get(record.id) is None


def test_rows_are_revalidated_on_read(db_session, repository):
    """A stored blob that no longer satisfies the schema is reported, not returned."""
    now = utc_now()
    row = PersonaRow(
        user_id="alice",
        title="Broken",
        locale="en-US",
        is_public=True,
        data={"name": "x"},
        created_at=now,
        updated_at=now,
    )
    db_session.add(row)
    db_session.commit()

    with pytest.raises(ValidationFailure):
        repository.get(row.id)


def test_list_visible_mine_filters_owner(repository, minimal_payload):
    _insert(repository, minimal_payload, user_id="alice", is_public=False)
    _insert(repository, minimal_payload, user_id="bob", is_public=True)

    records = repository.list_visible(PersonaScope.MINE, "alice")

    assert [r.user_id for r in records] == ["alice"]


def test_store_errors_become_store_failure():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))
    repository = PersonaRepository(session)

    with pytest.raises(StoreFailure):
        repository.get("any")
    session.rollback.assert_called_once()


def test_commit_errors_are_rolled_back(minimal_payload):
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
    repository = PersonaRepository(session)

    with pytest.raises(StoreFailure):
        _insert(repository, minimal_payload)
    session.rollback.assert_called_once()


def test_get_owner_skips_document_validation(db_session, repository, minimal_payload):
    record = _insert(repository, minimal_payload, user_id="alice")
    row = db_session.get(PersonaRow, record.id)
    row.data = {"name": "x"}
    db_session.commit()

    owner = repository.get_owner(record.id)

    assert owner.user_id == "alice"
    assert owner.source_persona_id is None
    assert repository.get_owner("missing") is None
