"""
Persona repository implementation.

This module provides the Record Store adapter for persona rows using
SQLAlchemy for database access. Reads come back as validated PersonaRecord
objects; every SQLAlchemy error is rolled back and surfaced as StoreFailure.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from personalab.domain.exceptions import StoreFailure
from personalab.domain.models.persona_record import (
    PersonaRecord,
    PersonaScope,
    map_persona_row,
)
from personalab.models import PersonaRow
from personalab.utils.timezone_utils import utc_now

logger = logging.getLogger(__name__)


class PersonaOwner(NamedTuple):
    """Ownership columns of a persona row."""

    user_id: str
    source_persona_id: Optional[str]


class PersonaRepository:
    """Persona rows in the Record Store."""

    def __init__(self, session: Session):
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy session
        """
        self.session = session

    def _fail(self, action: str, error: SQLAlchemyError) -> StoreFailure:
        self.session.rollback()
        logger.error(f"Error {action}: {str(error)}")
        return StoreFailure(f"Store error while {action}.")

    def _find_row(self, persona_id: str) -> Optional[PersonaRow]:
        return self.session.query(PersonaRow).filter(PersonaRow.id == persona_id).first()

    def get(self, persona_id: str) -> Optional[PersonaRecord]:
        """
        Get a persona by ID, regardless of visibility.

        Returns:
            PersonaRecord if found, None otherwise
        """
        try:
            row = self._find_row(persona_id)
        except SQLAlchemyError as e:
            raise self._fail("loading persona", e)
        return map_persona_row(row) if row else None

    def get_owner(self, persona_id: str) -> Optional[PersonaOwner]:
        """
        Read only the ownership columns of a row.

        The data blob is not loaded or validated, so owner checks work even
        on rows that no longer satisfy the schema.
        """
        try:
            row = (
                self.session.query(PersonaRow.user_id, PersonaRow.source_persona_id)
                .filter(PersonaRow.id == persona_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._fail("loading persona owner", e)
        return PersonaOwner(row.user_id, row.source_persona_id) if row else None

    def insert(
        self,
        *,
        user_id: str,
        author_name: Optional[str],
        title: str,
        locale: str,
        is_public: bool,
        source_persona_id: Optional[str],
        data: Dict[str, Any],
    ) -> PersonaRecord:
        """Insert a new row; id and timestamps are assigned by the store."""
        now = utc_now()
        row = PersonaRow(
            user_id=user_id,
            author_name=author_name,
            title=title,
            locale=locale,
            is_public=is_public,
            source_persona_id=source_persona_id,
            data=data,
            created_at=now,
            updated_at=now,
        )
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("creating persona", e)
        return map_persona_row(row)

    def replace(
        self,
        persona_id: str,
        *,
        title: str,
        locale: str,
        is_public: bool,
        source_persona_id: Optional[str],
        data: Dict[str, Any],
    ) -> Optional[PersonaRecord]:
        """
        Replace the whole document and metadata of an existing row.

        Returns:
            Updated PersonaRecord, or None if the row vanished
        """
        try:
            row = self._find_row(persona_id)
            if row is None:
                return None
            row.title = title
            row.locale = locale
            row.is_public = is_public
            row.source_persona_id = source_persona_id
            row.data = data
            row.updated_at = utc_now()
            self.session.commit()
            self.session.refresh(row)
        except SQLAlchemyError as e:
            raise self._fail("updating persona", e)
        return map_persona_row(row)

    def delete(self, persona_id: str) -> bool:
        """Hard-delete a row. Returns False if it did not exist."""
        try:
            row = self._find_row(persona_id)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("deleting persona", e)
        return True

    def list_visible(
        self, scope: PersonaScope, user_id: Optional[str] = None, limit: int = 100
    ) -> List[PersonaRecord]:
        """
        List personas for a scope, most recently updated first.

        ``MINE`` filters on ``user_id``; ``COMMUNITY`` on public rows; ``ALL``
        returns public rows plus the caller's own rows when ``user_id`` is set.
        """
        query = self.session.query(PersonaRow)
        if scope == PersonaScope.MINE:
            query = query.filter(PersonaRow.user_id == user_id)
        elif scope == PersonaScope.COMMUNITY or not user_id:
            query = query.filter(PersonaRow.is_public.is_(True))
        else:
            query = query.filter(
                or_(PersonaRow.is_public.is_(True), PersonaRow.user_id == user_id)
            )
        query = query.order_by(
            PersonaRow.updated_at.desc(), PersonaRow.created_at.desc()
        ).limit(limit)

        try:
            rows = query.all()
        except SQLAlchemyError as e:
            raise self._fail("listing personas", e)
        return [map_persona_row(row) for row in rows]
