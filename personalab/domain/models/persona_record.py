"""
Persona record: a validated PersonaData plus provenance metadata.

Renderers only ever look at ``record.data``; ownership fields are consumed by
the record service.
"""

import json
from enum import Enum
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from personalab.domain.exceptions import ValidationFailure
from personalab.domain.models.persona_schema import (
    PersonaData,
    field_errors,
    validate_persona_data,
)
from personalab.utils.timezone_utils import ensure_utc


class PersonaRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    user_id: str
    author_name: Optional[str] = None
    title: str
    locale: str
    is_public: bool
    source_persona_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    data: PersonaData

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def to_json_dict(self) -> Dict[str, Any]:
        """Wire form: camelCase keys in record field order."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        """Pretty-printed JSON export of the full record."""
        return json.dumps(self.to_json_dict(), indent=2, ensure_ascii=False)


def map_persona_row(row: Any) -> PersonaRecord:
    """
    Build a PersonaRecord from a store row, re-validating its data blob.

    Args:
        row: PersonaRow (or any object exposing the personas columns)

    Raises:
        ValidationFailure: if the stored blob no longer satisfies the schema
    """
    return PersonaRecord(
        id=str(row.id),
        user_id=row.user_id,
        author_name=row.author_name,
        title=row.title,
        locale=row.locale,
        is_public=bool(row.is_public),
        source_persona_id=row.source_persona_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        data=validate_persona_data(row.data),
    )


class PersonaScope(str, Enum):
    """Visibility scope of a persona listing."""

    MINE = "mine"
    COMMUNITY = "community"
    ALL = "all"


def validate_persona_record(candidate: Any) -> PersonaRecord:
    """
    Validate a full record, e.g. one read back from a JSON export.

    Raises:
        ValidationFailure: listing every violated field path
    """
    try:
        return PersonaRecord.model_validate(candidate)
    except ValidationError as e:
        raise ValidationFailure(field_errors(e)) from None
