"""
Draft helpers used before a persona reaches the validator.

Entry forms work with a flat mapping of field names to text
(``demographics_ageRange``, ``goals_primary``...) where list fields hold one
item per line. The helpers here convert that representation to and from the
nested document, and fill in a partially completed draft so it can be
validated. None of them validate anything themselves.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Optional

from personalab.domain.models.persona_schema import (
    FIELD_BOUNDS,
    LEVEL_FIELDS,
    OPTIONAL_LIST_FIELDS,
    REQUIRED_LIST_FIELDS,
    SCORE_FIELDS,
    PersonaData,
    empty_persona_data,
)
from personalab.utils.persona_utils import list_from_text, text_from_list

logger = logging.getLogger(__name__)

DEFAULT_DRAFT_FALLBACK = "Not informed in this draft."
DEFAULT_LEVEL = "Medium"
DEFAULT_SCORE = 3

# Document paths holding free text, excluding record metadata and notes
TEXT_FIELDS = tuple(
    path for path in FIELD_BOUNDS if path not in ("title", "locale", "notes")
)
SCORE_PATHS = tuple(f"personality.{key}" for key in SCORE_FIELDS)
LIST_FIELDS = REQUIRED_LIST_FIELDS + OPTIONAL_LIST_FIELDS


def _get(document: Mapping[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _set(document: Dict[str, Any], path: str, value: Any) -> None:
    *parents, key = path.split(".")
    target = document
    for part in parents:
        target = target.setdefault(part, {})
    target[key] = value


def form_field_name(path: str) -> str:
    """``demographics.ageRange`` -> ``demographics_ageRange``."""
    return path.replace(".", "_")


def parse_score(raw: Any) -> Any:
    """
    Read a personality score typed into a form.

    Integers pass through, numeric strings are converted and anything
    non-numeric becomes 3. Out-of-range and fractional values are returned
    as numbers so the validator can reject them.
    """
    if isinstance(raw, bool):
        return DEFAULT_SCORE
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else raw
    try:
        number = float(str(raw).strip())
    except ValueError:
        return DEFAULT_SCORE
    return int(number) if number.is_integer() else number


def _merge(base: Dict[str, Any], draft: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in draft.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = copy.deepcopy(value)
    return base


def apply_draft_defaults(
    draft: Optional[Mapping[str, Any]], fallback: str = DEFAULT_DRAFT_FALLBACK
) -> Dict[str, Any]:
    """
    Complete a partial persona draft so it can be submitted for validation.

    Missing groups are taken from the empty document; blank texts and empty
    required lists get ``fallback``; blank levels become "Medium"; scores
    go through ``parse_score``. Values the draft already has are kept as is,
    so an invalid value still fails validation afterwards.

    Args:
        draft: Partial document in wire form (camelCase keys)
        fallback: Text used for every blank required field

    Returns:
        A new document; ``draft`` is not modified
    """
    document = _merge(empty_persona_data(), draft or {})
    filled = []

    for path in TEXT_FIELDS:
        value = _get(document, path)
        if value is None or (isinstance(value, str) and not value.strip()):
            _set(document, path, fallback)
            filled.append(path)

    for path in REQUIRED_LIST_FIELDS:
        if not _get(document, path):
            _set(document, path, [fallback])
            filled.append(path)

    for path in OPTIONAL_LIST_FIELDS:
        if _get(document, path) is None:
            _set(document, path, [])

    for path in LEVEL_FIELDS:
        value = _get(document, path)
        if value is None or (isinstance(value, str) and not value.strip()):
            _set(document, path, DEFAULT_LEVEL)

    for path in SCORE_PATHS:
        _set(document, path, parse_score(_get(document, path)))

    if document.get("notes") is None:
        document["notes"] = ""

    if filled:
        logger.debug(f"Draft defaults applied to {len(filled)} fields: {', '.join(filled)}")
    return document


def persona_from_form_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Build a candidate persona document from flat form fields.

    List fields are split with the list codec; scores go through
    ``parse_score``. Missing fields are left empty, so the result still has
    to pass the validator.
    """
    document = empty_persona_data()

    for path in TEXT_FIELDS + LEVEL_FIELDS + ("notes",):
        name = form_field_name(path)
        if name in fields and fields[name] is not None:
            _set(document, path, fields[name])

    for path in LIST_FIELDS:
        _set(document, path, list_from_text(fields.get(form_field_name(path)) or ""))

    for path in SCORE_PATHS:
        name = form_field_name(path)
        if name in fields:
            _set(document, path, parse_score(fields[name]))

    return document


def payload_from_form_fields(
    fields: Mapping[str, Any], fill_defaults: bool = False
) -> Dict[str, Any]:
    """
    Candidate create/update payload: record metadata plus the document.

    With ``fill_defaults`` the document also goes through
    ``apply_draft_defaults``, so a partially filled form can be saved.
    """
    data = persona_from_form_fields(fields)
    if fill_defaults:
        data = apply_draft_defaults(data)
    payload: Dict[str, Any] = {"data": data}
    for key in ("title", "locale", "isPublic", "sourcePersonaId"):
        if key in fields:
            payload[key] = fields[key]
    return payload


def persona_to_form_fields(data: Any) -> Dict[str, Any]:
    """
    Flatten a persona document into form fields, one list item per line.

    Args:
        data: PersonaData or a document in wire form
    """
    document = data.to_document() if isinstance(data, PersonaData) else data
    fields: Dict[str, Any] = {}

    for path in TEXT_FIELDS + LEVEL_FIELDS + ("notes",) + SCORE_PATHS:
        fields[form_field_name(path)] = _get(document, path)

    for path in LIST_FIELDS:
        fields[form_field_name(path)] = text_from_list(_get(document, path) or [])

    return fields


def record_to_form_fields(record: Any) -> Dict[str, Any]:
    """Form fields of a stored record, metadata included, for the edit form."""
    fields = persona_to_form_fields(record.data)
    fields.update(
        title=record.title,
        locale=record.locale,
        isPublic=record.is_public,
        sourcePersonaId=record.source_persona_id,
    )
    return fields
