from personalab.domain.models.persona_schema import (
    PersonaData,
    PersonaPayload,
    empty_persona_data,
    validate_persona_data,
    validate_persona_payload,
)
from personalab.domain.models.persona_record import (
    PersonaRecord,
    PersonaScope,
    map_persona_row,
    validate_persona_record,
)

__all__ = [
    "PersonaData",
    "PersonaPayload",
    "PersonaRecord",
    "PersonaScope",
    "empty_persona_data",
    "map_persona_row",
    "validate_persona_data",
    "validate_persona_payload",
    "validate_persona_record",
]
