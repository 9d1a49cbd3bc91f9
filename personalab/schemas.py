"""
API response models.

Request bodies are plain JSON objects handed to the persona service, which
validates them with the persona schema; only responses are modelled here.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from personalab.domain.models.persona_record import PersonaRecord


class PersonaResponse(BaseModel):
    """Single persona record"""

    persona: PersonaRecord


class PersonaListResponse(BaseModel):
    """Personas visible in the requested scope, most recently updated first"""

    personas: List[PersonaRecord]


class PersonaFormResponse(BaseModel):
    """Flat edit-form fields of a persona; list fields hold one item per line"""

    fields: Dict[str, Any]


class DeleteResponse(BaseModel):
    ok: bool = True


class FieldErrorModel(BaseModel):
    path: str
    reason: str


class ErrorResponse(BaseModel):
    """Body of every error response"""

    error: str
    fields: Optional[List[FieldErrorModel]] = Field(
        default=None, description="Violated field paths, for validation errors only"
    )


class ExportArtifactModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    format: str
    filename: str
    media_type: str
    size: int
    content: str = Field(..., description="Base64-encoded file content")


class ExportBundleResponse(BaseModel):
    """All export artifacts of one persona"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    persona_id: str
    stem: str
    artifacts: List[ExportArtifactModel]


class HealthCheckResponse(BaseModel):
    status: str = "ok"
    version: str
