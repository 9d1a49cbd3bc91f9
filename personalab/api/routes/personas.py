"""
FastAPI router for persona records.

CRUD, edit-form, fork and export endpoints. Domain errors raised by the service
propagate to the exception handlers registered on the app; each endpoint
only adds structured request logs around the call.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from personalab.api.errors import status_for
from personalab.database import get_db
from personalab.domain.exceptions import PersonaLabError
from personalab.domain.models.persona_record import PersonaScope
from personalab.infrastructure.persistence.persona_repository import PersonaRepository
from personalab.schemas import (
    DeleteResponse,
    ErrorResponse,
    ExportBundleResponse,
    PersonaFormResponse,
    PersonaListResponse,
    PersonaResponse,
)
from personalab.services.export.orchestrator import ExportFormat, PersonaExporter, export_bundle
from personalab.services.external.auth_middleware import (
    CurrentUser,
    get_current_user,
    require_user,
)
from personalab.services.persona_service import PersonaService
from personalab.utils.structured_logger import request_end, request_error, request_start

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/personas",
    tags=["personas"],
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse, "description": "Not found"},
        422: {"model": ErrorResponse},
    },
)


def get_persona_service(db: Session = Depends(get_db)) -> PersonaService:
    return PersonaService(PersonaRepository(db))


@contextmanager
def _request_log(endpoint: str, user_id: Optional[str] = None, persona_id: Optional[str] = None, http_status: int = 200, **extra: Any):
    start = request_start(endpoint, user_id=user_id, persona_id=persona_id, **extra)
    try:
        yield
    except PersonaLabError as e:
        request_error(
            endpoint,
            start,
            user_id=user_id,
            persona_id=persona_id,
            http_status=status_for(e),
            error=e.message,
        )
        raise
    except Exception as e:
        request_error(endpoint, start, user_id=user_id, persona_id=persona_id, error=str(e))
        raise
    request_end(endpoint, start, user_id=user_id, persona_id=persona_id, http_status=http_status)


def _user_id(user: Optional[CurrentUser]) -> Optional[str]:
    return user.id if user else None


@router.get("", response_model=PersonaListResponse)
async def list_personas(
    scope: PersonaScope = Query(PersonaScope.ALL, description="mine, community or all"),
    user: Optional[CurrentUser] = Depends(get_current_user),
    service: PersonaService = Depends(get_persona_service),
):
    """List personas visible in a scope; "mine" requires authentication."""
    with _request_log("GET /api/personas", user_id=_user_id(user), scope=scope.value):
        personas = await service.list_personas(scope, _user_id(user))
    return PersonaListResponse(personas=personas)


@router.post("", response_model=PersonaResponse, status_code=status.HTTP_201_CREATED)
async def create_persona(
    payload: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    """Validate a full persona payload and store it for the caller."""
    with _request_log("POST /api/personas", user_id=user.id, http_status=201):
        persona = await service.create_persona(user.id, user.display_name, payload)
    return PersonaResponse(persona=persona)


@router.post("/form", response_model=PersonaResponse, status_code=status.HTTP_201_CREATED)
async def create_persona_from_form(
    fields: Dict[str, Any] = Body(...),
    fill_defaults: bool = Query(False, alias="fillDefaults"),
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    """
    Create a persona from flat edit-form fields.

    List fields hold one item per line. With ``fillDefaults`` blank fields of
    a partial draft are filled in before validation.
    """
    with _request_log("POST /api/personas/form", user_id=user.id, http_status=201):
        persona = await service.create_persona_from_form(
            user.id, user.display_name, fields, fill_defaults=fill_defaults
        )
    return PersonaResponse(persona=persona)


@router.get("/{persona_id}/form", response_model=PersonaFormResponse)
async def get_persona_form(
    persona_id: str,
    service: PersonaService = Depends(get_persona_service),
):
    with _request_log("GET /api/personas/{persona_id}/form", persona_id=persona_id):
        fields = await service.get_persona_form(persona_id)
    return PersonaFormResponse(fields=fields)


@router.patch("/{persona_id}/form", response_model=PersonaResponse)
async def update_persona_from_form(
    persona_id: str,
    fields: Dict[str, Any] = Body(...),
    fill_defaults: bool = Query(False, alias="fillDefaults"),
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    """Replace the whole persona document from edit-form fields. Owner only."""
    with _request_log(
        "PATCH /api/personas/{persona_id}/form", user_id=user.id, persona_id=persona_id
    ):
        persona = await service.update_persona_from_form(
            persona_id, user.id, fields, fill_defaults=fill_defaults
        )
    return PersonaResponse(persona=persona)


@router.get("/{persona_id}", response_model=PersonaResponse)
async def get_persona(
    persona_id: str,
    service: PersonaService = Depends(get_persona_service),
):
    with _request_log("GET /api/personas/{persona_id}", persona_id=persona_id):
        persona = await service.get_persona(persona_id)
    return PersonaResponse(persona=persona)


@router.patch("/{persona_id}", response_model=PersonaResponse)
async def update_persona(
    persona_id: str,
    payload: Dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    """Replace the whole persona document. Owner only."""
    with _request_log("PATCH /api/personas/{persona_id}", user_id=user.id, persona_id=persona_id):
        persona = await service.update_persona(persona_id, user.id, payload)
    return PersonaResponse(persona=persona)


@router.delete("/{persona_id}", response_model=DeleteResponse)
async def delete_persona(
    persona_id: str,
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    with _request_log("DELETE /api/personas/{persona_id}", user_id=user.id, persona_id=persona_id):
        await service.delete_persona(persona_id, user.id)
    return DeleteResponse(ok=True)


@router.post(
    "/{persona_id}/fork", response_model=PersonaResponse, status_code=status.HTTP_201_CREATED
)
async def fork_persona(
    persona_id: str,
    user: CurrentUser = Depends(require_user),
    service: PersonaService = Depends(get_persona_service),
):
    """Copy a persona into a new private record owned by the caller."""
    with _request_log(
        "POST /api/personas/{persona_id}/fork", user_id=user.id, persona_id=persona_id, http_status=201
    ):
        persona = await service.fork_persona(persona_id, user.id, user.display_name)
    return PersonaResponse(persona=persona)


@router.get("/{persona_id}/export", response_model=ExportBundleResponse)
async def export_all(
    persona_id: str,
    service: PersonaService = Depends(get_persona_service),
):
    """Every export format of a persona in one response, base64-encoded."""
    with _request_log("GET /api/personas/{persona_id}/export", persona_id=persona_id):
        record = await service.get_persona(persona_id)
        bundle = await run_in_threadpool(export_bundle, record)
    return bundle


@router.get(
    "/{persona_id}/export/{export_format}",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}, "text/markdown": {}, "application/json": {}}}},
)
async def export_one(
    persona_id: str,
    export_format: ExportFormat,
    service: PersonaService = Depends(get_persona_service),
):
    """Download one export artifact as an attachment."""
    with _request_log(
        "GET /api/personas/{persona_id}/export/{export_format}",
        persona_id=persona_id,
        export_format=export_format.value,
    ):
        record = await service.get_persona(persona_id)
        artifact = await run_in_threadpool(PersonaExporter().export, record, export_format)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )
