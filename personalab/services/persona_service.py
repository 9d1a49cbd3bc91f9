import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from personalab.domain.exceptions import Forbidden, NotFound, Unauthenticated
from personalab.domain.models.persona_record import PersonaRecord, PersonaScope
from personalab.domain.models.persona_schema import PersonaPayload, validate_persona_payload
from personalab.infrastructure.config.settings import settings
from personalab.infrastructure.persistence.persona_repository import (
    PersonaOwner,
    PersonaRepository,
)
from personalab.services.persona_drafts import payload_from_form_fields, record_to_form_fields

# Configure logging
logger = logging.getLogger(__name__)

COPY_SUFFIX = " (copy)"


class PersonaService:
    """
    Persona record lifecycle: create, full replace, delete, fork and scoped
    listing, with the owner-only mutation policy.
    """

    def __init__(self, repository: PersonaRepository, list_limit: Optional[int] = None):
        """
        Initialize the PersonaService.

        Args:
            repository: Record Store adapter
            list_limit: Maximum rows returned by list_personas (defaults to settings)
        """
        self.repository = repository
        self.list_limit = list_limit or settings.list_limit

    @staticmethod
    def _require_caller(user_id: Optional[str]) -> str:
        if not user_id:
            raise Unauthenticated()
        return user_id

    def _load(self, persona_id: str) -> PersonaRecord:
        record = self.repository.get(persona_id)
        if record is None:
            raise NotFound()
        return record

    def _load_owner(self, persona_id: str) -> PersonaOwner:
        owner = self.repository.get_owner(persona_id)
        if owner is None:
            raise NotFound()
        return owner

    async def get_persona(self, persona_id: str) -> PersonaRecord:
        """Fetch one persona of any visibility."""
        return self._load(persona_id)

    async def create_persona(
        self,
        owner_user_id: Optional[str],
        author_display_name: Optional[str],
        payload: Union[PersonaPayload, Any],
    ) -> PersonaRecord:
        """
        Validate a payload and store it as a new record owned by the caller.

        Raises:
            Unauthenticated: no caller
            ValidationFailure: payload violates the schema
        """
        owner_user_id = self._require_caller(owner_user_id)
        payload = validate_persona_payload(payload)

        record = self.repository.insert(
            user_id=owner_user_id,
            author_name=author_display_name,
            title=payload.title,
            locale=payload.locale,
            is_public=payload.is_public,
            source_persona_id=_uuid_str(payload.source_persona_id),
            data=payload.data.to_document(),
        )
        logger.info(f"Created persona {record.id} for user {owner_user_id}")
        return record

    async def update_persona(
        self,
        persona_id: str,
        owner_user_id: Optional[str],
        payload: Union[PersonaPayload, Any],
    ) -> PersonaRecord:
        """
        Replace the whole document of a record owned by the caller.

        The ownership check reads only the owner columns and runs before the
        payload is validated, so a non-owner always gets Forbidden and the
        owner can replace a stored document that no longer validates.
        """
        owner_user_id = self._require_caller(owner_user_id)
        current = self._load_owner(persona_id)
        if current.user_id != owner_user_id:
            logger.warning(f"User {owner_user_id} denied update of persona {persona_id}")
            raise Forbidden("You cannot edit this persona. Fork it to make your own copy.")

        payload = validate_persona_payload(payload)
        source_persona_id = _uuid_str(payload.source_persona_id) or current.source_persona_id

        record = self.repository.replace(
            persona_id,
            title=payload.title,
            locale=payload.locale,
            is_public=payload.is_public,
            source_persona_id=source_persona_id,
            data=payload.data.to_document(),
        )
        if record is None:
            raise NotFound()
        logger.info(f"Updated persona {persona_id}")
        return record

    async def create_persona_from_form(
        self,
        owner_user_id: Optional[str],
        author_display_name: Optional[str],
        fields: Mapping[str, Any],
        fill_defaults: bool = False,
    ) -> PersonaRecord:
        """Create a persona from flat edit-form fields; see persona_drafts."""
        payload = payload_from_form_fields(fields, fill_defaults=fill_defaults)
        return await self.create_persona(owner_user_id, author_display_name, payload)

    async def update_persona_from_form(
        self,
        persona_id: str,
        owner_user_id: Optional[str],
        fields: Mapping[str, Any],
        fill_defaults: bool = False,
    ) -> PersonaRecord:
        payload = payload_from_form_fields(fields, fill_defaults=fill_defaults)
        return await self.update_persona(persona_id, owner_user_id, payload)

    async def get_persona_form(self, persona_id: str) -> Dict[str, Any]:
        """Edit-form fields of a stored persona."""
        return record_to_form_fields(self._load(persona_id))

    async def delete_persona(self, persona_id: str, owner_user_id: Optional[str]) -> None:
        """Hard-delete a record owned by the caller."""
        owner_user_id = self._require_caller(owner_user_id)
        current = self._load_owner(persona_id)
        if current.user_id != owner_user_id:
            logger.warning(f"User {owner_user_id} denied delete of persona {persona_id}")
            raise Forbidden("You do not have permission to delete this persona.")

        if not self.repository.delete(persona_id):
            raise NotFound()
        logger.info(f"Deleted persona {persona_id}")

    async def fork_persona(
        self,
        persona_id: str,
        caller_user_id: Optional[str],
        caller_display_name: Optional[str],
    ) -> PersonaRecord:
        """
        Copy a persona into a new private record owned by the caller.

        The title gets COPY_SUFFIX only when the caller already owns the
        source; forks of someone else's persona keep the title unchanged.
        """
        caller_user_id = self._require_caller(caller_user_id)
        source = self._load(persona_id)

        title = source.title
        if source.user_id == caller_user_id:
            title = f"{source.title}{COPY_SUFFIX}"

        record = self.repository.insert(
            user_id=caller_user_id,
            author_name=caller_display_name,
            title=title,
            locale=source.locale,
            is_public=False,
            source_persona_id=source.id,
            data=source.data.to_document(),
        )
        logger.info(f"Forked persona {source.id} into {record.id} for user {caller_user_id}")
        return record

    async def list_personas(
        self,
        scope: Union[PersonaScope, str] = PersonaScope.ALL,
        caller_user_id: Optional[str] = None,
    ) -> List[PersonaRecord]:
        """
        List personas visible in a scope, most recently updated first.

        Raises:
            Unauthenticated: scope is "mine" and there is no caller
        """
        scope = PersonaScope(scope)
        if scope == PersonaScope.MINE:
            self._require_caller(caller_user_id)
        return self.repository.list_visible(scope, caller_user_id, limit=self.list_limit)


def _uuid_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None
