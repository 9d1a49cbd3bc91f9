"""Error taxonomy shared by the persona services and the HTTP layer."""

from dataclasses import dataclass
from typing import List, Sequence


class PersonaLabError(Exception):
    """Base exception for persona operations."""

    default_message = "Persona operation failed."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldError:
    """A single violated field path with a human-readable reason."""

    path: str
    reason: str

    def to_dict(self):
        return {"path": self.path, "reason": self.reason}


class ValidationFailure(PersonaLabError):
    """Candidate payload violates one or more schema rules."""

    default_message = "Invalid persona payload."

    def __init__(self, errors: Sequence[FieldError], message: str = ""):
        self.errors: List[FieldError] = list(errors)
        super().__init__(message)

    @property
    def paths(self) -> List[str]:
        return [error.path for error in self.errors]

    def __str__(self):
        details = "; ".join(f"{e.path}: {e.reason}" for e in self.errors)
        return f"{self.message} {details}".strip()


class Unauthenticated(PersonaLabError):
    """Operation requires a caller identity and none was supplied."""

    default_message = "Not authenticated."


class Forbidden(PersonaLabError):
    """Authenticated caller does not own the record it tried to mutate."""

    default_message = "You do not have permission to modify this persona."


class NotFound(PersonaLabError):
    """Referenced record does not exist."""

    default_message = "Persona not found."


class StoreFailure(PersonaLabError):
    """The Record Store call itself failed."""

    default_message = "Persona store request failed."
