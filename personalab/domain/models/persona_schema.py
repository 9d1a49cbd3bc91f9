"""
Persona data model and validator.

This module defines the canonical nested document for a persona and is the
single gate every persona document passes through before it is stored or
rendered. Field names are snake_case in Python and camelCase on the wire and
in storage (``shortBio``, ``goals.primary``...).

Validation is total: pydantic collects every violated field in one pass, and
``validate_persona_data`` turns that into a ``ValidationFailure`` listing each
field path with its reason.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StringConstraints,
    ValidationError,
)
from pydantic.alias_generators import to_camel

from personalab.domain.exceptions import FieldError, ValidationFailure
from personalab.infrastructure.config.settings import settings

# (min, max) character counts after trimming, keyed by wire path.
FIELD_BOUNDS: Dict[str, Tuple[int, int]] = {
    "title": (3, 120),
    "locale": (2, 35),
    "name": (2, 120),
    "archetype": (2, 120),
    "shortBio": (20, 1000),
    "quote": (10, 260),
    "demographics.ageRange": (2, 60),
    "demographics.genderIdentity": (2, 80),
    "demographics.location": (2, 120),
    "demographics.educationLevel": (2, 120),
    "demographics.occupation": (2, 120),
    "demographics.incomeRange": (2, 120),
    "demographics.householdComposition": (2, 120),
    "context.sector": (2, 120),
    "context.productOrService": (2, 160),
    "context.scenario": (10, 1200),
    "context.environment": (10, 1200),
    "behavior.decisionStyle": (5, 300),
    "journey.awareness": (10, 1200),
    "journey.consideration": (10, 1200),
    "journey.decision": (10, 1200),
    "journey.retention": (10, 1200),
    "personality.communicationStyle": (4, 300),
    "personality.brandAffinity": (4, 300),
    "representativeStory": (20, 2200),
    "notes": (0, 2200),
}

LEVELS = ("Low", "Medium", "High")
SCORE_FIELDS = ("openness", "conscientiousness", "extroversion", "agreeableness", "neuroticism")
LEVEL_FIELDS = ("context.digitalProficiency", "behavior.techComfort")
REQUIRED_LIST_FIELDS = (
    "goals.primary",
    "frustrations.painPoints",
    "motivations.intrinsic",
    "motivations.values",
    "behavior.habits",
    "behavior.channels",
    "behavior.devices",
    "decisionCriteria",
    "successMetrics",
)
OPTIONAL_LIST_FIELDS = (
    "goals.secondary",
    "frustrations.barriers",
    "frustrations.fears",
    "motivations.extrinsic",
    "behavior.contentFormats",
    "behavior.purchaseTriggers",
    "accessibility.needs",
    "accessibility.assistiveTech",
    "accessibility.constraints",
    "objections",
    "opportunities",
)


def bounded(path: str):
    """Trimmed string type carrying the bounds registered for ``path``."""
    min_length, max_length = FIELD_BOUNDS[path]
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length),
    ]


# One line per item so the form text codec can split lists back apart
ListItem = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, pattern=r"^[^\r\n]*$")
]
ItemList = List[ListItem]
RequiredList = Annotated[List[ListItem], Field(min_length=1)]
Score = Annotated[StrictInt, Field(ge=1, le=5)]
Level = Literal["Low", "Medium", "High"]


class PersonaModel(BaseModel):
    """Base for every persona group: camelCase aliases, no dynamic keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class Demographics(PersonaModel):
    age_range: bounded("demographics.ageRange")
    gender_identity: bounded("demographics.genderIdentity")
    location: bounded("demographics.location")
    education_level: bounded("demographics.educationLevel")
    occupation: bounded("demographics.occupation")
    income_range: bounded("demographics.incomeRange")
    household_composition: bounded("demographics.householdComposition")


class Context(PersonaModel):
    sector: bounded("context.sector")
    product_or_service: bounded("context.productOrService")
    scenario: bounded("context.scenario")
    environment: bounded("context.environment")
    digital_proficiency: Level


class Goals(PersonaModel):
    primary: RequiredList
    secondary: ItemList


class Frustrations(PersonaModel):
    pain_points: RequiredList
    barriers: ItemList
    fears: ItemList


class Motivations(PersonaModel):
    intrinsic: RequiredList
    extrinsic: ItemList
    values: RequiredList


class Behavior(PersonaModel):
    habits: RequiredList
    channels: RequiredList
    devices: RequiredList
    content_formats: ItemList
    tech_comfort: Level
    decision_style: bounded("behavior.decisionStyle")
    purchase_triggers: ItemList


class Journey(PersonaModel):
    awareness: bounded("journey.awareness")
    consideration: bounded("journey.consideration")
    decision: bounded("journey.decision")
    retention: bounded("journey.retention")


class Personality(PersonaModel):
    communication_style: bounded("personality.communicationStyle")
    openness: Score
    conscientiousness: Score
    extroversion: Score
    agreeableness: Score
    neuroticism: Score
    brand_affinity: bounded("personality.brandAffinity")


class Accessibility(PersonaModel):
    needs: ItemList = Field(default_factory=list)
    assistive_tech: ItemList = Field(default_factory=list)
    constraints: ItemList = Field(default_factory=list)


class PersonaData(PersonaModel):
    """The validated, canonical representation of one persona."""

    name: bounded("name")
    archetype: bounded("archetype")
    short_bio: bounded("shortBio")
    quote: bounded("quote")
    demographics: Demographics
    context: Context
    goals: Goals
    frustrations: Frustrations
    motivations: Motivations
    behavior: Behavior
    journey: Journey
    personality: Personality
    accessibility: Accessibility = Field(default_factory=Accessibility)
    decision_criteria: RequiredList
    objections: ItemList = Field(default_factory=list)
    success_metrics: RequiredList
    opportunities: ItemList = Field(default_factory=list)
    representative_story: bounded("representativeStory")
    notes: bounded("notes") = ""

    def to_document(self) -> Dict[str, Any]:
        """Storage/wire form of the document (camelCase keys, field order kept)."""
        return self.model_dump(mode="json", by_alias=True)


class PersonaPayload(PersonaModel):
    """Full create/update body: record metadata plus the persona document."""

    title: bounded("title")
    locale: bounded("locale") = Field(default_factory=lambda: settings.default_locale)
    is_public: StrictBool = True
    source_persona_id: Optional[UUID] = None
    data: PersonaData


def field_errors(error: ValidationError) -> List[FieldError]:
    return [
        FieldError(
            path=".".join(str(part) for part in item["loc"]) or "__root__",
            reason=item["msg"],
        )
        for item in error.errors()
    ]


def validate_persona_data(candidate: Any) -> PersonaData:
    """
    Validate a candidate persona document.

    Args:
        candidate: Mapping in wire form (camelCase keys) or a PersonaData

    Returns:
        The validated PersonaData (strings trimmed)

    Raises:
        ValidationFailure: listing every violated field path
    """
    try:
        return PersonaData.model_validate(candidate)
    except ValidationError as e:
        raise ValidationFailure(field_errors(e)) from None


def validate_persona_payload(candidate: Any) -> PersonaPayload:
    """Validate a full create/update payload; same failure contract as above."""
    try:
        return PersonaPayload.model_validate(candidate)
    except ValidationError as e:
        raise ValidationFailure(field_errors(e)) from None


def empty_persona_data() -> Dict[str, Any]:
    """
    Blank document an entry form starts from.

    It does not pass validation: required texts and lists are empty.
    """
    return {
        "name": "",
        "archetype": "",
        "shortBio": "",
        "quote": "",
        "demographics": {
            "ageRange": "",
            "genderIdentity": "",
            "location": "",
            "educationLevel": "",
            "occupation": "",
            "incomeRange": "",
            "householdComposition": "",
        },
        "context": {
            "sector": "",
            "productOrService": "",
            "scenario": "",
            "environment": "",
            "digitalProficiency": "Medium",
        },
        "goals": {"primary": [], "secondary": []},
        "frustrations": {"painPoints": [], "barriers": [], "fears": []},
        "motivations": {"intrinsic": [], "extrinsic": [], "values": []},
        "behavior": {
            "habits": [],
            "channels": [],
            "devices": [],
            "contentFormats": [],
            "techComfort": "Medium",
            "decisionStyle": "",
            "purchaseTriggers": [],
        },
        "journey": {"awareness": "", "consideration": "", "decision": "", "retention": ""},
        "personality": {
            "communicationStyle": "",
            "openness": 3,
            "conscientiousness": 3,
            "extroversion": 3,
            "agreeableness": 3,
            "neuroticism": 3,
            "brandAffinity": "",
        },
        "accessibility": {"needs": [], "assistiveTech": [], "constraints": []},
        "decisionCriteria": [],
        "objections": [],
        "successMetrics": [],
        "opportunities": [],
        "representativeStory": "",
        "notes": "",
    }
