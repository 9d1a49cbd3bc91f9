"""
Label table for the persona renderers.

Renderers take a ``Labels`` instance instead of reading a global message
table. ``DEFAULT_LABELS`` is the bundled English table; callers adjust single
entries with ``dataclasses.replace`` or by passing their own mappings.
"""

from dataclasses import dataclass, field
from typing import Dict


def _sections() -> Dict[str, str]:
    return {
        "summary": "Summary",
        "demographics": "Demographics",
        "context": "Context",
        "goals": "Goals",
        "frustrations": "Frustrations",
        "motivations": "Motivations",
        "behavior": "Behaviors",
        "journey": "Journey",
        "personality": "Personality",
        "accessibility": "Accessibility",
        "decision": "Decision & Impact",
    }


def _fields() -> Dict[str, str]:
    return {
        "archetype": "Archetype",
        "shortBio": "Bio",
        "demographics.ageRange": "Age range",
        "demographics.genderIdentity": "Gender",
        "demographics.location": "Location",
        "demographics.educationLevel": "Education",
        "demographics.occupation": "Occupation",
        "demographics.incomeRange": "Income range",
        "demographics.householdComposition": "Household composition",
        "context.sector": "Sector",
        "context.productOrService": "Product/Service",
        "context.scenario": "Scenario",
        "context.environment": "Environment",
        "context.digitalProficiency": "Digital proficiency",
        "goals.primary": "Primary goals",
        "goals.secondary": "Secondary goals",
        "frustrations.painPoints": "Pain points",
        "frustrations.barriers": "Barriers",
        "frustrations.fears": "Fears",
        "motivations.intrinsic": "Intrinsic",
        "motivations.extrinsic": "Extrinsic",
        "motivations.values": "Values",
        "behavior.habits": "Habits",
        "behavior.channels": "Channels",
        "behavior.devices": "Devices",
        "behavior.contentFormats": "Content formats",
        "behavior.techComfort": "Tech comfort",
        "behavior.decisionStyle": "Decision style",
        "behavior.purchaseTriggers": "Purchase triggers",
        "journey.awareness": "Discovery",
        "journey.consideration": "Consideration",
        "journey.decision": "Decision",
        "journey.retention": "Retention",
        "personality.communicationStyle": "Communication style",
        "personality.brandAffinity": "Brand affinity",
        "personality.openness": "Openness",
        "personality.conscientiousness": "Conscientiousness",
        "personality.extroversion": "Extroversion",
        "personality.agreeableness": "Agreeableness",
        "personality.neuroticism": "Neuroticism",
        "accessibility.needs": "Needs",
        "accessibility.assistiveTech": "Assistive technologies",
        "accessibility.constraints": "Constraints",
        "decisionCriteria": "Decision criteria",
        "objections": "Objections",
        "successMetrics": "Success metrics",
        "opportunities": "Opportunities",
        "representativeStory": "Representative story",
        "notes": "Notes",
    }


def _pdf() -> Dict[str, str]:
    # Headings and prefixes that only exist in the PDF layouts
    return {
        "goals_and_pains": "Goals & pain points",
        "goals": "Goals",
        "pain_points": "Pain points",
        "motivations": "Motivations",
        "behavior_and_journey": "Behavior & journey",
        "intrinsic_motivations": "Intrinsic motivations",
        "extrinsic_motivations": "Extrinsic motivations",
        "accessibility_needs": "Accessibility needs",
        "narrative": "Narrative & notes",
        "story": "Story",
        "created_by": "Created by",
        "date": "Date",
        "no_items": "No items informed.",
        "empty_join": "Not informed.",
        "no_notes": "No additional notes.",
    }


def _levels() -> Dict[str, str]:
    return {"Low": "Low", "Medium": "Medium", "High": "High"}


@dataclass(frozen=True)
class Labels:
    """Every user-visible string the Markdown and PDF renderers emit."""

    persona: str = "Persona"
    not_informed: str = "not informed"
    sections: Dict[str, str] = field(default_factory=_sections)
    fields: Dict[str, str] = field(default_factory=_fields)
    pdf: Dict[str, str] = field(default_factory=_pdf)
    levels: Dict[str, str] = field(default_factory=_levels)

    def label_for(self, path: str) -> str:
        return self.fields[path]

    def level(self, value: str) -> str:
        return self.levels.get(value, value)


DEFAULT_LABELS = Labels()
