"""
Markdown persona generator.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from personalab.domain.models.persona_schema import (
    SCORE_FIELDS,
    PersonaData,
    validate_persona_data,
)
from personalab.services.export.labels import DEFAULT_LABELS, Labels

logger = logging.getLogger(__name__)


def _lookup(document: Dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        value = value[part]
    return value


class MarkdownPersonaGenerator:
    """
    Renders one validated persona as a Markdown document.

    Section order and line shapes are fixed: ``# title``, an italic persona
    line, the quote as a block quote, then one ``##`` section per field group.
    """

    def __init__(self, labels: Optional[Labels] = None):
        self.labels = labels or DEFAULT_LABELS

    def generate(self, title: str, data: Union[PersonaData, Dict[str, Any]]) -> str:
        """
        Generate the Markdown document for a persona.

        Args:
            title: Record title, used as the top-level heading
            data: Validated PersonaData (mappings are validated first)

        Returns:
            Markdown content, trimmed
        """
        if not isinstance(data, PersonaData):
            data = validate_persona_data(data)
        doc = data.to_document()

        md: List[str] = []
        md.append(f"# {title}")
        md.append(f"_{self.labels.persona}: {doc['name']}_")
        md.append("")
        md.append(f'> "{doc["quote"]}"')

        self._section(md, "summary")
        self._field(md, doc, "archetype")
        self._field(md, doc, "shortBio")

        self._section(md, "demographics")
        for key in (
            "ageRange",
            "genderIdentity",
            "location",
            "educationLevel",
            "occupation",
            "incomeRange",
            "householdComposition",
        ):
            self._field(md, doc, f"demographics.{key}")

        self._section(md, "context")
        for key in ("sector", "productOrService", "scenario", "environment"):
            self._field(md, doc, f"context.{key}")
        self._level(md, doc, "context.digitalProficiency")

        self._section(md, "goals")
        self._list(md, doc, "goals.primary")
        self._list(md, doc, "goals.secondary")

        self._section(md, "frustrations")
        for key in ("painPoints", "barriers", "fears"):
            self._list(md, doc, f"frustrations.{key}")

        self._section(md, "motivations")
        for key in ("intrinsic", "extrinsic", "values"):
            self._list(md, doc, f"motivations.{key}")

        self._section(md, "behavior")
        for key in ("habits", "channels", "devices", "contentFormats"):
            self._list(md, doc, f"behavior.{key}")
        self._level(md, doc, "behavior.techComfort")
        self._field(md, doc, "behavior.decisionStyle")
        self._list(md, doc, "behavior.purchaseTriggers")

        self._section(md, "journey")
        for key in ("awareness", "consideration", "decision", "retention"):
            self._field(md, doc, f"journey.{key}")

        self._section(md, "personality")
        self._field(md, doc, "personality.communicationStyle")
        self._field(md, doc, "personality.brandAffinity")
        for key in SCORE_FIELDS:
            path = f"personality.{key}"
            md.append(f"- **{self.labels.label_for(path)}:** {_lookup(doc, path)}/5")

        self._section(md, "accessibility")
        for key in ("needs", "assistiveTech", "constraints"):
            self._list(md, doc, f"accessibility.{key}")

        self._section(md, "decision")
        for key in ("decisionCriteria", "objections", "successMetrics", "opportunities"):
            self._list(md, doc, key)
        self._field(md, doc, "representativeStory")
        notes = doc.get("notes") or self.labels.not_informed
        md.append(f"- **{self.labels.label_for('notes')}:** {notes}")

        content = "\n".join(md).strip()
        logger.debug(f"Rendered markdown for '{title}' ({len(content)} characters)")
        return content

    def _section(self, md: List[str], key: str) -> None:
        md.append(f"\n## {self.labels.sections[key]}")

    def _field(self, md: List[str], doc: Dict[str, Any], path: str) -> None:
        md.append(f"- **{self.labels.label_for(path)}:** {_lookup(doc, path)}")

    def _level(self, md: List[str], doc: Dict[str, Any], path: str) -> None:
        value = self.labels.level(_lookup(doc, path))
        md.append(f"- **{self.labels.label_for(path)}:** {value}")

    def _list(self, md: List[str], doc: Dict[str, Any], path: str) -> None:
        md.append(f"\n### {self.labels.label_for(path)}")
        items = _lookup(doc, path)
        if not items:
            md.append(f"- _{self.labels.not_informed}_")
            return
        for item in items:
            md.append(f"- {item}")


def persona_to_markdown(
    title: str,
    data: Union[PersonaData, Dict[str, Any]],
    labels: Optional[Labels] = None,
) -> str:
    """Render ``data`` as Markdown under the heading ``title``."""
    return MarkdownPersonaGenerator(labels).generate(title, data)
