"""
PDF persona generator.

Both layouts share three page-break-aware primitives (paragraph, heading and
bullet list) that word-wrap text to the usable width and move to a new page
whenever the next line would fall below ``page height - margin``. The
cursor is a vertical position in millimetres measured from the top of the
page; each primitive returns the cursor after its last line plus a small gap.

Text is drawn with the PDF core fonts, which only cover latin-1, so every
string goes through ``pdf_safe`` first.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from fpdf import FPDF

from personalab.domain.models.persona_record import PersonaRecord
from personalab.domain.models.persona_schema import (
    SCORE_FIELDS,
    PersonaData,
    validate_persona_data,
)
from personalab.services.export.labels import DEFAULT_LABELS, Labels
from personalab.utils.persona_utils import personality_score_label
from personalab.utils.timezone_utils import format_display_datetime, parse_iso_to_utc

logger = logging.getLogger(__name__)

PAGE_FORMAT = "A4"
MARGIN = 14.0
FONT_FAMILY = "Helvetica"
BODY_FONT_SIZE = 11
BODY_LINE_HEIGHT = 6.0
HEADING_FONT_SIZE = 14
HEADING_LINE_HEIGHT = 7.0
TITLE_FONT_SIZE = 20
TITLE_LINE_HEIGHT = 8.0
SUBTITLE_FONT_SIZE = 12
BLOCK_GAP = 2.0
BULLET = "- "

_PDF_REPLACEMENTS = {
    "•": "·",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "…": "...",
    " ": " ",
}


class PdfLayout(str, Enum):
    """Available PDF layouts."""

    EXECUTIVE = "executive"
    DETAILED = "detailed"


def pdf_safe(text: Any) -> str:
    """Map text onto the latin-1 range the core fonts can draw."""
    text = str(text)
    for source, target in _PDF_REPLACEMENTS.items():
        text = text.replace(source, target)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class PdfCanvas:
    """
    A4 portrait document with manual pagination.

    Automatic page breaks are off: the primitives decide where pages end so
    that both layouts paginate the same way.
    """

    def __init__(self, title: Optional[str] = None):
        self.pdf = FPDF(orientation="portrait", unit="mm", format=PAGE_FORMAT)
        self.pdf.set_auto_page_break(auto=False)
        self.pdf.set_margins(MARGIN, MARGIN, MARGIN)
        self.pdf.set_creator("personalab")
        if title:
            self.pdf.set_title(pdf_safe(title))
        self.pdf.add_page()

        self.page_width = self.pdf.w
        self.page_height = self.pdf.h
        self.margin = MARGIN
        self.text_width = self.page_width - 2 * self.margin

    @property
    def page_count(self) -> int:
        return self.pdf.page_no()

    def _set_font(self, size: float, style: str = "") -> None:
        self.pdf.set_font(FONT_FAMILY, style=style, size=size)

    def wrap(self, text: str, width: Optional[float] = None) -> List[str]:
        """
        Split ``text`` into lines no wider than ``width`` in the current font.

        Explicit newlines are kept; a single word wider than the line is cut
        at character boundaries.
        """
        width = width if width is not None else self.text_width
        lines: List[str] = []
        for paragraph in text.split("\n"):
            current = ""
            for word in paragraph.split():
                candidate = f"{current} {word}" if current else word
                if self.pdf.get_string_width(candidate) <= width:
                    current = candidate
                    continue
                if current:
                    lines.append(current)
                current = ""
                while self.pdf.get_string_width(word) > width:
                    cut = len(word) - 1
                    while cut > 1 and self.pdf.get_string_width(word[:cut]) > width:
                        cut -= 1
                    lines.append(word[:cut])
                    word = word[cut:]
                current = word
            lines.append(current)
        return lines

    def draw_paragraph(
        self,
        text: str,
        y: float,
        font_size: float = BODY_FONT_SIZE,
        line_height: float = BODY_LINE_HEIGHT,
        style: str = "",
    ) -> float:
        """
        Draw word-wrapped text starting at cursor ``y``.

        Returns:
            Cursor after the last line plus the block gap
        """
        self._set_font(font_size, style)
        for line in self.wrap(pdf_safe(text)):
            if y > self.page_height - self.margin:
                self.pdf.add_page()
                y = self.margin
            if line:
                self.pdf.text(self.margin, y, line)
            y += line_height
        return y + BLOCK_GAP

    def draw_heading(self, text: str, y: float) -> float:
        return self.draw_paragraph(
            text, y, font_size=HEADING_FONT_SIZE, line_height=HEADING_LINE_HEIGHT, style="B"
        )

    def draw_bullet_list(
        self, title: str, items: Iterable[str], y: float, empty_text: str
    ) -> float:
        """Heading followed by one bulleted paragraph per item, or ``empty_text``."""
        y = self.draw_heading(title, y)
        items = list(items)
        if not items:
            return self.draw_paragraph(empty_text, y)
        for item in items:
            y = self.draw_paragraph(f"{BULLET}{item}", y)
        return y + BLOCK_GAP

    def output(self) -> bytes:
        return bytes(self.pdf.output())


def _persona_parts(
    persona: Union[PersonaRecord, Mapping[str, Any]]
) -> Tuple[str, PersonaData, Optional[str], Optional[datetime]]:
    if isinstance(persona, PersonaRecord):
        return persona.title, persona.data, persona.author_name, persona.created_at

    data = persona["data"]
    if not isinstance(data, PersonaData):
        data = validate_persona_data(data)
    author_name = persona.get("authorName", persona.get("author_name"))
    created_at = persona.get("createdAt", persona.get("created_at"))
    if isinstance(created_at, str):
        created_at = parse_iso_to_utc(created_at)
    return persona["title"], data, author_name, created_at


class PdfPersonaGenerator:
    """Renders a persona into one of the PDF layouts."""

    def __init__(self, labels: Optional[Labels] = None):
        self.labels = labels or DEFAULT_LABELS

    def generate(
        self,
        persona: Union[PersonaRecord, Mapping[str, Any]],
        layout: Union[PdfLayout, str] = PdfLayout.EXECUTIVE,
    ) -> bytes:
        """
        Generate a PDF for a persona.

        Args:
            persona: PersonaRecord, or a mapping with ``title``, ``data`` and
                optional ``authorName``/``createdAt``
            layout: "executive" or "detailed"

        Returns:
            PDF document bytes
        """
        canvas = self.render(persona, layout)
        content = canvas.output()
        logger.debug(
            f"Generated {PdfLayout(layout).value} PDF ({canvas.page_count} pages, {len(content)} bytes)"
        )
        return content

    def render(
        self,
        persona: Union[PersonaRecord, Mapping[str, Any]],
        layout: Union[PdfLayout, str] = PdfLayout.EXECUTIVE,
    ) -> PdfCanvas:
        """Lay the persona out on a fresh canvas without serializing it."""
        layout = PdfLayout(layout)
        title, data, author_name, created_at = _persona_parts(persona)
        canvas = PdfCanvas(title)
        if layout == PdfLayout.EXECUTIVE:
            self._executive(canvas, title, data)
        else:
            self._detailed(canvas, title, data, author_name, created_at)
        return canvas

    def _joined(self, items: List[str]) -> str:
        return "; ".join(items) if items else self.labels.pdf["empty_join"]

    def _header(self, canvas: PdfCanvas, title: str, data: PersonaData) -> float:
        y = canvas.draw_paragraph(
            title, canvas.margin, font_size=TITLE_FONT_SIZE, line_height=TITLE_LINE_HEIGHT, style="B"
        )
        return canvas.draw_paragraph(
            f"{data.name} • {data.archetype}", y, font_size=SUBTITLE_FONT_SIZE
        )

    def _quote(self, canvas: PdfCanvas, data: PersonaData, y: float) -> float:
        return canvas.draw_paragraph(f'"{data.quote}"', y, style="I")

    def _executive(self, canvas: PdfCanvas, title: str, data: PersonaData) -> None:
        pdf_labels = self.labels.pdf
        field = self.labels.label_for

        y = self._header(canvas, title, data)
        y = self._quote(canvas, data, y)

        y = canvas.draw_heading(self.labels.sections["summary"], y)
        y = canvas.draw_paragraph(data.short_bio, y)

        y = canvas.draw_heading(pdf_labels["goals_and_pains"], y)
        y = canvas.draw_paragraph(f"{pdf_labels['goals']}: {self._joined(data.goals.primary)}", y)
        y = canvas.draw_paragraph(
            f"{pdf_labels['pain_points']}: {self._joined(data.frustrations.pain_points)}", y
        )
        y = canvas.draw_paragraph(
            f"{pdf_labels['motivations']}: {self._joined(data.motivations.intrinsic)}", y
        )

        y = canvas.draw_heading(pdf_labels["behavior_and_journey"], y)
        y = canvas.draw_paragraph(
            f"{field('behavior.channels')}: {self._joined(data.behavior.channels)}", y
        )
        y = canvas.draw_paragraph(
            f"{field('behavior.devices')}: {self._joined(data.behavior.devices)}", y
        )
        y = canvas.draw_paragraph(f"{field('journey.awareness')}: {data.journey.awareness}", y)
        y = canvas.draw_paragraph(f"{field('journey.decision')}: {data.journey.decision}", y)

        y = canvas.draw_heading(field("decisionCriteria"), y)
        y = canvas.draw_paragraph(self._joined(data.decision_criteria), y)

        canvas.draw_paragraph(
            f"{field('representativeStory')}: {data.representative_story}", y + BLOCK_GAP
        )

    def _detailed(
        self,
        canvas: PdfCanvas,
        title: str,
        data: PersonaData,
        author_name: Optional[str],
        created_at: Optional[datetime],
    ) -> None:
        labels = self.labels
        pdf_labels = labels.pdf
        field = labels.label_for
        doc = data.to_document()

        def scalar(path: str, y: float) -> float:
            group, _, key = path.rpartition(".")
            value = doc[group][key] if group else doc[key]
            return canvas.draw_paragraph(f"{field(path)}: {value}", y)

        def level(path: str, y: float) -> float:
            group, _, key = path.partition(".")
            return canvas.draw_paragraph(f"{field(path)}: {labels.level(doc[group][key])}", y)

        def bullets(title_text: str, items: List[str], y: float) -> float:
            return canvas.draw_bullet_list(title_text, items, y, pdf_labels["no_items"])

        y = self._header(canvas, title, data)
        if author_name:
            y = canvas.draw_paragraph(f"{pdf_labels['created_by']}: {author_name}", y)
        if created_at:
            y = canvas.draw_paragraph(
                f"{pdf_labels['date']}: {format_display_datetime(created_at)}", y
            )
        y = self._quote(canvas, data, y)

        y = canvas.draw_heading(labels.sections["summary"], y)
        y = canvas.draw_paragraph(data.short_bio, y)

        y = canvas.draw_heading(labels.sections["demographics"], y)
        for key in (
            "ageRange",
            "genderIdentity",
            "location",
            "educationLevel",
            "occupation",
            "incomeRange",
            "householdComposition",
        ):
            y = scalar(f"demographics.{key}", y)

        y = canvas.draw_heading(labels.sections["context"], y)
        for key in ("sector", "productOrService", "scenario", "environment"):
            y = scalar(f"context.{key}", y)
        y = level("context.digitalProficiency", y)

        y = bullets(field("goals.primary"), data.goals.primary, y)
        y = bullets(field("goals.secondary"), data.goals.secondary, y)
        y = bullets(field("frustrations.painPoints"), data.frustrations.pain_points, y)
        y = bullets(field("frustrations.barriers"), data.frustrations.barriers, y)
        y = bullets(field("frustrations.fears"), data.frustrations.fears, y)
        y = bullets(pdf_labels["intrinsic_motivations"], data.motivations.intrinsic, y)
        y = bullets(pdf_labels["extrinsic_motivations"], data.motivations.extrinsic, y)
        y = bullets(field("motivations.values"), data.motivations.values, y)
        y = bullets(field("behavior.habits"), data.behavior.habits, y)
        y = bullets(field("behavior.channels"), data.behavior.channels, y)
        y = bullets(field("behavior.devices"), data.behavior.devices, y)
        y = bullets(field("behavior.contentFormats"), data.behavior.content_formats, y)
        y = level("behavior.techComfort", y)
        y = scalar("behavior.decisionStyle", y)
        y = bullets(field("behavior.purchaseTriggers"), data.behavior.purchase_triggers, y)

        y = canvas.draw_heading(labels.sections["journey"], y)
        for key in ("awareness", "consideration", "decision", "retention"):
            y = scalar(f"journey.{key}", y)

        y = canvas.draw_heading(labels.sections["personality"], y)
        y = scalar("personality.communicationStyle", y)
        y = scalar("personality.brandAffinity", y)
        for key in SCORE_FIELDS:
            value = doc["personality"][key]
            label = labels.level(personality_score_label(value))
            y = canvas.draw_paragraph(f"{field(f'personality.{key}')}: {value}/5 ({label})", y)

        y = bullets(pdf_labels["accessibility_needs"], data.accessibility.needs, y)
        y = bullets(field("accessibility.assistiveTech"), data.accessibility.assistive_tech, y)
        y = bullets(field("accessibility.constraints"), data.accessibility.constraints, y)
        y = bullets(field("decisionCriteria"), data.decision_criteria, y)
        y = bullets(field("objections"), data.objections, y)
        y = bullets(field("successMetrics"), data.success_metrics, y)
        y = bullets(field("opportunities"), data.opportunities, y)

        y = canvas.draw_heading(pdf_labels["narrative"], y)
        y = canvas.draw_paragraph(f"{pdf_labels['story']}: {data.representative_story}", y)
        notes = data.notes or pdf_labels["no_notes"]
        canvas.draw_paragraph(f"{field('notes')}: {notes}", y)


def render_persona_pdf(
    persona: Union[PersonaRecord, Mapping[str, Any]],
    layout: Union[PdfLayout, str] = PdfLayout.EXECUTIVE,
    labels: Optional[Labels] = None,
) -> bytes:
    """Render ``persona`` in ``layout`` and return the PDF bytes."""
    return PdfPersonaGenerator(labels).generate(persona, layout)
