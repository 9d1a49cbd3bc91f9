"""
Document export orchestrator.

Produces any subset of the four export artifacts for a persona record, each
named from the record title. "Export all" returns every artifact in one
result; there is no delay between generations.
"""

import base64
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from personalab.domain.models.persona_record import PersonaRecord
from personalab.services.export.filename import filename_stem
from personalab.services.export.labels import DEFAULT_LABELS, Labels
from personalab.services.export.markdown_generator import MarkdownPersonaGenerator
from personalab.services.export.pdf_generator import PdfLayout, PdfPersonaGenerator

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    PDF_EXECUTIVE = "pdf-executive"
    PDF_DETAILED = "pdf-detailed"
    MARKDOWN = "markdown"
    JSON = "json"


# (filename suffix, extension, media type)
FORMAT_FILES = {
    ExportFormat.PDF_EXECUTIVE: ("-executivo", "pdf", "application/pdf"),
    ExportFormat.PDF_DETAILED: ("-detalhado", "pdf", "application/pdf"),
    ExportFormat.MARKDOWN: ("", "md", "text/markdown; charset=utf-8"),
    ExportFormat.JSON: ("", "json", "application/json"),
}

ALL_FORMATS = tuple(ExportFormat)


@dataclass(frozen=True)
class ExportArtifact:
    """One generated file."""

    format: ExportFormat
    filename: str
    media_type: str
    content: bytes

    def to_bundle_entry(self) -> Dict[str, Any]:
        return {
            "format": self.format.value,
            "filename": self.filename,
            "mediaType": self.media_type,
            "size": len(self.content),
            "content": base64.b64encode(self.content).decode("ascii"),
        }


def export_filename(title: str, export_format: Union[ExportFormat, str]) -> str:
    """File name for ``title`` exported as ``export_format``."""
    suffix, extension, _ = FORMAT_FILES[ExportFormat(export_format)]
    return f"{filename_stem(title)}{suffix}.{extension}"


class PersonaExporter:
    """Dispatches a record to the Markdown, PDF or JSON encoder."""

    def __init__(self, labels: Optional[Labels] = None):
        self.labels = labels or DEFAULT_LABELS
        self.markdown = MarkdownPersonaGenerator(self.labels)
        self.pdf = PdfPersonaGenerator(self.labels)

    def _content(self, record: PersonaRecord, export_format: ExportFormat) -> bytes:
        if export_format == ExportFormat.PDF_EXECUTIVE:
            return self.pdf.generate(record, PdfLayout.EXECUTIVE)
        if export_format == ExportFormat.PDF_DETAILED:
            return self.pdf.generate(record, PdfLayout.DETAILED)
        if export_format == ExportFormat.MARKDOWN:
            return self.markdown.generate(record.title, record.data).encode("utf-8")
        return record.to_json().encode("utf-8")

    def export(
        self, record: PersonaRecord, export_format: Union[ExportFormat, str]
    ) -> ExportArtifact:
        """
        Generate a single artifact.

        Raises:
            ValueError: unknown format name
        """
        export_format = ExportFormat(export_format)
        _, _, media_type = FORMAT_FILES[export_format]
        artifact = ExportArtifact(
            format=export_format,
            filename=export_filename(record.title, export_format),
            media_type=media_type,
            content=self._content(record, export_format),
        )
        logger.debug(f"Exported persona {record.id} as {artifact.filename}")
        return artifact

    def export_all(
        self,
        record: PersonaRecord,
        formats: Optional[Iterable[Union[ExportFormat, str]]] = None,
    ) -> List[ExportArtifact]:
        """Generate every requested format (all four by default), in order."""
        selected = ALL_FORMATS if formats is None else [ExportFormat(f) for f in formats]
        return [self.export(record, export_format) for export_format in selected]


def export_bundle(
    record: PersonaRecord, labels: Optional[Labels] = None
) -> Dict[str, Any]:
    """JSON-ready "export all" result for one record."""
    artifacts = PersonaExporter(labels).export_all(record)
    return {
        "personaId": record.id,
        "stem": filename_stem(record.title),
        "artifacts": [artifact.to_bundle_entry() for artifact in artifacts],
    }
