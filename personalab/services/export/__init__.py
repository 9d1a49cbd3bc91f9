from personalab.services.export.filename import filename_stem
from personalab.services.export.labels import DEFAULT_LABELS, Labels
from personalab.services.export.markdown_generator import persona_to_markdown
from personalab.services.export.orchestrator import (
    ExportArtifact,
    ExportFormat,
    PersonaExporter,
    export_bundle,
    export_filename,
)
from personalab.services.export.pdf_generator import PdfLayout, render_persona_pdf

__all__ = [
    "DEFAULT_LABELS",
    "ExportArtifact",
    "ExportFormat",
    "Labels",
    "PdfLayout",
    "PersonaExporter",
    "export_bundle",
    "export_filename",
    "filename_stem",
    "persona_to_markdown",
    "render_persona_pdf",
]
