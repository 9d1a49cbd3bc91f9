#!/usr/bin/env python3
"""
Export a stored persona record to files.

Reads a persona record JSON (the format produced by the JSON export),
validates it and writes the requested artifacts into an output directory.

Usage:
    python -m personalab.scripts.export_persona record.json --out DIR [--format FORMAT ...]

Options:
    --out       Output directory (created if missing)
    --format    pdf-executive, pdf-detailed, markdown or json; repeatable,
                all four when omitted
    --verbose   Show detailed logging information
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from personalab.domain.exceptions import ValidationFailure
from personalab.domain.models.persona_record import PersonaRecord, validate_persona_record
from personalab.services.export.orchestrator import ExportFormat, PersonaExporter

logger = logging.getLogger(__name__)


def load_record(path: Path) -> PersonaRecord:
    """
    Read and validate a persona record file.

    Raises:
        ValidationFailure: the file is not a valid persona record
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return validate_persona_record(raw)


def export_record_file(
    source: Path, out_dir: Path, formats: Optional[List[str]] = None
) -> List[Path]:
    """Write the requested artifacts of one record file; returns the written paths."""
    record = load_record(source)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for artifact in PersonaExporter().export_all(record, formats):
        target = out_dir / artifact.filename
        target.write_bytes(artifact.content)
        logger.info(f"Wrote {target} ({len(artifact.content)} bytes)")
        written.append(target)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Export a persona record to PDF, Markdown and JSON")
    parser.add_argument("record", type=Path, help="Persona record JSON file")
    parser.add_argument("--out", type=Path, default=Path("."), help="Output directory")
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=[f.value for f in ExportFormat],
        help="Export format (repeatable, default: all)",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Show detailed logging information"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        export_record_file(args.record, args.out, args.formats)
    except ValidationFailure as e:
        logger.error(f"Invalid persona record: {e}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read {args.record}: {str(e)}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
