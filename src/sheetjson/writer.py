"""
File writer utilities for sheetjson.

Handles writing the assembled export document to disk or a string.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from sheetjson.models import ExportDocument
from sheetjson.utils import sanitize_filename

EXPORT_SUFFIX = "_export.json"


class ExportWriter:
    """Writes export documents as JSON files."""

    def __init__(self, base_path: str | Path, *, indent: int | None = 2) -> None:
        """Initialize the writer with a base output path.

        Args:
            base_path: Directory to write files to
            indent: JSON indentation; None for compact output
        """
        self.base_path = Path(base_path)
        self.indent = indent

    def filename_for(self, spreadsheet_name: str) -> str:
        """Return the export file name for a spreadsheet."""
        return f"{sanitize_filename(spreadsheet_name)}{EXPORT_SUFFIX}"

    def dumps(self, document: ExportDocument) -> str:
        """Serialize a document to a JSON string."""
        return json.dumps(document.to_dict(), indent=self.indent, ensure_ascii=False)

    def write(self, document: ExportDocument, spreadsheet_name: str) -> Path:
        """Write a document to ``<base_path>/<name>_export.json``.

        Args:
            document: The assembled export document
            spreadsheet_name: Display name used for the file name

        Returns:
            Path to written file
        """
        full_path = self.base_path / self.filename_for(spreadsheet_name)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(self.dumps(document), encoding="utf-8")
        logger.info("Wrote export to {path}", path=str(full_path))
        return full_path
