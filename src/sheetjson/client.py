"""ExportClient - Main API for sheetjson.

Connects a data source to the document assembler and the file writer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sheetjson.assembler import DocumentAssembler
from sheetjson.google import sheets_from_spreadsheet
from sheetjson.models import ExportDocument
from sheetjson.transport import Transport, TransportError
from sheetjson.writer import ExportWriter
from sheetjson.xlsx import sheets_from_workbook


class ExportClient:
    """Client for exporting Google Sheets to an AI-friendly JSON document.

    Example:
        >>> from sheetjson.transport import GoogleSheetsTransport
        >>> transport = GoogleSheetsTransport(access_token="ya29...")
        >>> client = ExportClient(transport)
        >>> await client.pull("1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs74OgvE2upms", "./output")
    """

    def __init__(
        self,
        transport: Transport,
        *,
        assembler: DocumentAssembler | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Transport implementation for fetching spreadsheet data
            assembler: Assembler to use; a default one is created if omitted
        """
        self._transport = transport
        self._assembler = assembler or DocumentAssembler()

    async def export(self, spreadsheet_id: str) -> ExportDocument:
        """Fetch a spreadsheet and assemble its export document."""
        data = await self._transport.get_spreadsheet(spreadsheet_id)
        return export_spreadsheet_json(data, assembler=self._assembler)

    async def pull(
        self,
        spreadsheet_id: str,
        output_path: str | Path,
        *,
        indent: int | None = 2,
    ) -> Path:
        """Export a spreadsheet and write the document to disk.

        Args:
            spreadsheet_id: The ID of the spreadsheet (from the URL)
            output_path: Directory to write the file to
            indent: JSON indentation; None for compact output

        Returns:
            Path to the written file
        """
        document = await self.export(spreadsheet_id)
        writer = ExportWriter(output_path, indent=indent)
        return writer.write(document, document.spreadsheet_metadata.name)


def export_spreadsheet_json(
    data: dict[str, Any],
    *,
    assembler: DocumentAssembler | None = None,
) -> ExportDocument:
    """Assemble a document from a Google Sheets API ``Spreadsheet`` response.

    Raises:
        TransportError: If ``data`` is not a JSON object
        SheetExportError: If a sheet cannot be exported
    """
    if not isinstance(data, dict):
        raise TransportError(
            f"Expected a Spreadsheet object, got {type(data).__name__}"
        )
    title, sheets = sheets_from_spreadsheet(data)
    return (assembler or DocumentAssembler()).assemble(title, sheets)


def export_workbook(
    path: str | Path,
    *,
    assembler: DocumentAssembler | None = None,
) -> ExportDocument:
    """Assemble a document from an .xlsx workbook on disk."""
    title, sheets = sheets_from_workbook(path)
    return (assembler or DocumentAssembler()).assemble(title, sheets)
