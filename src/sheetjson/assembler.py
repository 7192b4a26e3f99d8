"""
Export document assembly.

Drives the cell collector across every sheet of a spreadsheet, drops sheets
without populated cells and folds each accepted sheet's metadata into the
spreadsheet-wide totals as it goes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone

from loguru import logger

from sheetjson.collector import collect_cells
from sheetjson.exceptions import InputShapeError, InvalidMergeError, SheetExportError
from sheetjson.merge_index import build_merge_index
from sheetjson.models import (
    EXPLANATION,
    ExportDocument,
    SheetDocument,
    SheetHandle,
    SheetMetadata,
    SpreadsheetMetadata,
)
from sheetjson.utils import AddressCodec


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision.

    Examples:
        2024-05-01 12:00:00+00:00 -> 2024-05-01T12:00:00.000Z
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass
class _Totals:
    """Running spreadsheet totals, updated once per accepted sheet."""

    sheets: int = 0
    rows: int = 0
    columns: int = 0
    cells: int = 0
    formulas: int = 0

    def add(self, metadata: SheetMetadata) -> None:
        self.sheets += 1
        self.rows += metadata.num_rows
        self.columns = max(self.columns, metadata.num_columns)
        self.cells += metadata.num_cells
        self.formulas += metadata.num_formulas


class DocumentAssembler:
    """Builds an ExportDocument from a spreadsheet's sheets."""

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = _utc_now,
        explanation: str = EXPLANATION,
    ) -> None:
        """Initialize the assembler.

        Args:
            clock: Returns the current time; called once per assembly
            explanation: Usage hint placed at the top of every document
        """
        self._clock = clock
        self._explanation = explanation

    def assemble(
        self, spreadsheet_name: str, sheets: Iterable[SheetHandle]
    ) -> ExportDocument:
        """Assemble the export document.

        Sheets are processed strictly in the given order. A sheet with no
        populated cells is left out and contributes nothing to the totals,
        but the remaining sheets keep their original indices.

        Args:
            spreadsheet_name: Display name of the spreadsheet
            sheets: Sheet handles in spreadsheet order

        Returns:
            The complete, immutable ExportDocument

        Raises:
            SheetExportError: If a sheet's grids or merges are malformed. No document
                is produced in that case.
        """
        timestamp = format_timestamp(self._clock())
        codec = AddressCodec()
        totals = _Totals()
        documents: list[SheetDocument] = []
        skipped = 0

        for sheet in sheets:
            document = self._build_sheet(sheet, codec)
            if document is None:
                skipped += 1
                continue
            documents.append(document)
            totals.add(document.metadata)

        logger.info(
            "Assembled '{name}': {sheets} sheet(s), {cells} cell(s), "
            "{formulas} formula(s), {skipped} empty sheet(s) skipped",
            name=spreadsheet_name,
            sheets=totals.sheets,
            cells=totals.cells,
            formulas=totals.formulas,
            skipped=skipped,
        )

        return ExportDocument(
            spreadsheet_metadata=SpreadsheetMetadata(
                name=spreadsheet_name,
                export_timestamp=timestamp,
                total_sheets=totals.sheets,
                total_rows=totals.rows,
                total_columns=totals.columns,
                total_cells=totals.cells,
                total_formulas=totals.formulas,
            ),
            sheets=tuple(documents),
            explanation=self._explanation,
        )

    def _build_sheet(
        self, sheet: SheetHandle, codec: AddressCodec
    ) -> SheetDocument | None:
        """Collect one sheet, returning None when it has no populated cells."""
        try:
            grids = sheet.read_grids()
            merge_index = build_merge_index(grids.merges)
            collected = collect_cells(grids, merge_index, codec)
        except (InputShapeError, InvalidMergeError) as e:
            raise SheetExportError(sheet.name, sheet.index, str(e)) from e

        if not collected.cells:
            logger.debug(
                "Skipping empty sheet '{sheet}' (index {index})",
                sheet=sheet.name,
                index=sheet.index,
            )
            return None

        return SheetDocument(
            name=sheet.name,
            id=sheet.sheet_id,
            index=sheet.index,
            metadata=SheetMetadata(
                num_rows=grids.num_rows,
                num_columns=grids.num_columns,
                num_formulas=collected.formula_count,
                hidden=sheet.hidden,
            ),
            cells=collected.cells,
        )


def assemble_document(
    spreadsheet_name: str, sheets: Iterable[SheetHandle]
) -> ExportDocument:
    """Assemble an export document with the default clock and explanation."""
    return DocumentAssembler().assemble(spreadsheet_name, sheets)
