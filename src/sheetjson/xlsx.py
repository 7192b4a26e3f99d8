"""Excel workbook adapter built on openpyxl."""

from __future__ import annotations

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.worksheet.datavalidation import DataValidation as OpenpyxlValidation
from openpyxl.worksheet.worksheet import Worksheet

from sheetjson.exceptions import ValidationReadError
from sheetjson.models import (
    CellValue,
    DataValidation,
    MergedRange,
    RichText,
    SheetGrids,
    SheetHandle,
)


class XlsxValidationRule:
    """Lazy reader for an openpyxl data validation."""

    def __init__(self, validation: OpenpyxlValidation) -> None:
        self.validation = validation

    def read(self) -> DataValidation:
        """Map the openpyxl validation to a DataValidation.

        Raises:
            ValidationReadError: If the validation has no criteria type
        """
        dv = self.validation
        if not dv.type:
            raise ValidationReadError("validation has no type")

        criteria_values = tuple(
            formula for formula in (dv.formula1, dv.formula2) if formula is not None
        )
        shows_error = bool(dv.showErrorMessage)
        return DataValidation(
            criteria_type=str(dv.type),
            criteria_values=criteria_values,
            allow_invalid=not shows_error,
            strict=shows_error and dv.errorStyle in (None, "stop"),
        )


class XlsxSheet(SheetHandle):
    """Sheet handle over a worksheet loaded twice: formulas and cached values."""

    def __init__(
        self,
        formula_sheet: Worksheet,
        value_sheet: Worksheet,
        position: int,
    ) -> None:
        self._formula_sheet = formula_sheet
        self._value_sheet = value_sheet
        self._position = position

    @property
    def name(self) -> str:
        return self._formula_sheet.title

    @property
    def sheet_id(self) -> int:
        return self._position

    @property
    def index(self) -> int:
        return self._position

    @property
    def hidden(self) -> bool:
        return self._formula_sheet.sheet_state != Worksheet.SHEETSTATE_VISIBLE

    def read_grids(self) -> SheetGrids:
        """Materialize the used range of the worksheet."""
        ws = self._formula_sheet
        num_rows = ws.max_row
        num_columns = ws.max_column
        rules = self._validation_map(num_rows, num_columns)

        values: list[list[CellValue]] = []
        formulas: list[list[str]] = []
        comments: list[list[str]] = []
        notes: list[list[str]] = []
        validations: list[list[XlsxValidationRule | None]] = []
        rich_text: list[list[RichText | None]] = []

        formula_rows = ws.iter_rows(min_row=1, max_row=num_rows, max_col=num_columns)
        value_rows = self._value_sheet.iter_rows(
            min_row=1, max_row=num_rows, max_col=num_columns, values_only=True
        )
        for r, (formula_row, value_row) in enumerate(zip(formula_rows, value_rows)):
            values.append([_plain_value(v) for v in value_row])
            formulas.append([_formula_text(cell.value) for cell in formula_row])
            # openpyxl only reads legacy comments, which Excel shows as notes
            comments.append([""] * num_columns)
            notes.append(
                [cell.comment.text if cell.comment else "" for cell in formula_row]
            )
            validations.append([rules.get((r, c)) for c in range(num_columns)])
            rich_text.append(
                [
                    RichText(link_url=cell.hyperlink.target)
                    if cell.hyperlink is not None and cell.hyperlink.target
                    else None
                    for cell in formula_row
                ]
            )

        merges = tuple(
            MergedRange(
                first_row=rng.min_row,
                last_row=rng.max_row,
                first_column=rng.min_col,
                last_column=rng.max_col,
            )
            for rng in ws.merged_cells.ranges
        )

        return SheetGrids(
            num_rows=num_rows,
            num_columns=num_columns,
            values=values,
            formulas=formulas,
            comments=comments,
            notes=notes,
            validations=validations,
            rich_text=rich_text,
            merges=merges,
        )

    def _validation_map(
        self, num_rows: int, num_columns: int
    ) -> dict[tuple[int, int], XlsxValidationRule]:
        """Map 0-based (row, col) inside the used range to its validation."""
        result: dict[tuple[int, int], XlsxValidationRule] = {}
        for dv in self._formula_sheet.data_validations.dataValidation:
            rule = XlsxValidationRule(dv)
            for cell_range in dv.sqref.ranges:
                # Whole-column validations reach far beyond the used range
                for row in range(cell_range.min_row, min(cell_range.max_row, num_rows) + 1):
                    for col in range(
                        cell_range.min_col, min(cell_range.max_col, num_columns) + 1
                    ):
                        result[(row - 1, col - 1)] = rule
        return result


def sheets_from_workbook(path: str | Path) -> tuple[str, list[XlsxSheet]]:
    """Open an .xlsx workbook and wrap its worksheets.

    Returns:
        Tuple of (workbook title, sheet handles in workbook order). The
        title falls back to the file name without extension.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {path}")

    # Load twice: once to capture formulas, once for cached values
    formula_wb = load_workbook(filename=path, data_only=False)
    value_wb = load_workbook(filename=path, data_only=True)

    title = formula_wb.properties.title or path.stem
    sheets = [
        XlsxSheet(formula_wb[name], value_wb[name], position)
        for position, name in enumerate(formula_wb.sheetnames, start=1)
        if isinstance(formula_wb[name], Worksheet)
    ]
    return title, sheets


def _plain_value(value: Any) -> CellValue:
    """Convert a cached openpyxl value to a JSON scalar."""
    if value is None:
        return ""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _formula_text(value: Any) -> str:
    if isinstance(value, str):
        return value if value.startswith("=") else ""
    # Array formulas expose their source through ``text``
    text = getattr(value, "text", None)
    return text if isinstance(text, str) else ""
