"""
Google Sheets API adapter.

Turns a ``Spreadsheet`` response fetched with ``includeGridData=true`` into
sheet handles whose grids the assembler can consume.
"""

from __future__ import annotations

from typing import Any

from sheetjson.exceptions import ValidationReadError
from sheetjson.models import (
    CellValue,
    DataValidation,
    MergedRange,
    RichText,
    SheetGrids,
    SheetHandle,
)
from sheetjson.utils import format_json_number

# CellData keys that make a cell part of the used range
_CONTENT_KEYS = (
    "userEnteredValue",
    "effectiveValue",
    "formattedValue",
    "note",
    "dataValidation",
    "textFormatRuns",
    "userEnteredFormat",
)

_DATE_FORMAT_TYPES = {"DATE", "TIME", "DATE_TIME"}


class GoogleValidationRule:
    """Lazy reader for a ``DataValidationRule`` from the Sheets API."""

    def __init__(self, raw: Any) -> None:
        self.raw = raw

    def read(self) -> DataValidation:
        """Map the API rule to a DataValidation.

        Raises:
            ValidationReadError: If the rule has no usable condition
        """
        if not isinstance(self.raw, dict):
            raise ValidationReadError(f"expected an object, got {type(self.raw).__name__}")

        condition = self.raw.get("condition")
        if not isinstance(condition, dict):
            raise ValidationReadError("rule has no condition")

        criteria_type = condition.get("type")
        if not isinstance(criteria_type, str) or not criteria_type:
            raise ValidationReadError("condition has no type")

        raw_values = condition.get("values", [])
        if not isinstance(raw_values, list):
            raise ValidationReadError("condition values are not a list")

        criteria_values: list[Any] = []
        for condition_value in raw_values:
            if not isinstance(condition_value, dict):
                raise ValidationReadError("condition value is not an object")
            if "userEnteredValue" in condition_value:
                criteria_values.append(condition_value["userEnteredValue"])
            elif "relativeDate" in condition_value:
                criteria_values.append(condition_value["relativeDate"])
            else:
                raise ValidationReadError("condition value is empty")

        strict = bool(self.raw.get("strict", False))
        return DataValidation(
            criteria_type=criteria_type,
            criteria_values=tuple(criteria_values),
            allow_invalid=not strict,
            strict=strict,
        )


class GoogleSheet(SheetHandle):
    """Sheet handle over one ``Sheet`` object of an API response."""

    def __init__(self, sheet: dict[str, Any]) -> None:
        self._sheet = sheet
        self._props: dict[str, Any] = sheet.get("properties", {})

    @property
    def name(self) -> str:
        return str(self._props.get("title", ""))

    @property
    def sheet_id(self) -> int:
        return int(self._props.get("sheetId", 0))

    @property
    def index(self) -> int:
        # The API index is 0-based
        return int(self._props.get("index", 0)) + 1

    @property
    def hidden(self) -> bool:
        return bool(self._props.get("hidden", False))

    def read_grids(self) -> SheetGrids:
        """Materialize the used range from the sheet's GridData."""
        if self._props.get("sheetType", "GRID") != "GRID":
            return SheetGrids.empty()

        # Sparse view of the cells: (row, col) -> CellData, 0-based
        cell_map: dict[tuple[int, int], dict[str, Any]] = {}
        num_rows = 0
        num_columns = 0

        for grid_data in self._sheet.get("data", []):
            start_row = grid_data.get("startRow", 0)
            start_col = grid_data.get("startColumn", 0)

            for row_idx, row_data in enumerate(grid_data.get("rowData", [])):
                actual_row = start_row + row_idx
                for col_idx, cell_data in enumerate(row_data.get("values", [])):
                    if not _has_content(cell_data):
                        continue
                    actual_col = start_col + col_idx
                    cell_map[(actual_row, actual_col)] = cell_data
                    num_rows = max(num_rows, actual_row + 1)
                    num_columns = max(num_columns, actual_col + 1)

        merges = [_grid_range_to_merge(m) for m in self._sheet.get("merges", [])]
        for merge in merges:
            num_rows = max(num_rows, merge.last_row)
            num_columns = max(num_columns, merge.last_column)

        values: list[list[CellValue]] = []
        formulas: list[list[str]] = []
        comments: list[list[str]] = []
        notes: list[list[str]] = []
        validations: list[list[GoogleValidationRule | None]] = []
        rich_text: list[list[RichText | None]] = []

        for r in range(num_rows):
            values_row: list[CellValue] = []
            formulas_row: list[str] = []
            notes_row: list[str] = []
            validations_row: list[GoogleValidationRule | None] = []
            rich_text_row: list[RichText | None] = []

            for c in range(num_columns):
                cell_data = cell_map.get((r, c), {})
                values_row.append(cell_value(cell_data))
                formulas_row.append(
                    cell_data.get("userEnteredValue", {}).get("formulaValue", "")
                )
                notes_row.append(cell_data.get("note", ""))
                raw_rule = cell_data.get("dataValidation")
                validations_row.append(
                    GoogleValidationRule(raw_rule) if raw_rule is not None else None
                )
                link = cell_link_url(cell_data)
                rich_text_row.append(RichText(link_url=link) if link else None)

            values.append(values_row)
            formulas.append(formulas_row)
            # Comments live in the Drive API, not in grid data
            comments.append([""] * num_columns)
            notes.append(notes_row)
            validations.append(validations_row)
            rich_text.append(rich_text_row)

        return SheetGrids(
            num_rows=num_rows,
            num_columns=num_columns,
            values=values,
            formulas=formulas,
            comments=comments,
            notes=notes,
            validations=validations,
            rich_text=rich_text,
            merges=tuple(merges),
        )


def sheets_from_spreadsheet(
    spreadsheet: dict[str, Any],
) -> tuple[str, list[GoogleSheet]]:
    """Wrap an API ``Spreadsheet`` response.

    Returns:
        Tuple of (spreadsheet title, sheet handles in API order)
    """
    title = spreadsheet.get("properties", {}).get("title", "")
    sheets = [GoogleSheet(sheet) for sheet in spreadsheet.get("sheets", [])]
    return title, sheets


def cell_value(cell_data: dict[str, Any]) -> CellValue:
    """Extract the scalar value of a CellData object.

    Numbers, booleans and strings come from ``effectiveValue`` with their
    type intact. Dates, times and errors use the formatted display value.
    """
    ev = cell_data.get("effectiveValue")
    if not ev:
        return cell_data.get("formattedValue", "")

    if "numberValue" in ev:
        number_type = (
            cell_data.get("effectiveFormat", {}).get("numberFormat", {}).get("type")
        )
        if number_type in _DATE_FORMAT_TYPES and "formattedValue" in cell_data:
            return str(cell_data["formattedValue"])
        return format_json_number(ev["numberValue"])
    if "boolValue" in ev:
        return bool(ev["boolValue"])
    if "stringValue" in ev:
        return str(ev["stringValue"])
    if "errorValue" in ev:
        fallback = ev["errorValue"].get("message", "#ERROR!")
        return str(cell_data.get("formattedValue", fallback))
    return cell_data.get("formattedValue", "")


def cell_link_url(cell_data: dict[str, Any]) -> str | None:
    """Return the single link URL carried by a cell's rich text, if any.

    A cell whose text runs link to more than one URL has no single link.
    """
    uris: list[str] = []
    for run in cell_data.get("textFormatRuns", []):
        uri = run.get("format", {}).get("link", {}).get("uri")
        if uri and uri not in uris:
            uris.append(uri)
    if len(uris) == 1:
        return uris[0]
    if uris:
        return None

    text_format = cell_data.get("userEnteredFormat", {}).get("textFormat", {})
    uri = text_format.get("link", {}).get("uri")
    return uri or None


def _has_content(cell_data: dict[str, Any]) -> bool:
    return any(cell_data.get(key) for key in _CONTENT_KEYS)


def _grid_range_to_merge(grid_range: dict[str, Any]) -> MergedRange:
    """Convert a 0-based, end-exclusive GridRange to a MergedRange."""
    start_row = grid_range.get("startRowIndex", 0)
    start_col = grid_range.get("startColumnIndex", 0)
    return MergedRange(
        first_row=start_row + 1,
        last_row=grid_range.get("endRowIndex", start_row + 1),
        first_column=start_col + 1,
        last_column=grid_range.get("endColumnIndex", start_col + 1),
    )
