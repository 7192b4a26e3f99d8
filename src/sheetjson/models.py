"""
Data model for sheetjson.

Input types describe one sheet's materialized used range as handed over by a
data provider. Output types form the export document; each exposes
``to_dict()`` returning the JSON tree with camelCase keys.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, Union, runtime_checkable

from sheetjson.exceptions import InvalidMergeError
from sheetjson.utils import range_to_a1

CellValue = Union[str, int, float, bool, None]

EXPLANATION = (
    "This JSON document is an export of a spreadsheet for AI analysis. "
    "'spreadsheetMetadata' summarizes the whole spreadsheet. Each entry in "
    "'sheets' describes one sheet that has content; 'metadata' gives the "
    "dimensions of its used range and 'cells' lists every populated cell in "
    "row-major order, addressed in A1 notation (column letters followed by "
    "the 1-based row number). A cell carries 'value' and, only when present, "
    "'formula', 'comment', 'note', 'dataValidation', 'mergeInfo' and "
    "'hyperlink'. Cells inside a merged range share the same "
    "'mergeInfo.mergeRange'."
)


# =============================================================================
# Input types
# =============================================================================


@dataclass(frozen=True)
class DataValidation:
    """A data validation rule attached to a cell."""

    criteria_type: str
    criteria_values: tuple[Any, ...] = ()
    allow_invalid: bool = True
    strict: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "criteriaType": self.criteria_type,
            "criteriaValues": list(self.criteria_values),
            "allowInvalid": self.allow_invalid,
            "strict": self.strict,
        }


@runtime_checkable
class ValidationRule(Protocol):
    """A validation rule whose criteria are read lazily.

    ``read`` raises ``ValidationReadError`` when the underlying rule is
    malformed or cannot be interpreted.
    """

    def read(self) -> DataValidation: ...


@dataclass(frozen=True)
class RichText:
    """Rich-text metadata of a cell. Only the link URL is exported."""

    link_url: str | None = None


@dataclass(frozen=True)
class MergedRange:
    """A merged rectangle with 1-based inclusive bounds."""

    first_row: int
    last_row: int
    first_column: int
    last_column: int

    def __post_init__(self) -> None:
        if (
            self.first_row < 1
            or self.first_column < 1
            or self.last_row < self.first_row
            or self.last_column < self.first_column
        ):
            raise InvalidMergeError(
                self.first_row, self.last_row, self.first_column, self.last_column
            )

    @property
    def a1_notation(self) -> str:
        return range_to_a1(
            self.first_row, self.last_row, self.first_column, self.last_column
        )


Grid = Sequence[Sequence[Any]]


@dataclass(frozen=True)
class SheetGrids:
    """The used range of one sheet, as six same-shaped grids plus merges.

    Grid cells are indexed ``[row][column]`` from 0; ``[0][0]`` is A1.
    Absent comments, notes and formulas are ``""``; absent validations and
    rich text are ``None``.
    """

    num_rows: int
    num_columns: int
    values: Grid
    formulas: Grid
    comments: Grid
    notes: Grid
    validations: Grid
    rich_text: Grid
    merges: Sequence[MergedRange] = ()

    @classmethod
    def empty(cls) -> SheetGrids:
        return cls(0, 0, [], [], [], [], [], [])

    @classmethod
    def from_values(
        cls,
        values: Grid,
        *,
        formulas: Grid | None = None,
        comments: Grid | None = None,
        notes: Grid | None = None,
        validations: Grid | None = None,
        rich_text: Grid | None = None,
        merges: Sequence[MergedRange] = (),
    ) -> SheetGrids:
        """Build grids sized from ``values``, filling omitted grids as absent."""
        num_rows = len(values)
        num_columns = len(values[0]) if num_rows else 0

        def blank(fill: Any) -> list[list[Any]]:
            return [[fill] * num_columns for _ in range(num_rows)]

        return cls(
            num_rows=num_rows,
            num_columns=num_columns,
            values=values,
            formulas=formulas if formulas is not None else blank(""),
            comments=comments if comments is not None else blank(""),
            notes=notes if notes is not None else blank(""),
            validations=validations if validations is not None else blank(None),
            rich_text=rich_text if rich_text is not None else blank(None),
            merges=merges,
        )


class SheetHandle(ABC):
    """One sheet of a spreadsheet as seen by the assembler.

    Implementations know the sheet's identity up front and materialize its
    grids on demand.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def sheet_id(self) -> int | str: ...

    @property
    @abstractmethod
    def index(self) -> int:
        """1-based position among all sheets of the spreadsheet."""
        ...

    @property
    @abstractmethod
    def hidden(self) -> bool: ...

    @abstractmethod
    def read_grids(self) -> SheetGrids:
        """Materialize the sheet's used range."""
        ...


class InMemorySheet(SheetHandle):
    """A sheet handle over grids that are already in memory."""

    def __init__(
        self,
        name: str,
        grids: SheetGrids,
        *,
        sheet_id: int | str = 0,
        index: int = 1,
        hidden: bool = False,
    ) -> None:
        self._name = name
        self._grids = grids
        self._sheet_id = sheet_id
        self._index = index
        self._hidden = hidden

    @property
    def name(self) -> str:
        return self._name

    @property
    def sheet_id(self) -> int | str:
        return self._sheet_id

    @property
    def index(self) -> int:
        return self._index

    @property
    def hidden(self) -> bool:
        return self._hidden

    def read_grids(self) -> SheetGrids:
        return self._grids


# =============================================================================
# Output types
# =============================================================================


@dataclass(frozen=True)
class MergeInfo:
    """Merge membership of a cell; shared by every cell of the rectangle."""

    merge_range: str

    def to_dict(self) -> dict[str, Any]:
        return {"isMerged": True, "mergeRange": self.merge_range}


@dataclass(frozen=True)
class CellRecord:
    """One populated cell. Optional fields are ``None`` when absent."""

    address: str
    value: CellValue = ""
    formula: str | None = None
    comment: str | None = None
    note: str | None = None
    data_validation: DataValidation | None = None
    merge_info: MergeInfo | None = None
    hyperlink: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the minimal JSON object for this cell.

        Only populated keys are inserted; there are no null placeholders.
        """
        result: dict[str, Any] = {
            "address": self.address,
            "value": "" if self.value is None else self.value,
        }
        if self.formula is not None:
            result["formula"] = self.formula
        if self.comment is not None:
            result["comment"] = self.comment
        if self.note is not None:
            result["note"] = self.note
        if self.data_validation is not None:
            result["dataValidation"] = self.data_validation.to_dict()
        if self.merge_info is not None:
            result["mergeInfo"] = self.merge_info.to_dict()
        if self.hyperlink is not None:
            result["hyperlink"] = self.hyperlink
        return result


@dataclass(frozen=True)
class SheetMetadata:
    """Dimensions and statistics of one sheet's used range."""

    num_rows: int
    num_columns: int
    num_formulas: int
    hidden: bool = False

    @property
    def num_cells(self) -> int:
        return self.num_rows * self.num_columns

    @property
    def visibility(self) -> str:
        return "Hidden" if self.hidden else "Visible"

    def to_dict(self) -> dict[str, Any]:
        return {
            "numRows": self.num_rows,
            "numColumns": self.num_columns,
            "numCells": self.num_cells,
            "numFormulas": self.num_formulas,
            "visibility": self.visibility,
        }


@dataclass(frozen=True)
class SheetDocument:
    """One exported, non-empty sheet."""

    name: str
    id: int | str
    index: int
    metadata: SheetMetadata
    cells: tuple[CellRecord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "index": self.index,
            "metadata": self.metadata.to_dict(),
            "cells": [cell.to_dict() for cell in self.cells],
        }


@dataclass(frozen=True)
class SpreadsheetMetadata:
    """Spreadsheet-wide totals over the emitted sheets."""

    name: str
    export_timestamp: str
    total_sheets: int = 0
    total_rows: int = 0
    total_columns: int = 0
    total_cells: int = 0
    total_formulas: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "exportTimestamp": self.export_timestamp,
            "totalSheets": self.total_sheets,
            "totalRows": self.total_rows,
            "totalColumns": self.total_columns,
            "totalCells": self.total_cells,
            "totalFormulas": self.total_formulas,
        }


@dataclass(frozen=True)
class ExportDocument:
    """The root output of an export."""

    spreadsheet_metadata: SpreadsheetMetadata
    sheets: tuple[SheetDocument, ...] = field(default_factory=tuple)
    explanation: str = EXPLANATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "explanation": self.explanation,
            "spreadsheetMetadata": self.spreadsheet_metadata.to_dict(),
            "sheets": [sheet.to_dict() for sheet in self.sheets],
        }
