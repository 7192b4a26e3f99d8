"""Custom exceptions for sheetjson."""

from __future__ import annotations


class SheetJsonError(Exception):
    """Base exception for all sheetjson errors."""

    pass


class InputShapeError(SheetJsonError):
    """Raised when a sheet's grids do not match its used-range dimensions.

    Every grid handed to the collector must have exactly ``num_rows`` rows
    of ``num_columns`` entries. A narrower or shorter grid is a defect in the
    data provider, not an empty sheet.
    """

    def __init__(
        self,
        grid: str,
        expected_rows: int,
        expected_columns: int,
        actual_rows: int,
        actual_columns: int,
    ) -> None:
        self.grid = grid
        self.expected_rows = expected_rows
        self.expected_columns = expected_columns
        self.actual_rows = actual_rows
        self.actual_columns = actual_columns
        super().__init__(
            f"Grid '{grid}' has shape {actual_rows}x{actual_columns}, "
            f"expected {expected_rows}x{expected_columns}"
        )


class SheetExportError(SheetJsonError):
    """Raised when a sheet cannot be exported.

    Identifies the offending sheet by name and 1-based index. The original
    error is available as ``__cause__``.
    """

    def __init__(self, sheet_name: str, sheet_index: int, reason: str) -> None:
        self.sheet_name = sheet_name
        self.sheet_index = sheet_index
        self.reason = reason
        super().__init__(
            f"Cannot export sheet '{sheet_name}' (index {sheet_index}): {reason}"
        )


class ValidationReadError(SheetJsonError):
    """Raised when a cell's data validation rule cannot be read."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Unreadable data validation rule: {reason}")


class InvalidMergeError(SheetJsonError, ValueError):
    """Raised when a merged range has inverted or non-positive bounds."""

    def __init__(
        self, first_row: int, last_row: int, first_column: int, last_column: int
    ) -> None:
        self.first_row = first_row
        self.last_row = last_row
        self.first_column = first_column
        self.last_column = last_column
        super().__init__(
            f"Invalid merged range: rows {first_row}-{last_row}, "
            f"columns {first_column}-{last_column}"
        )
