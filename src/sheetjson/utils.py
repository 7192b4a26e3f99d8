"""
Utility functions for sheetjson.

Provides A1 address conversion, the per-run address codec, filename
sanitization and JSON number normalization.
"""

from __future__ import annotations

import re


def column_to_letter(column: int) -> str:
    """Convert a 1-based column number to A1 notation letter(s).

    Examples:
        1 -> A, 2 -> B, 26 -> Z, 27 -> AA, 702 -> ZZ, 703 -> AAA
    """
    if column < 1:
        raise ValueError(f"Column must be >= 1, got {column}")
    result = ""
    n = column
    while n > 0:
        m = (n - 1) % 26
        result = chr(ord("A") + m) + result
        n = (n - m - 1) // 26
    return result


def letter_to_column(letter: str) -> int:
    """Convert A1 notation letter(s) to a 1-based column number.

    Examples:
        A -> 1, B -> 2, Z -> 26, AA -> 27, ZZ -> 702, AAA -> 703
    """
    if not letter or not letter.isalpha():
        raise ValueError(f"Invalid column letters: {letter!r}")
    result = 0
    for char in letter.upper():
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


def cell_to_a1(row: int, column: int) -> str:
    """Convert 1-based row and column numbers to A1 notation.

    Examples:
        (1, 1) -> A1, (1, 2) -> B1, (10, 3) -> C10
    """
    if row < 1:
        raise ValueError(f"Row must be >= 1, got {row}")
    return f"{column_to_letter(column)}{row}"


def a1_to_cell(a1: str) -> tuple[int, int]:
    """Convert A1 notation to 1-based (row, column).

    Examples:
        A1 -> (1, 1), B1 -> (1, 2), C10 -> (10, 3)
    """
    match = re.match(r"^([A-Za-z]+)(\d+)$", a1)
    if not match:
        raise ValueError(f"Invalid A1 notation: {a1}")
    col_letter, row_str = match.groups()
    row = int(row_str)
    if row < 1:
        raise ValueError(f"Invalid A1 notation: {a1}")
    return row, letter_to_column(col_letter)


def range_to_a1(
    first_row: int,
    last_row: int,
    first_column: int,
    last_column: int,
) -> str:
    """Convert 1-based inclusive range bounds to A1 notation.

    Examples:
        (2, 3, 2, 3) -> B2:C3
        (1, 1, 1, 1) -> A1 (single cell)
    """
    start_a1 = cell_to_a1(first_row, first_column)
    if first_row == last_row and first_column == last_column:
        return start_a1
    return f"{start_a1}:{cell_to_a1(last_row, last_column)}"


class AddressCodec:
    """Maps (row, column) pairs to A1 addresses for one export run.

    Column letters repeat identically on every row, so ``address`` memoizes
    them per column. ``raw_address`` skips the cache and is meant for
    throwaway lookup keys. Both return the same string for the same input.
    """

    def __init__(self) -> None:
        self._column_letters: dict[int, str] = {}

    def column_letter(self, column: int) -> str:
        """Return the cached letters for a 1-based column."""
        letters = self._column_letters.get(column)
        if letters is None:
            letters = column_to_letter(column)
            self._column_letters[column] = letters
        return letters

    def address(self, row: int, column: int) -> str:
        """Return the A1 address of a cell, using the column cache."""
        if row < 1:
            raise ValueError(f"Row must be >= 1, got {row}")
        return f"{self.column_letter(column)}{row}"

    @staticmethod
    def raw_address(row: int, column: int) -> str:
        """Return the A1 address of a cell without touching the cache."""
        return cell_to_a1(row, column)


def sanitize_filename(name: str) -> str:
    """Sanitize a string for use as a filename.

    Replaces invalid characters with underscores and trims whitespace.
    """
    # Characters invalid in Windows/Unix filenames
    invalid_chars = r'[/\\:*?"<>|]'
    sanitized = re.sub(invalid_chars, "_", name)
    # Remove leading/trailing whitespace and dots
    sanitized = sanitized.strip(" .")
    # Collapse multiple underscores
    sanitized = re.sub(r"_+", "_", sanitized)
    return sanitized or "unnamed"


def format_json_number(value: float) -> float | int:
    """Format a number for JSON, converting integral floats to int.

    This prevents numbers like 1.0 from appearing in JSON output.
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
