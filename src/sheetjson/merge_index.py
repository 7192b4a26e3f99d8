"""Merged-range membership index.

Maps every cell address inside a merged rectangle to the rectangle's own
A1 notation. Built once per sheet and reused for every cell lookup.
"""

from __future__ import annotations

from collections.abc import Iterable

from sheetjson.models import MergedRange, MergeInfo
from sheetjson.utils import AddressCodec


def build_merge_index(merged_ranges: Iterable[MergedRange]) -> dict[str, MergeInfo]:
    """Build the address -> MergeInfo lookup for one sheet.

    Every (row, column) inside each rectangle, inclusive of all four bounds,
    gets an entry keyed by its raw A1 address. All entries of one rectangle
    share a single MergeInfo instance.

    Merges never overlap in a valid spreadsheet. If they do, the range
    listed last wins for the shared cells.

    Args:
        merged_ranges: The sheet's merged rectangles

    Returns:
        Dictionary mapping cell address to its merge membership
    """
    index: dict[str, MergeInfo] = {}
    for merged in merged_ranges:
        info = MergeInfo(merge_range=merged.a1_notation)
        for row in range(merged.first_row, merged.last_row + 1):
            for column in range(merged.first_column, merged.last_column + 1):
                index[AddressCodec.raw_address(row, column)] = info
    return index
