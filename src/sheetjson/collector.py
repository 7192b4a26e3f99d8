"""
Cell collection for a single sheet.

Walks the used range of one sheet once, in row-major order, and produces the
populated-cell records together with the sheet's formula count.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from sheetjson.exceptions import InputShapeError, ValidationReadError
from sheetjson.models import (
    CellRecord,
    DataValidation,
    MergeInfo,
    RichText,
    SheetGrids,
    ValidationRule,
)
from sheetjson.utils import AddressCodec

GRID_NAMES = ("values", "formulas", "comments", "notes", "validations", "rich_text")


@dataclass(frozen=True)
class CollectedCells:
    """Result of collecting one sheet."""

    cells: tuple[CellRecord, ...]
    formula_count: int


def check_grid_shapes(grids: SheetGrids) -> None:
    """Verify that all six grids match the used-range dimensions.

    Raises:
        InputShapeError: If any grid has the wrong number of rows or a row
            with the wrong number of columns
    """
    for grid_name in GRID_NAMES:
        grid = getattr(grids, grid_name)
        if len(grid) != grids.num_rows:
            actual_columns = len(grid[0]) if len(grid) else 0
            raise InputShapeError(
                grid_name,
                grids.num_rows,
                grids.num_columns,
                len(grid),
                actual_columns,
            )
        for row in grid:
            if len(row) != grids.num_columns:
                raise InputShapeError(
                    grid_name,
                    grids.num_rows,
                    grids.num_columns,
                    len(grid),
                    len(row),
                )


def collect_cells(
    grids: SheetGrids,
    merge_index: Mapping[str, MergeInfo],
    codec: AddressCodec | None = None,
) -> CollectedCells:
    """Collect the populated cells of one sheet in a single traversal.

    Every cell with a non-empty formula counts towards ``formula_count``,
    including cells that end up excluded from ``cells``.

    Args:
        grids: The sheet's materialized used range
        merge_index: Lookup built by ``build_merge_index`` for this sheet
        codec: Address codec of the current export run. A fresh one is
            created when omitted.

    Returns:
        CollectedCells with records in row-major order

    Raises:
        InputShapeError: If the grids do not match the used-range dimensions
    """
    check_grid_shapes(grids)
    codec = codec or AddressCodec()

    cells: list[CellRecord] = []
    formula_count = 0

    for r in range(grids.num_rows):
        values_row = grids.values[r]
        formulas_row = grids.formulas[r]
        comments_row = grids.comments[r]
        notes_row = grids.notes[r]
        validations_row = grids.validations[r]
        rich_text_row = grids.rich_text[r]

        for c in range(grids.num_columns):
            address = codec.address(r + 1, c + 1)

            formula = _text(formulas_row[c])
            if formula:
                formula_count += 1

            value = values_row[c]
            comment = _text(comments_row[c])
            note = _text(notes_row[c])
            validation = _read_validation(validations_row[c], address)
            merge_info = merge_index.get(address)
            hyperlink = _link_url(rich_text_row[c])

            has_data = (
                not _is_empty_value(value)
                or bool(formula)
                or bool(comment)
                or bool(note)
                or validation is not None
                or merge_info is not None
                or hyperlink is not None
            )
            if not has_data:
                continue

            cells.append(
                CellRecord(
                    address=address,
                    value="" if value is None else value,
                    formula=formula or None,
                    comment=comment or None,
                    note=note or None,
                    data_validation=validation,
                    merge_info=merge_info,
                    hyperlink=hyperlink,
                )
            )

    return CollectedCells(cells=tuple(cells), formula_count=formula_count)


def _is_empty_value(value: Any) -> bool:
    # 0 and False are content; only "" and None are empty
    return value is None or (isinstance(value, str) and value == "")


def _text(raw: Any) -> str:
    """Return the original text when it is non-blank, otherwise ''."""
    if raw is None:
        return ""
    text = str(raw)
    return text if text.strip() else ""


def _link_url(rich_text: RichText | None) -> str | None:
    if rich_text is None or not rich_text.link_url:
        return None
    return rich_text.link_url


def _read_validation(
    rule: DataValidation | ValidationRule | None, address: str
) -> DataValidation | None:
    """Resolve a cell's validation rule, treating unreadable rules as absent."""
    if rule is None or isinstance(rule, DataValidation):
        return rule
    try:
        return rule.read()
    except ValidationReadError as e:
        logger.warning(
            "Skipping unreadable data validation at {address}: {reason}",
            address=address,
            reason=e.reason,
        )
        return None
