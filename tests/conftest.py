"""Shared test fixtures for sheetjson."""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import pytest
from loguru import logger

from sheetjson.assembler import DocumentAssembler

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo configure_logging() calls made by a test."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
    logging.basicConfig(handlers=[], force=True)


@pytest.fixture
def assembler() -> DocumentAssembler:
    """An assembler whose clock always returns FIXED_TIME."""
    return DocumentAssembler(clock=lambda: FIXED_TIME)


@pytest.fixture
def log_records() -> Iterator[list[dict[str, Any]]]:
    """Collect loguru records emitted during a test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def api_cell(
    value: Any = None,
    *,
    formula: str | None = None,
    note: str | None = None,
    validation: dict[str, Any] | None = None,
    link: str | None = None,
) -> dict[str, Any]:
    """Build a CellData object as returned by the Sheets API."""
    cell: dict[str, Any] = {}
    if isinstance(value, bool):
        cell["effectiveValue"] = {"boolValue": value}
        cell["formattedValue"] = "TRUE" if value else "FALSE"
    elif isinstance(value, (int, float)):
        cell["effectiveValue"] = {"numberValue": float(value)}
        cell["formattedValue"] = str(value)
    elif isinstance(value, str):
        cell["effectiveValue"] = {"stringValue": value}
        cell["formattedValue"] = value
    if formula is not None:
        cell["userEnteredValue"] = {"formulaValue": formula}
    if note is not None:
        cell["note"] = note
    if validation is not None:
        cell["dataValidation"] = validation
    if link is not None:
        cell["textFormatRuns"] = [{"format": {"link": {"uri": link}}}]
    return cell


def api_sheet(
    title: str,
    rows: list[list[dict[str, Any]]],
    *,
    sheet_id: int = 0,
    index: int = 0,
    hidden: bool = False,
    merges: list[dict[str, int]] | None = None,
) -> dict[str, Any]:
    """Build a Sheet object with a single GridData block starting at A1."""
    properties: dict[str, Any] = {
        "sheetId": sheet_id,
        "title": title,
        "index": index,
        "sheetType": "GRID",
        "gridProperties": {"rowCount": 1000, "columnCount": 26},
    }
    if hidden:
        properties["hidden"] = True
    sheet: dict[str, Any] = {
        "properties": properties,
        "data": [
            {
                "startRow": 0,
                "startColumn": 0,
                "rowData": [{"values": row} for row in rows],
            }
        ],
    }
    if merges:
        sheet["merges"] = merges
    return sheet


def api_spreadsheet(title: str, sheets: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "spreadsheetId": "test123",
        "properties": {"title": title},
        "sheets": sheets,
    }
