"""Integration tests for the export workflow using saved API responses.

These tests use LocalFileTransport so no Google API calls are made.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from conftest import api_cell, api_sheet, api_spreadsheet

from sheetjson.assembler import DocumentAssembler
from sheetjson.client import ExportClient, export_spreadsheet_json
from sheetjson.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    TransportError,
)


@pytest.fixture
def golden_dir(tmp_path: Path) -> Path:
    """Directory with one saved Spreadsheet response."""
    spreadsheet = api_spreadsheet(
        "Team Roster",
        [
            api_sheet(
                "People",
                [
                    [api_cell("Name"), api_cell("Age")],
                    [api_cell("Alice"), api_cell(30)],
                    [api_cell("Bob"), api_cell(25, formula="=20+5")],
                ],
            ),
            api_sheet("Scratch", [], sheet_id=9, index=1),
        ],
    )
    directory = tmp_path / "golden"
    directory.mkdir()
    (directory / "roster.json").write_text(json.dumps(spreadsheet), encoding="utf-8")
    return directory


@pytest.fixture
def client(golden_dir: Path, assembler: DocumentAssembler) -> ExportClient:
    return ExportClient(LocalFileTransport(golden_dir), assembler=assembler)


@pytest.mark.asyncio
async def test_export(client: ExportClient) -> None:
    document = await client.export("roster")
    meta = document.spreadsheet_metadata

    assert meta.name == "Team Roster"
    assert meta.total_sheets == 1
    assert meta.total_rows == 3
    assert meta.total_columns == 2
    assert meta.total_cells == 6
    assert meta.total_formulas == 1
    assert document.sheets[0].cells[-1].to_dict() == {
        "address": "B3",
        "value": 25,
        "formula": "=20+5",
    }


@pytest.mark.asyncio
async def test_pull_writes_file(client: ExportClient, tmp_path: Path) -> None:
    output = tmp_path / "out"
    path = await client.pull("roster", output)

    assert path == output / "Team Roster_export.json"
    written: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
    assert written["spreadsheetMetadata"]["exportTimestamp"] == "2024-05-01T12:30:45.123Z"
    assert [s["name"] for s in written["sheets"]] == ["People"]


@pytest.mark.asyncio
async def test_missing_spreadsheet(client: ExportClient) -> None:
    with pytest.raises(NotFoundError):
        await client.export("nope")


@pytest.mark.asyncio
async def test_invalid_saved_json(tmp_path: Path) -> None:
    (tmp_path / "bad.json").write_text("{not json", encoding="utf-8")
    transport = LocalFileTransport(tmp_path)
    with pytest.raises(TransportError):
        await transport.get_spreadsheet("bad")


def test_export_spreadsheet_json_default_assembler() -> None:
    document = export_spreadsheet_json(
        api_spreadsheet("Book", [api_sheet("S", [[api_cell("x")]])])
    )
    assert document.sheets[0].cells[0].value == "x"


def _transport_with(handler: Any) -> GoogleSheetsTransport:
    transport = GoogleSheetsTransport(access_token="token")
    transport._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return transport


class TestGoogleSheetsTransport:
    @pytest.mark.asyncio
    async def test_requests_grid_data(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"spreadsheetId": "abc", "sheets": []})

        transport = _transport_with(handler)
        result = await transport.get_spreadsheet("abc")
        await transport.close()

        assert result == {"spreadsheetId": "abc", "sheets": []}
        assert seen[0].url.path == "/v4/spreadsheets/abc"
        assert seen[0].url.params["includeGridData"] == "true"
        assert "dataValidation" in seen[0].url.params["fields"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "error"),
        [
            (401, AuthenticationError),
            (403, AuthenticationError),
            (404, NotFoundError),
            (500, APIError),
        ],
    )
    async def test_status_errors(self, status: int, error: type[Exception]) -> None:
        transport = _transport_with(lambda request: httpx.Response(status, text="boom"))
        with pytest.raises(error):
            await transport.get_spreadsheet("abc")
        await transport.close()

    @pytest.mark.asyncio
    async def test_api_error_keeps_status(self) -> None:
        transport = _transport_with(lambda request: httpx.Response(503, text="down"))
        with pytest.raises(APIError) as exc_info:
            await transport.get_spreadsheet("abc")
        await transport.close()
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        transport = _transport_with(handler)
        with pytest.raises(TransportError, match="Network error"):
            await transport.get_spreadsheet("abc")
        await transport.close()
