"""Tests for the sheetjson command-line interface."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from conftest import api_cell, api_sheet, api_spreadsheet
from openpyxl import Workbook

from sheetjson.__main__ import main, parse_spreadsheet_id
from sheetjson.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("SHEETJSON_ACCESS_TOKEN", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestParseSpreadsheetId:
    def test_url(self) -> None:
        url = "https://docs.google.com/spreadsheets/d/1AbC-d_9/edit#gid=0"
        assert parse_spreadsheet_id(url) == "1AbC-d_9"

    def test_plain_id(self) -> None:
        assert parse_spreadsheet_id("1AbC-d_9") == "1AbC-d_9"


class TestConvert:
    def test_json_to_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "response.json"
        source.write_text(
            json.dumps(api_spreadsheet("Book", [api_sheet("S", [[api_cell("hi")]])])),
            encoding="utf-8",
        )

        assert main(["convert", str(source), "--stdout"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["sheets"][0]["cells"] == [{"address": "A1", "value": "hi"}]

    def test_xlsx_to_file(self, tmp_path: Path) -> None:
        wb = Workbook()
        wb.active["B2"] = 5
        source = tmp_path / "numbers.xlsx"
        wb.save(source)
        out_dir = tmp_path / "out"

        assert main(["convert", str(source), str(out_dir)]) == 0

        written = json.loads((out_dir / "numbers_export.json").read_text(encoding="utf-8"))
        assert written["sheets"][0]["cells"] == [{"address": "B2", "value": 5}]
        assert written["spreadsheetMetadata"]["totalCells"] == 4

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["convert", str(tmp_path / "nope.xlsx")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_unsupported_type(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "data.csv"
        source.write_text("a,b\n", encoding="utf-8")
        assert main(["convert", str(source)]) == 1
        assert "Unsupported file type" in capsys.readouterr().err

    def test_corrupt_workbook(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "broken.xlsx"
        source.write_bytes(b"not a zip archive")
        assert main(["convert", str(source)]) == 1
        assert "Cannot read workbook" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "broken.json"
        source.write_text("{", encoding="utf-8")
        assert main(["convert", str(source)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_json_not_an_object(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        source = tmp_path / "list.json"
        source.write_text("[1, 2]", encoding="utf-8")
        assert main(["convert", str(source), "--stdout"]) == 1
        assert "Expected a Spreadsheet object, got list" in capsys.readouterr().err

    def test_inverted_merge(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        merge = {"startRowIndex": 0, "endRowIndex": 0, "startColumnIndex": 0, "endColumnIndex": 2}
        source = tmp_path / "response.json"
        source.write_text(
            json.dumps(api_spreadsheet("Book", [api_sheet("S", [[api_cell("hi")]], merges=[merge])])),
            encoding="utf-8",
        )
        assert main(["convert", str(source), "--stdout"]) == 1
        assert "Cannot export sheet 'S' (index 1)" in capsys.readouterr().err


class TestPull:
    def test_requires_token(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["pull", "abc"]) == 1
        assert "SHEETJSON_ACCESS_TOKEN" in capsys.readouterr().err
