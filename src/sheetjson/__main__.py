"""CLI entry point for sheetjson.

Usage:
    python -m sheetjson pull <spreadsheet_id_or_url> [output_dir] [--stdout]
    python -m sheetjson convert <workbook.xlsx|response.json> [output_dir] [--stdout]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
import zipfile
from pathlib import Path

from loguru import logger
from openpyxl.utils.exceptions import InvalidFileException

from sheetjson.client import ExportClient, export_spreadsheet_json, export_workbook
from sheetjson.config import get_settings
from sheetjson.exceptions import SheetJsonError
from sheetjson.logging import configure_logging
from sheetjson.models import ExportDocument
from sheetjson.transport import GoogleSheetsTransport
from sheetjson.writer import ExportWriter

WORKBOOK_SUFFIXES = {".xlsx", ".xlsm"}


def parse_spreadsheet_id(id_or_url: str) -> str:
    """Extract spreadsheet ID from a URL or return as-is if already an ID."""
    # https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit...
    url_pattern = r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def _emit(document: ExportDocument, args: argparse.Namespace, indent: int) -> None:
    """Print the document or write it to the output directory."""
    writer = ExportWriter(Path(args.output) if args.output else Path(), indent=indent)
    if args.stdout:
        print(writer.dumps(document))
        return
    path = writer.write(document, document.spreadsheet_metadata.name)
    print(f"Wrote {path}")


async def cmd_pull(args: argparse.Namespace) -> int:
    """Export a Google Sheets spreadsheet."""
    settings = get_settings()
    spreadsheet_id = parse_spreadsheet_id(args.spreadsheet)

    if not settings.access_token:
        print(
            "Error: SHEETJSON_ACCESS_TOKEN is not set",
            file=sys.stderr,
        )
        return 1

    transport = GoogleSheetsTransport(
        access_token=settings.access_token, timeout=settings.timeout
    )
    client = ExportClient(transport)

    try:
        document = await client.export(spreadsheet_id)
        _emit(document, args, settings.indent)
        return 0
    except SheetJsonError as e:
        logger.error("Export of {spreadsheet_id} failed", spreadsheet_id=spreadsheet_id)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        await transport.close()


async def cmd_convert(args: argparse.Namespace) -> int:
    """Export a local workbook or saved API response."""
    settings = get_settings()
    source = Path(args.source)

    if not source.exists():
        print(f"Error: File not found: {source}", file=sys.stderr)
        return 1

    try:
        if source.suffix.lower() in WORKBOOK_SUFFIXES:
            document = export_workbook(source)
        elif source.suffix.lower() == ".json":
            data = json.loads(source.read_text(encoding="utf-8"))
            document = export_spreadsheet_json(data)
        else:
            print(f"Error: Unsupported file type: {source.suffix}", file=sys.stderr)
            return 1
        _emit(document, args, settings.indent)
        return 0
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in {source}: {e}", file=sys.stderr)
        return 1
    except (InvalidFileException, zipfile.BadZipFile) as e:
        print(f"Error: Cannot read workbook {source}: {e}", file=sys.stderr)
        return 1
    except SheetJsonError as e:
        logger.error("Export of {source} failed", source=str(source))
        print(f"Error: {e}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetjson",
        description="Export spreadsheets to an AI-friendly JSON document",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # pull subcommand
    pull_parser = subparsers.add_parser(
        "pull",
        help="Export a Google Sheets spreadsheet",
    )
    pull_parser.add_argument(
        "spreadsheet",
        help="Spreadsheet ID or full Google Sheets URL",
    )
    pull_parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output directory (defaults to the current directory)",
    )
    pull_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the document instead of writing a file",
    )
    pull_parser.set_defaults(func=cmd_pull)

    # convert subcommand
    convert_parser = subparsers.add_parser(
        "convert",
        help="Export a local .xlsx workbook or saved Sheets API response (.json)",
    )
    convert_parser.add_argument(
        "source",
        help="Path to the workbook or JSON response",
    )
    convert_parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output directory (defaults to the current directory)",
    )
    convert_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the document instead of writing a file",
    )
    convert_parser.set_defaults(func=cmd_convert)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = get_settings()
    configure_logging(json_output=settings.json_logs, log_level=settings.log_level)

    args = build_parser().parse_args(argv)
    result: int = asyncio.run(args.func(args))
    return result


if __name__ == "__main__":
    sys.exit(main())
