"""sheetjson - Spreadsheet export for AI models.

This library converts the populated cells of a spreadsheet (values,
formulas, notes, validation rules, merges and hyperlinks) into a single
normalized JSON document optimized for text-based AI models.
"""

__version__ = "0.1.0"

from sheetjson.assembler import DocumentAssembler, assemble_document
from sheetjson.client import ExportClient, export_spreadsheet_json, export_workbook
from sheetjson.collector import CollectedCells, collect_cells
from sheetjson.exceptions import (
    InputShapeError,
    InvalidMergeError,
    SheetExportError,
    SheetJsonError,
    ValidationReadError,
)
from sheetjson.merge_index import build_merge_index
from sheetjson.models import (
    CellRecord,
    DataValidation,
    ExportDocument,
    InMemorySheet,
    MergedRange,
    MergeInfo,
    RichText,
    SheetDocument,
    SheetGrids,
    SheetHandle,
    SheetMetadata,
    SpreadsheetMetadata,
)
from sheetjson.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    Transport,
    TransportError,
)
from sheetjson.utils import AddressCodec, cell_to_a1, column_to_letter
from sheetjson.writer import ExportWriter

__all__ = [
    "APIError",
    "AddressCodec",
    "AuthenticationError",
    "CellRecord",
    "CollectedCells",
    "DataValidation",
    "DocumentAssembler",
    "ExportClient",
    "ExportDocument",
    "ExportWriter",
    "GoogleSheetsTransport",
    "InMemorySheet",
    "InputShapeError",
    "InvalidMergeError",
    "LocalFileTransport",
    "MergeInfo",
    "MergedRange",
    "NotFoundError",
    "RichText",
    "SheetDocument",
    "SheetExportError",
    "SheetGrids",
    "SheetHandle",
    "SheetJsonError",
    "SheetMetadata",
    "SpreadsheetMetadata",
    "Transport",
    "TransportError",
    "ValidationReadError",
    "__version__",
    "assemble_document",
    "build_merge_index",
    "cell_to_a1",
    "collect_cells",
    "column_to_letter",
    "export_spreadsheet_json",
    "export_workbook",
]
