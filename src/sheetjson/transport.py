"""Transport layer for fetching spreadsheet data.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using Google Sheets API
- LocalFileTransport: Reads saved API responses from local JSON files
"""

from __future__ import annotations

import json
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

import certifi
import httpx
from loguru import logger

from sheetjson.exceptions import SheetJsonError

# API constants
API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 60

# Only the parts of the response the export reads
GRID_FIELDS = (
    "spreadsheetId,properties.title,"
    "sheets(properties,merges,"
    "data(startRow,startColumn,rowData.values("
    "userEnteredValue,effectiveValue,formattedValue,effectiveFormat.numberFormat,"
    "userEnteredFormat.textFormat.link,note,dataValidation,textFormatRuns)))"
)


class TransportError(SheetJsonError):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when spreadsheet is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class Transport(ABC):
    """Abstract base class for spreadsheet data transport.

    Implementations return a Google Sheets API ``Spreadsheet`` object that
    includes grid data for every sheet.
    """

    @abstractmethod
    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        """Fetch the spreadsheet with its grid data.

        Args:
            spreadsheet_id: The spreadsheet identifier

        Returns:
            Spreadsheet response dictionary
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport that fetches data from Google Sheets API.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with sheets.readonly scope
            timeout: Request timeout in seconds
        """
        self._timeout = timeout
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=timeout,
            verify=ssl_context,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        """Fetch the spreadsheet with grid data from Google Sheets API."""
        query = urllib.parse.urlencode(
            {"includeGridData": "true", "fields": GRID_FIELDS}
        )
        url = f"{API_BASE}/{urllib.parse.quote(spreadsheet_id, safe='')}?{query}"
        logger.debug("Fetching spreadsheet {spreadsheet_id}", spreadsheet_id=spreadsheet_id)
        return await self._request(url)

    async def _request(self, url: str) -> dict[str, Any]:
        """Make an authenticated GET request."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            result: dict[str, Any] = response.json()
            return result
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 401:
                raise AuthenticationError("Invalid or expired access token") from e
            if status == 403:
                raise AuthenticationError(
                    "Access denied. Check your scopes and permissions."
                ) from e
            if status == 404:
                raise NotFoundError(
                    "Spreadsheet not found. Check the ID and sharing permissions."
                ) from e
            body = e.response.text
            raise APIError(f"API error ({status}): {body}", status_code=status) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class LocalFileTransport(Transport):
    """Transport that reads saved API responses.

    Expected directory structure:
        directory/
            <spreadsheet_id>.json
    """

    def __init__(self, directory: Path) -> None:
        """Initialize the transport.

        Args:
            directory: Directory containing saved Spreadsheet responses
        """
        self._directory = directory

    async def get_spreadsheet(self, spreadsheet_id: str) -> dict[str, Any]:
        """Read the spreadsheet response from a local file."""
        path = self._directory / f"{spreadsheet_id}.json"
        if not path.exists():
            raise NotFoundError(f"No saved spreadsheet at {path}")
        try:
            result: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise TransportError(f"Invalid JSON in {path}: {e}") from e
        return result

    async def close(self) -> None:
        """No-op for local file transport."""
        pass
