from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from .config import Settings

LOGGER = logging.getLogger(__name__)

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"

STREAM_COLUMN = 6
GRID_FIELDS = "sheets.data.rowData.values(formattedValue,hyperlink)"

Row = List[str]


class SourceUnavailable(RuntimeError):
    """The spreadsheet could not be read for this fetch cycle."""


class SourceNotConfigured(SourceUnavailable):
    """No API key is configured for the spreadsheet provider."""


def rows_from_values(payload: Dict[str, Any]) -> List[Row]:
    values = payload.get("values") or []
    return [[("" if c is None else str(c)) for c in row] for row in values if isinstance(row, list)]


def rows_from_grid(payload: Dict[str, Any]) -> List[Row]:
    """Flatten a grid-data response, placing the stream cell's hyperlink in column H."""
    rows: List[Row] = []
    for sheet in payload.get("sheets") or []:
        for data in sheet.get("data") or []:
            for row_data in data.get("rowData") or []:
                cells = row_data.get("values") or []
                row = [str(c.get("formattedValue") or "") for c in cells]
                # Trailing empty cells are not part of the row, like the values endpoint.
                while row and not row[-1]:
                    row.pop()
                link = None
                if len(cells) > STREAM_COLUMN:
                    link = cells[STREAM_COLUMN].get("hyperlink")
                # Only rows reaching the stream column get the link, so padding
                # never lets a near-empty row pass the minimum cell count.
                if link and len(row) >= STREAM_COLUMN:
                    row.extend([""] * (STREAM_COLUMN + 1 - len(row)))
                    del row[STREAM_COLUMN + 1:]
                    row.append(str(link))
                rows.append(row)
    return rows


def load_rows_file(path: Path) -> List[Row]:
    """Read rows from a saved values (or grid) response."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, list):
        return rows_from_values({"values": payload})
    if "sheets" in payload:
        return rows_from_grid(payload)
    return rows_from_values(payload)


class SheetsSource:
    def __init__(self, config: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.config = config
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.FETCH_TIMEOUT_SECONDS),
            headers={"User-Agent": self.config.USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
            transport=self.transport,
        )

    def _request(self) -> tuple[str, Dict[str, Any]]:
        key = self.config.GOOGLE_SHEETS_API_KEY
        if self.config.INCLUDE_HYPERLINKS:
            url = f"{SHEETS_API_BASE}/{self.config.SHEET_ID}"
            params = {
                "ranges": self.config.SHEET_RANGE,
                "includeGridData": "true",
                "fields": GRID_FIELDS,
                "key": key,
            }
        else:
            url = f"{SHEETS_API_BASE}/{self.config.SHEET_ID}/values/{self.config.SHEET_RANGE}"
            params = {"key": key}
        return url, params

    async def fetch_rows(self) -> List[Row]:
        if not self.config.GOOGLE_SHEETS_API_KEY:
            LOGGER.error("Google Sheets API key not configured")
            raise SourceNotConfigured("Google Sheets API key not configured")

        url, params = self._request()
        try:
            async with self._client() as client:
                resp = await client.get(url, params=params)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            LOGGER.error("Google Sheets API error: %s", exc.response.status_code)
            raise SourceUnavailable(f"Google Sheets API error: {exc.response.status_code}") from exc
        except (httpx.RequestError, ValueError) as exc:
            LOGGER.error("Google Sheets request failed: %s", exc)
            raise SourceUnavailable(f"Google Sheets request failed: {exc}") from exc

        if not isinstance(payload, dict):
            LOGGER.error("Unexpected Google Sheets response: %r", type(payload).__name__)
            raise SourceUnavailable("Unexpected Google Sheets response")
        if self.config.INCLUDE_HYPERLINKS:
            rows = rows_from_grid(payload)
        else:
            rows = rows_from_values(payload)
        LOGGER.debug("Fetched %d rows from sheet %s", len(rows), self.config.SHEET_ID)
        return rows
