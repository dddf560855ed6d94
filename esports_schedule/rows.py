from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .models import FALLBACK_CATEGORY, MatchRecord

LOGGER = logging.getLogger(__name__)

MIN_ROW_CELLS = 5
STREAM_URL_COLUMN = 7


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row):
        return ""
    value = row[index]
    if value is None:
        return ""
    return str(value).strip()


def _stream_url(row: Sequence[Any]) -> Optional[str]:
    value = _cell(row, STREAM_URL_COLUMN)
    if value.lower().startswith(("http://", "https://")):
        return value
    return None


def is_match_row(row: Sequence[Any]) -> bool:
    """Rows need at least five cells and a non-empty category cell."""
    return len(row) >= MIN_ROW_CELLS and row[0] is not None and str(row[0]) != ""


def normalize_rows(rows: Iterable[Sequence[Any]]) -> List[MatchRecord]:
    """Turn raw spreadsheet rows into match records.

    Rows failing `is_match_row` are dropped without error. Ids are assigned
    by position among the kept rows, starting at 1.
    """
    out: List[MatchRecord] = []
    dropped = 0
    for row in rows:
        if not is_match_row(row):
            dropped += 1
            continue
        out.append(
            MatchRecord(
                id=len(out) + 1,
                category=_cell(row, 0) or FALLBACK_CATEGORY,
                date=_cell(row, 1),
                time=_cell(row, 2),
                match=_cell(row, 3),
                phase=_cell(row, 4),
                competition=_cell(row, 5),
                stream=_cell(row, 6),
                stream_url=_stream_url(row),
            )
        )
    if dropped:
        LOGGER.debug("Dropped %d incomplete rows", dropped)
    return out
