from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Optional


SPANISH_MONTHS = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
}

TBD = "TBD"

_DAY_RE = re.compile(r"^\d{1,2}$")
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


class InvalidMatchDate(ValueError):
    """Raised when a match's date/time cannot be turned into a moment."""


def require_match_date(
    date: str,
    time: str,
    *,
    tz: tzinfo,
    now: Optional[datetime] = None,
    year: Optional[int] = None,
) -> datetime:
    """Resolve a sheet date ("25 diciembre") and time ("20:00") to a moment.

    The sheet carries no year: unless `year` is given, the current calendar
    year in `tz` at `now` (default: the real clock) is used. The returned
    datetime is aware and expressed in `tz`.
    """
    date_text = (date or "").strip()
    time_text = (time or "").strip()
    if not date_text or not time_text:
        raise InvalidMatchDate("Match date or time is missing")
    if time_text.upper() == TBD:
        raise InvalidMatchDate("Match time is not determined yet (TBD)")

    parts = date_text.split(" ")
    if len(parts) != 2:
        raise InvalidMatchDate(f"Unrecognized match date: {date_text!r}")
    day_text, month_name = parts
    month = SPANISH_MONTHS.get(month_name.lower())
    if month is None:
        raise InvalidMatchDate(f"Unknown month name: {month_name!r}")
    if not _DAY_RE.match(day_text):
        raise InvalidMatchDate(f"Invalid day of month: {day_text!r}")
    time_match = _TIME_RE.match(time_text)
    if time_match is None:
        raise InvalidMatchDate(f"Invalid match time: {time_text!r}")

    if year is None:
        year = (now or datetime.now(tz)).astimezone(tz).year

    try:
        return datetime(
            year,
            month,
            int(day_text),
            int(time_match.group(1)),
            int(time_match.group(2)),
            tzinfo=tz,
        )
    except ValueError as e:
        raise InvalidMatchDate(f"Invalid date/time for this event: {date_text} {time_text}") from e


def parse_match_date(
    date: str,
    time: str,
    *,
    tz: tzinfo,
    now: Optional[datetime] = None,
    year: Optional[int] = None,
) -> Optional[datetime]:
    """Like `require_match_date` but returns None instead of raising."""
    try:
        return require_match_date(date, time, tz=tz, now=now, year=year)
    except InvalidMatchDate:
        return None
