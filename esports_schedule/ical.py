from __future__ import annotations

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, List, Optional
from urllib.parse import quote

from .dates import InvalidMatchDate, require_match_date
from .models import CalendarExport, MatchRecord
from .util import compact_utc, slugify, stable_uid


EVENT_DURATION = timedelta(hours=2)
EVENT_LOCATION = "Online"

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"
OUTLOOK_CALENDAR_URL = "https://outlook.live.com/calendar/0/deeplink/compose"

DEFAULT_PRODID = "-//esports-schedule//EN"


def _ics_escape(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")


def _fold_ics_line(line: str, limit: int = 75) -> str:
    # RFC5545 line folding at `limit` octets: CRLF + single space continuation.
    # Multi-byte characters are never split across lines.
    if len(line.encode("utf-8")) <= limit:
        return line
    out = []
    chunk = ""
    size = 0
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            out.append(chunk)
            chunk = " "
            size = 1
        chunk += ch
        size += width
    out.append(chunk)
    return "\r\n".join(out)


def _encode(value: str) -> str:
    return quote(value, safe="")


def event_title(match: MatchRecord) -> str:
    return f"{match.match} - {match.category}"


def event_description(match: MatchRecord) -> str:
    return f"{match.phase} - {match.competition}\n\nStream: {match.stream}"


def google_calendar_url(match: MatchRecord, start: datetime, end: datetime) -> str:
    return (
        f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE"
        f"&text={_encode(event_title(match))}"
        f"&dates={_encode(compact_utc(start))}/{_encode(compact_utc(end))}"
        f"&details={_encode(event_description(match))}"
        f"&location={_encode(EVENT_LOCATION)}"
    )


def outlook_calendar_url(match: MatchRecord, start: datetime, end: datetime) -> str:
    return (
        f"{OUTLOOK_CALENDAR_URL}"
        f"?subject={_encode(event_title(match))}"
        f"&startdt={_encode(compact_utc(start))}"
        f"&enddt={_encode(compact_utc(end))}"
        f"&body={_encode(event_description(match))}"
        f"&location={_encode(EVENT_LOCATION)}"
    )


def _event_lines(match: MatchRecord, start: datetime, end: datetime, stamp: datetime) -> List[str]:
    return [
        "BEGIN:VEVENT",
        f"UID:{_ics_escape(stable_uid(match))}",
        f"DTSTAMP:{compact_utc(stamp)}",
        f"DTSTART:{compact_utc(start)}",
        f"DTEND:{compact_utc(end)}",
        f"SUMMARY:{_ics_escape(event_title(match))}",
        f"DESCRIPTION:{_ics_escape(event_description(match))}",
        f"LOCATION:{_ics_escape(EVENT_LOCATION)}",
        "END:VEVENT",
    ]


def _calendar(events: Iterable[List[str]], *, prodid: str, name: Optional[str] = None) -> str:
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"PRODID:{_ics_escape(prodid)}",
    ]
    if name:
        lines.append(f"X-WR-CALNAME:{_ics_escape(name)}")
    for event_lines in events:
        for l in event_lines:
            lines.append(_fold_ics_line(l))
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def build_calendar_export(
    match: MatchRecord,
    *,
    tz: tzinfo,
    now: Optional[datetime] = None,
    year: Optional[int] = None,
    prodid: str = DEFAULT_PRODID,
) -> CalendarExport:
    """Build the Google/Outlook deep links and the single-event ICS for a match.

    Raises InvalidMatchDate when the match has no usable date/time; nothing
    is produced in that case.
    """
    now = now or datetime.now(timezone.utc)
    start = require_match_date(match.date, match.time, tz=tz, now=now, year=year)
    end = start + EVENT_DURATION
    return CalendarExport(
        google_url=google_calendar_url(match, start, end),
        outlook_url=outlook_calendar_url(match, start, end),
        ics_text=_calendar([_event_lines(match, start, end, now)], prodid=prodid),
    )


def render_ical(
    matches: Iterable[MatchRecord],
    *,
    tz: tzinfo,
    now: Optional[datetime] = None,
    year: Optional[int] = None,
    prodid: str = DEFAULT_PRODID,
    name: str = "Esports Schedule",
) -> str:
    """Render every match with a resolvable date into one feed, soonest first."""
    now = now or datetime.now(timezone.utc)
    dated = []
    for m in matches:
        try:
            start = require_match_date(m.date, m.time, tz=tz, now=now, year=year)
        except InvalidMatchDate:
            continue
        dated.append((start, m))
    dated.sort(key=lambda x: x[0])

    events = [_event_lines(m, start, start + EVENT_DURATION, now) for start, m in dated]
    return _calendar(events, prodid=prodid, name=name)


def ics_filename(match: MatchRecord) -> str:
    return f"{slugify(match.match)}.ics"
