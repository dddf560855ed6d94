from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


FALLBACK_CATEGORY = "Other"


@dataclass(frozen=True, slots=True)
class MatchRecord:
    id: int  # 1-based position among the kept rows of one fetch
    category: str
    date: str  # "<day> <spanish month>", e.g. "25 diciembre"
    time: str  # "HH:MM" or "TBD"
    match: str
    phase: str
    competition: str
    stream: str
    stream_url: Optional[str] = None


class Platform(str, Enum):
    TWITCH = "Twitch"
    YOUTUBE = "YouTube"


@dataclass(frozen=True, slots=True)
class StreamLink:
    url: str
    platform: Platform
    original_text: str
    display_name: str


@dataclass(frozen=True, slots=True)
class ScheduledMatch:
    """A record paired with the moment it resolved to at evaluation time."""

    record: MatchRecord
    moment: Optional[datetime]


@dataclass(frozen=True, slots=True)
class CalendarExport:
    google_url: str
    outlook_url: str
    ics_text: str
