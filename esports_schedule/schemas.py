from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .models import CalendarExport, MatchRecord, StreamLink

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class Match(CamelModel):
    id: int
    category: str
    date: str
    time: str
    match: str
    phase: str
    competition: str
    stream: str
    stream_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: MatchRecord) -> "Match":
        return cls(
            id=record.id,
            category=record.category,
            date=record.date,
            time=record.time,
            match=record.match,
            phase=record.phase,
            competition=record.competition,
            stream=record.stream,
            stream_url=record.stream_url,
        )

class MatchListResponse(CamelModel):
    matches: List[Match]
    total: int

class ErrorResponse(CamelModel):
    error: str

class Stream(CamelModel):
    url: str
    platform: str
    original_text: str
    display_name: str

    @classmethod
    def from_link(cls, link: StreamLink) -> "Stream":
        return cls(
            url=link.url,
            platform=link.platform.value,
            original_text=link.original_text,
            display_name=link.display_name,
        )

class CalendarLinks(CamelModel):
    google_url: str
    outlook_url: str

    @classmethod
    def from_export(cls, export: CalendarExport) -> "CalendarLinks":
        return cls(google_url=export.google_url, outlook_url=export.outlook_url)

class ScheduleEntry(CamelModel):
    match: Match
    moment: Optional[datetime] = None
    is_past: bool = False
    streams: List[Stream] = []
    calendar: Optional[CalendarLinks] = None  # absent when the date can't be resolved

class ScheduleResponse(CamelModel):
    locale: str
    category: str
    categories: List[str]
    generated_at: datetime
    items: List[ScheduleEntry]

class CalendarDaysResponse(CamelModel):
    locale: str
    category: str
    generated_at: datetime
    days: Dict[str, List[ScheduleEntry]]

class LocaleResponse(CamelModel):
    locale: str
