"""FastAPI application serving the match schedule and calendar exports."""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from fastapi import Cookie, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import Settings, settings
from .dates import InvalidMatchDate
from .ical import build_calendar_export, ics_filename, render_ical
from .locale import LOCALE_COOKIE, LOCALE_COOKIE_MAX_AGE, is_supported, resolve_locale
from .models import MatchRecord, ScheduledMatch
from .schedule import ALL_CATEGORIES, filter_by_category, group_by_day, is_past, list_categories, order_matches
from .schemas import (
    CalendarDaysResponse,
    CalendarLinks,
    ErrorResponse,
    LocaleResponse,
    Match,
    MatchListResponse,
    ScheduleEntry,
    ScheduleResponse,
    Stream,
)
from .service import ScheduleService
from .sheets import SourceNotConfigured, SourceUnavailable
from .streams import resolve_match_streams


class MatchNotFound(LookupError):
    """No match with the requested id in the current collection."""


def create_app(
    service: Optional[ScheduleService] = None,
    *,
    config: Optional[Settings] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    config = config or settings
    service = service or ScheduleService(config)
    tz = config.tzinfo

    def now() -> datetime:
        return clock() if clock else datetime.now(tz)

    app = FastAPI(title="Esports Schedule API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SourceUnavailable)
    async def source_unavailable(request: Request, exc: SourceUnavailable) -> JSONResponse:
        if isinstance(exc, SourceNotConfigured):
            message = "Google Sheets API key not configured"
        else:
            message = "Failed to fetch matches from Google Sheets"
        return JSONResponse(status_code=500, content={"error": message})

    @app.exception_handler(MatchNotFound)
    async def match_not_found(request: Request, exc: MatchNotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(InvalidMatchDate)
    async def invalid_match_date(request: Request, exc: InvalidMatchDate) -> JSONResponse:
        return JSONResponse(status_code=422, content={"error": str(exc)})

    def list_response(matches: list[MatchRecord]) -> MatchListResponse:
        return MatchListResponse(matches=[Match.from_record(m) for m in matches], total=len(matches))

    def entry(item: ScheduledMatch, at: datetime) -> ScheduleEntry:
        calendar = None
        if item.moment is not None:
            export = build_calendar_export(item.record, tz=tz, now=at, year=config.YEAR)
            calendar = CalendarLinks.from_export(export)
        return ScheduleEntry(
            match=Match.from_record(item.record),
            moment=item.moment,
            is_past=item.moment is not None and is_past(item.moment, at),
            streams=[Stream.from_link(s) for s in resolve_match_streams(item.record)],
            calendar=calendar,
        )

    async def require_match(match_id: int) -> MatchRecord:
        record = await service.get_match(match_id)
        if record is None:
            raise MatchNotFound(f"Match not found: {match_id}")
        return record

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.get(
        "/api/matches",
        response_model=MatchListResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def matches():
        return list_response(await service.get_matches())

    @app.post(
        "/api/matches/refresh",
        response_model=MatchListResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def refresh_matches():
        return list_response(await service.refresh())

    @app.get("/api/schedule", response_model=ScheduleResponse)
    async def schedule(
        category: str = Query(default=ALL_CATEGORIES, description="Game category, or 'all'"),
        locale: Optional[str] = Cookie(default=None),
    ):
        records = await service.get_matches()
        at = now()
        ordered = order_matches(records, now=at, tz=tz, category=category, year=config.YEAR)
        return ScheduleResponse(
            locale=resolve_locale(locale, default=config.DEFAULT_LOCALE),
            category=category,
            categories=list_categories(records),
            generated_at=at,
            items=[entry(item, at) for item in ordered],
        )

    @app.get("/api/calendar", response_model=CalendarDaysResponse)
    async def calendar(
        category: str = Query(default=ALL_CATEGORIES),
        locale: Optional[str] = Cookie(default=None),
    ):
        records = await service.get_matches()
        at = now()
        days = group_by_day(records, now=at, tz=tz, category=category, year=config.YEAR)
        return CalendarDaysResponse(
            locale=resolve_locale(locale, default=config.DEFAULT_LOCALE),
            category=category,
            generated_at=at,
            days={day: [entry(item, at) for item in items] for day, items in days.items()},
        )

    @app.get(
        "/api/matches/{match_id}/calendar",
        response_model=CalendarLinks,
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    )
    async def match_calendar_links(match_id: int):
        record = await require_match(match_id)
        export = build_calendar_export(record, tz=tz, now=now(), year=config.YEAR)
        return CalendarLinks.from_export(export)

    @app.get(
        "/api/matches/{match_id}/event.ics",
        responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    )
    async def match_ics(match_id: int):
        record = await require_match(match_id)
        export = build_calendar_export(record, tz=tz, now=now(), year=config.YEAR)
        return Response(
            content=export.ics_text,
            media_type="text/calendar",
            headers={"Content-Disposition": f'attachment; filename="{ics_filename(record)}"'},
        )

    @app.get("/feed.ics")
    async def feed(category: str = Query(default=ALL_CATEGORIES)):
        records = await service.get_matches()
        return Response(
            content=render_ical(filter_by_category(records, category), tz=tz, now=now(), year=config.YEAR),
            media_type="text/calendar",
        )

    @app.put("/api/locale/{locale}", response_model=LocaleResponse, responses={400: {"model": ErrorResponse}})
    def set_locale(locale: str):
        if not is_supported(locale):
            return JSONResponse(status_code=400, content={"error": f"Unsupported locale: {locale}"})
        response = JSONResponse(content={"locale": locale})
        response.set_cookie(LOCALE_COOKIE, locale, max_age=LOCALE_COOKIE_MAX_AGE, path="/", samesite="lax")
        return response

    return app


app = create_app()
