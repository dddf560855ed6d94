from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from esports_schedule.api import create_app
from esports_schedule.config import Settings
from esports_schedule.service import ScheduleService
from esports_schedule.sheets import SourceUnavailable

MADRID = ZoneInfo("Europe/Madrid")
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=MADRID)

ROWS = [
    ["Valorant", "1 junio", "13:00", "KOI vs Fnatic", "Playoffs", "VCT EMEA", "twitch/koi/ibai"],
    ["League of Legends", "1 junio", "11:00", "KOI vs G2", "Semana 3", "LEC", "youtube/lec"],
    ["Valorant", "3 junio", "TBD", "KOI vs Heretics", "Final", "VCT EMEA", "koi"],
    ["", "4 junio", "18:00", "Sin categoria", "Final"],
]


class StubSource:
    def __init__(self, rows: Optional[List[List[str]]] = None, error: Optional[Exception] = None) -> None:
        self.rows = rows or []
        self.error = error
        self.calls = 0

    async def fetch_rows(self) -> List[List[str]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.rows


def make_client(source=None, **overrides) -> TestClient:
    config = Settings(GOOGLE_SHEETS_API_KEY="test-key", TZ="Europe/Madrid", **overrides)
    service = ScheduleService(config, source=source or StubSource(ROWS))
    return TestClient(create_app(service, config=config, clock=lambda: NOW))


def test_matches_endpoint() -> None:
    resp = make_client().get("/api/matches")

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert [m["id"] for m in body["matches"]] == [1, 2, 3]
    assert body["matches"][0] == {
        "id": 1,
        "category": "Valorant",
        "date": "1 junio",
        "time": "13:00",
        "match": "KOI vs Fnatic",
        "phase": "Playoffs",
        "competition": "VCT EMEA",
        "stream": "twitch/koi/ibai",
        "streamUrl": None,
    }


def test_matches_are_cached_between_requests() -> None:
    source = StubSource(ROWS)
    client = make_client(source)

    client.get("/api/matches")
    client.get("/api/matches")
    assert source.calls == 1

    client.post("/api/matches/refresh")
    assert source.calls == 2


def test_source_failure_returns_error_body() -> None:
    resp = make_client(StubSource(error=SourceUnavailable("Google Sheets API error: 503"))).get("/api/matches")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch matches from Google Sheets"}


def test_missing_api_key_returns_error_body() -> None:
    config = Settings(GOOGLE_SHEETS_API_KEY=None)
    client = TestClient(create_app(ScheduleService(config), config=config))

    resp = client.get("/api/matches")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Google Sheets API key not configured"}


def test_failed_refresh_discards_previous_matches() -> None:
    source = StubSource(ROWS)
    client = make_client(source)
    assert client.get("/api/matches").status_code == 200

    source.error = SourceUnavailable("down")
    assert client.post("/api/matches/refresh").status_code == 500

    source.error = None
    assert client.get("/api/matches").json()["total"] == 3
    assert source.calls == 3


def test_schedule_orders_and_annotates() -> None:
    resp = make_client().get("/api/schedule")

    assert resp.status_code == 200
    body = resp.json()
    assert body["locale"] == "es"
    assert body["category"] == "all"
    assert body["categories"] == ["all", "Valorant", "League of Legends"]

    items = body["items"]
    assert [i["match"]["id"] for i in items] == [1, 2, 3]
    upcoming, past, undated = items
    assert upcoming["isPast"] is False
    assert past["isPast"] is True
    assert undated["isPast"] is False
    assert undated["moment"] is None
    assert undated["calendar"] is None
    assert upcoming["calendar"]["googleUrl"].startswith("https://calendar.google.com/")
    assert [s["url"] for s in upcoming["streams"]] == ["https://twitch.tv/koi", "https://twitch.tv/ibai"]
    assert past["streams"][0]["platform"] == "YouTube"


def test_schedule_category_filter_and_locale_cookie() -> None:
    client = make_client()
    client.cookies.set("locale", "en")

    body = client.get("/api/schedule", params={"category": "Valorant"}).json()

    assert body["locale"] == "en"
    assert [i["match"]["id"] for i in body["items"]] == [1, 3]


def test_unsupported_locale_cookie_falls_back() -> None:
    client = make_client()
    client.cookies.set("locale", "de")
    assert client.get("/api/schedule").json()["locale"] == "es"


def test_calendar_days() -> None:
    body = make_client().get("/api/calendar").json()

    assert list(body["days"]) == ["2026-06-01"]
    assert [i["match"]["id"] for i in body["days"]["2026-06-01"]] == [2, 1]


def test_match_calendar_links() -> None:
    resp = make_client().get("/api/matches/1/calendar")

    assert resp.status_code == 200
    body = resp.json()
    assert "dates=20260601T110000Z/20260601T130000Z" in body["googleUrl"]
    assert "startdt=20260601T110000Z" in body["outlookUrl"]


def test_match_calendar_invalid_date() -> None:
    resp = make_client().get("/api/matches/3/calendar")

    assert resp.status_code == 422
    assert "TBD" in resp.json()["error"]


def test_unknown_match_is_404_with_error_body() -> None:
    client = make_client()

    for path in ("/api/matches/99/calendar", "/api/matches/99/event.ics"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Match not found: 99"}


def test_match_ics_download() -> None:
    resp = make_client().get("/api/matches/1/event.ics")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/calendar")
    assert 'filename="koi-vs-fnatic.ics"' in resp.headers["content-disposition"]
    assert "DTSTART:20260601T110000Z" in resp.text
    assert resp.text.count("BEGIN:VEVENT") == 1


def test_feed() -> None:
    resp = make_client().get("/feed.ics", params={"category": "Valorant"})

    assert resp.status_code == 200
    assert resp.text.count("BEGIN:VEVENT") == 1
    assert "SUMMARY:KOI vs Fnatic - Valorant" in resp.text


def test_set_locale_cookie() -> None:
    resp = make_client().put("/api/locale/fr")

    assert resp.status_code == 200
    assert resp.json() == {"locale": "fr"}
    cookie = resp.headers["set-cookie"]
    assert "locale=fr" in cookie
    assert "Max-Age=31536000" in cookie


def test_set_unsupported_locale() -> None:
    resp = make_client().put("/api/locale/xx")
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_healthz() -> None:
    assert make_client().get("/healthz").json() == {"ok": True}
