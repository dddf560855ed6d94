from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from esports_schedule.dates import InvalidMatchDate, parse_match_date, require_match_date

MADRID = ZoneInfo("Europe/Madrid")
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=MADRID)


def test_christmas_match_in_current_year() -> None:
    year = datetime.now(MADRID).year
    moment = parse_match_date("25 diciembre", "20:00", tz=MADRID)
    assert moment == datetime(year, 12, 25, 20, 0, tzinfo=MADRID)


def test_year_follows_evaluation_instant() -> None:
    moment = parse_match_date("5 enero", "18:30", tz=MADRID, now=NOW)
    assert moment == datetime(2026, 1, 5, 18, 30, tzinfo=MADRID)


def test_explicit_year_overrides_current_year() -> None:
    moment = parse_match_date("5 enero", "18:30", tz=MADRID, now=NOW, year=2027)
    assert moment == datetime(2027, 1, 5, 18, 30, tzinfo=MADRID)


def test_month_lookup_is_case_insensitive() -> None:
    assert parse_match_date("7 Septiembre", "09:05", tz=MADRID, now=NOW) == datetime(
        2026, 9, 7, 9, 5, tzinfo=MADRID
    )


def test_surrounding_whitespace_is_ignored() -> None:
    assert parse_match_date(" 7 marzo ", " 18:00 ", tz=MADRID, now=NOW) is not None


@pytest.mark.parametrize(
    "date,time",
    [
        ("5 enero", "TBD"),
        ("5 enero", "tbd"),
        ("", "20:00"),
        ("5 enero", ""),
        ("   ", "20:00"),
        ("31 febrero", "20:00"),
        ("5 january", "20:00"),
        ("5", "20:00"),
        ("5 de enero", "20:00"),
        ("5  enero", "20:00"),
        ("x enero", "20:00"),
        ("5 enero", "25:00"),
        ("5 enero", "8pm"),
        ("5 enero", "20:00:00"),
    ],
)
def test_unparseable_inputs(date: str, time: str) -> None:
    assert parse_match_date(date, time, tz=MADRID, now=NOW) is None


def test_require_match_date_explains_tbd() -> None:
    with pytest.raises(InvalidMatchDate, match="TBD"):
        require_match_date("5 enero", "TBD", tz=MADRID, now=NOW)


def test_require_match_date_explains_unknown_month() -> None:
    with pytest.raises(InvalidMatchDate, match="month"):
        require_match_date("5 brumario", "20:00", tz=MADRID, now=NOW)


def test_invalid_calendar_date_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        require_match_date("31 febrero", "20:00", tz=MADRID, now=NOW)
