from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from .dates import parse_match_date
from .models import MatchRecord, ScheduledMatch


ALL_CATEGORIES = "all"


def filter_by_category(matches: Iterable[MatchRecord], category: Optional[str]) -> List[MatchRecord]:
    if not category or category == ALL_CATEGORIES:
        return list(matches)
    return [m for m in matches if m.category == category]


def list_categories(matches: Iterable[MatchRecord]) -> List[str]:
    """Filter choices: "all" followed by each category in first-seen order."""
    seen: Dict[str, None] = {}
    for m in matches:
        seen.setdefault(m.category, None)
    return [ALL_CATEGORIES, *seen]


def is_past(moment: datetime, now: datetime) -> bool:
    # The one comparison used for both ordering and dimming; a match starting
    # right now is still upcoming.
    return moment < now


def resolve_moment(
    match: MatchRecord, *, tz: tzinfo, now: datetime, year: Optional[int] = None
) -> Optional[datetime]:
    return parse_match_date(match.date, match.time, tz=tz, now=now, year=year)


@dataclass(frozen=True)
class ClassifiedSchedule:
    upcoming: List[ScheduledMatch] = field(default_factory=list)
    past: List[ScheduledMatch] = field(default_factory=list)
    undated: List[ScheduledMatch] = field(default_factory=list)

    def ordered(self) -> List[ScheduledMatch]:
        return [*self.upcoming, *self.past, *self.undated]


def classify_matches(
    matches: Sequence[MatchRecord],
    *,
    now: datetime,
    tz: tzinfo,
    category: Optional[str] = None,
    year: Optional[int] = None,
) -> ClassifiedSchedule:
    """Split matches into upcoming (soonest first), past (latest first) and undated.

    Undated matches keep their original relative order.
    """
    upcoming: List[ScheduledMatch] = []
    past: List[ScheduledMatch] = []
    undated: List[ScheduledMatch] = []
    for m in filter_by_category(matches, category):
        moment = resolve_moment(m, tz=tz, now=now, year=year)
        entry = ScheduledMatch(record=m, moment=moment)
        if moment is None:
            undated.append(entry)
        elif is_past(moment, now):
            past.append(entry)
        else:
            upcoming.append(entry)

    upcoming.sort(key=lambda e: e.moment)
    past.sort(key=lambda e: e.moment, reverse=True)
    return ClassifiedSchedule(upcoming=upcoming, past=past, undated=undated)


def order_matches(
    matches: Sequence[MatchRecord],
    *,
    now: datetime,
    tz: tzinfo,
    category: Optional[str] = None,
    year: Optional[int] = None,
) -> List[ScheduledMatch]:
    return classify_matches(matches, now=now, tz=tz, category=category, year=year).ordered()


def group_by_day(
    matches: Sequence[MatchRecord],
    *,
    now: datetime,
    tz: tzinfo,
    category: Optional[str] = None,
    year: Optional[int] = None,
) -> Dict[str, List[ScheduledMatch]]:
    """Calendar layout: ISO day -> matches on that day, in chronological order.

    Matches whose date cannot be resolved have no day and are left out.
    """
    dated = [
        ScheduledMatch(record=m, moment=resolve_moment(m, tz=tz, now=now, year=year))
        for m in filter_by_category(matches, category)
    ]
    dated = [e for e in dated if e.moment is not None]
    dated.sort(key=lambda e: e.moment)

    days: Dict[str, List[ScheduledMatch]] = {}
    for e in dated:
        days.setdefault(e.moment.astimezone(tz).date().isoformat(), []).append(e)
    return days
