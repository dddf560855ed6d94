from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone

from .models import MatchRecord


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36 esports-schedule/0.1"
)


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def stable_uid(match: MatchRecord) -> str:
    # Ids are positional, so the content hash keeps UIDs apart across fetches.
    base = "|".join(
        [
            match.category.strip(),
            match.date.strip(),
            match.time.strip(),
            match.match.strip(),
            match.competition.strip(),
        ]
    )
    return f"match-{match.id}-{sha256_hex(base)[:16]}@esports-schedule"


def ensure_tzaware_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    return dt.astimezone(timezone.utc)


def compact_utc(dt: datetime) -> str:
    """`20261225T190000Z` form used by calendar deep links and ICS."""
    return ensure_tzaware_utc(dt).replace(microsecond=0).strftime("%Y%m%dT%H%M%SZ")


def slugify(text: str, *, fallback: str = "match") -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", text).strip("-").lower()
    return slug or fallback
