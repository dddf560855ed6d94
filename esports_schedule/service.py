from __future__ import annotations

import logging
import time
from typing import List, Optional

from .config import Settings, settings
from .models import MatchRecord
from .rows import normalize_rows
from .sheets import SheetsSource

LOGGER = logging.getLogger(__name__)


class ScheduleService:
    """Holds the match collection of the latest fetch cycle.

    Each successful fetch replaces the collection in full; a failed fetch
    clears it before the error propagates.
    """

    def __init__(self, config: Optional[Settings] = None, *, source: Optional[SheetsSource] = None) -> None:
        self.config = config or settings
        self.source = source or SheetsSource(self.config)
        self._matches: Optional[List[MatchRecord]] = None
        self._fetched_at: float = 0.0

    def _is_fresh(self) -> bool:
        if self._matches is None:
            return False
        return (time.monotonic() - self._fetched_at) < self.config.CACHE_TTL_SECONDS

    async def refresh(self) -> List[MatchRecord]:
        try:
            rows = await self.source.fetch_rows()
        except Exception:
            self._matches = None
            raise
        matches = normalize_rows(rows)
        self._matches = matches
        self._fetched_at = time.monotonic()
        LOGGER.info("Loaded %d matches from %d rows", len(matches), len(rows))
        return matches

    async def get_matches(self) -> List[MatchRecord]:
        if self._is_fresh():
            return list(self._matches or [])
        return await self.refresh()

    async def get_match(self, match_id: int) -> Optional[MatchRecord]:
        for m in await self.get_matches():
            if m.id == match_id:
                return m
        return None
