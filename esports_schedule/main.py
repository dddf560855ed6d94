from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from .config import settings
from .ical import render_ical
from .rows import normalize_rows
from .schedule import ALL_CATEGORIES, filter_by_category
from .sheets import SheetsSource, SourceUnavailable, load_rows_file


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="esports_schedule",
        description="Read the esports match sheet and emit an iCalendar feed",
    )
    p.add_argument("--out", default="feed.ics", help="Output .ics path (default: feed.ics)")
    p.add_argument(
        "--tz",
        default=settings.TZ,
        help=f"Timezone the sheet's dates and times are written in (default: {settings.TZ})",
    )
    p.add_argument(
        "--category",
        default=ALL_CATEGORIES,
        help="Only include matches of this game category (default: all)",
    )
    p.add_argument(
        "--year",
        type=int,
        default=settings.YEAR,
        help="Year the sheet's dates belong to (default: current year)",
    )
    p.add_argument(
        "--rows-file",
        default=None,
        help="Read rows from a saved Sheets API JSON response instead of fetching",
    )
    p.add_argument(
        "--hyperlinks",
        action="store_true",
        default=settings.INCLUDE_HYPERLINKS,
        help="Fetch grid data so stream cell hyperlinks are used",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    tz = ZoneInfo(args.tz)

    if args.rows_file:
        rows = load_rows_file(Path(args.rows_file))
    else:
        config = settings.model_copy(update={"INCLUDE_HYPERLINKS": args.hyperlinks})
        try:
            rows = asyncio.run(SheetsSource(config).fetch_rows())
        except SourceUnavailable as exc:
            print(f"Could not read the match sheet: {exc}", file=sys.stderr)
            return 1

    matches = filter_by_category(normalize_rows(rows), args.category)
    ics = render_ical(matches, tz=tz, now=datetime.now(tz), year=args.year)
    out_path = Path(args.out)
    out_path.write_text(ics, encoding="utf-8")

    events = ics.count("BEGIN:VEVENT")
    print(f"Read {len(matches)} matches ({events} with a date); wrote {out_path}")
    return 0
