from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .models import MatchRecord, Platform, StreamLink


_SEPARATORS = re.compile(r"[,\s]+")

_PATH_MARKERS = (
    ("twitch/", Platform.TWITCH),
    ("youtube/", Platform.YOUTUBE),
)

_HOST_PREFIXES = (
    ("twitch.tv/", Platform.TWITCH),
    ("youtube.com/", Platform.YOUTUBE),
)


def platform_for_url(url: str) -> Platform:
    if "youtube.com" in url or "youtu.be" in url:
        return Platform.YOUTUBE
    if "twitch.tv" in url:
        return Platform.TWITCH
    return Platform.TWITCH


def channel_url(channel: str, platform: Platform) -> str:
    if platform is Platform.YOUTUBE:
        return f"https://youtube.com/@{channel}"
    return f"https://twitch.tv/{channel}"


def _split_segment(segment: str) -> Tuple[str, Platform]:
    for prefix, platform in _HOST_PREFIXES:
        if segment.startswith(prefix):
            return segment[len(prefix):].lstrip("@"), platform
    return segment, Platform.TWITCH


def _link(channel: str, platform: Platform, original: str) -> StreamLink:
    return StreamLink(
        url=channel_url(channel, platform),
        platform=platform,
        original_text=original,
        display_name=channel,
    )


def resolve_streams(stream: str, stream_url: Optional[str] = None) -> List[StreamLink]:
    """Resolve a free-text stream cell into clickable channel links.

    A direct hyperlink always wins and yields exactly one link. Otherwise the
    text is read either as ``twitch/a/b`` / ``youtube/a/b`` channel lists or
    as a whitespace/comma separated list of channels.
    """
    stream = stream or ""
    if stream_url:
        return [
            StreamLink(
                url=stream_url,
                platform=platform_for_url(stream_url),
                original_text=stream,
                display_name=stream,
            )
        ]

    for marker, platform in _PATH_MARKERS:
        if marker in stream:
            tail = stream[stream.index(marker) + len(marker):]
            channels = [c.strip() for c in tail.split("/")]
            return [_link(c, platform, f"{marker}{c}") for c in channels if c]

    links: List[StreamLink] = []
    for segment in _SEPARATORS.split(stream):
        if not segment:
            continue
        channel, platform = _split_segment(segment)
        if channel:
            links.append(_link(channel, platform, segment))
    return links


def resolve_match_streams(match: MatchRecord) -> List[StreamLink]:
    return resolve_streams(match.stream, match.stream_url)
