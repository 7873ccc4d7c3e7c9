"""
YouTube link detection and normalization for workout cell text.

Handles the link shapes coaches paste into sheets:
- youtube.com/watch?v=VIDEO_ID
- youtube.com/shorts/VIDEO_ID
- youtu.be/VIDEO_ID

Each may carry an http(s):// scheme and a www. prefix. Extraction and
stripping share YOUTUBE_LINK_RE so the text removed from a line is exactly
the text the links were read from.
"""

import re
from typing import List, Tuple


# Group 1 is the 11 character video id
YOUTUBE_LINK_RE = re.compile(
    r"(?:https?://)?(?:www\.)?"
    r"(?:youtube\.com/watch\?v=|youtube\.com/shorts/|youtu\.be/)"
    r"([A-Za-z0-9_-]{11})"
)

CANONICAL_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


def canonical_youtube_url(video_id: str) -> str:
    """Full watch URL for a video ID."""
    return CANONICAL_URL_TEMPLATE.format(video_id=video_id)


def _remove_links(line: str) -> Tuple[List[str], str]:
    """
    Remove links until none remain, collecting the id of every removed span.

    Removing a link can splice a prefix onto a following id
    ("youtu.be/youtu.be/<id><id2>"), so a single pass is not enough.
    Each later pass's ids follow the earlier ones.
    """
    video_ids: List[str] = []

    def take(match: "re.Match[str]") -> str:
        video_ids.append(match.group(1))
        return ""

    remaining, count = YOUTUBE_LINK_RE.subn(take, line)
    while count:
        remaining, count = YOUTUBE_LINK_RE.subn(take, remaining)
    return video_ids, remaining


def extract_links(line: str) -> List[str]:
    """
    Find every YouTube link in a line, left to right.

    Args:
        line: One line of cell text

    Returns:
        Canonical watch URLs in the order they appear
    """
    if not line:
        return []
    video_ids, _ = _remove_links(line)
    return [canonical_youtube_url(video_id) for video_id in video_ids]


def strip_links(line: str) -> str:
    """Remove every YouTube link from a line and trim the result."""
    if not line:
        return ""
    _, remaining = _remove_links(line)
    return remaining.strip()
