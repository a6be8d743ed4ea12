"""
Chapter helpers: description timestamp parsing and artificial chapter splitting.
"""

import logging
import math
import re
from collections.abc import Sequence

from .models import RawChapter, TranscriptSegment

logger = logging.getLogger("chapterwise")

# "0:00 Intro", "01:02:03 - Deep dive", "(12:30) Outro", "- 4:05 | Setup"
_CHAPTER_LINE_RE = re.compile(
    r"^\s*[-*•]?\s*[(\[]?(?P<ts>(?:\d{1,2}:)?\d{1,2}:\d{2})[)\]]?\s*(?:[-–—:|]\s*)?(?P<title>.+?)\s*$"
)

MIN_SPLIT_CHAPTERS = 3
MAX_SPLIT_CHAPTERS = 10


def format_time(seconds: float) -> str:
    """Format seconds as H:MM:SS when an hour or longer, otherwise M:SS."""
    total = int(seconds)
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_timestamp(ts: str) -> float:
    """Parse "SS", "MM:SS" or "HH:MM:SS" into seconds."""
    parts = ts.strip().split(":")
    if not parts or len(parts) > 3 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid timestamp: {ts!r}")
    return float(sum(int(x) * (60 ** (len(parts) - 1 - i)) for i, x in enumerate(parts)))


def parse_description_chapters(description: str) -> list[RawChapter]:
    """Extract chapters from a video description.

    Follows the YouTube rules: the first timestamp must be 0:00 and starts must strictly
    increase, otherwise the description has no chapters. Each chapter ends where the next
    one starts; the last chapter is open-ended.
    """
    if not description:
        return []

    starts: list[tuple[float, str]] = []
    for line in description.splitlines():
        m = _CHAPTER_LINE_RE.match(line)
        if not m:
            continue
        start = parse_timestamp(m.group("ts"))
        title = m.group("title").strip()
        if not title:
            continue
        if starts and start <= starts[-1][0]:
            logger.debug(f"Ignoring out-of-order chapter line: {line.strip()!r}")
            continue
        starts.append((start, title))

    if not starts or starts[0][0] != 0:
        return []

    chapters = []
    for i, (start, title) in enumerate(starts):
        end = starts[i + 1][0] if i + 1 < len(starts) else None
        chapters.append(RawChapter(title=title, start_time=start, end_time=end))
    return chapters


def split_transcript_to_chapters(
    segments: Sequence[TranscriptSegment],
    segments_per_chapter: int = 30,
    total_chapters: int = 0,
) -> list[RawChapter]:
    """Cut a transcript into evenly sized artificial chapters.

    With ``total_chapters=0`` the count is derived from ``segments_per_chapter`` and
    clamped to 3..10. The last chapter ends at the end of the last segment.
    """
    if not segments:
        return []

    ordered = sorted(segments, key=lambda s: s.start_seconds)
    if total_chapters <= 0:
        total_chapters = math.ceil(len(ordered) / max(1, segments_per_chapter))
        total_chapters = max(MIN_SPLIT_CHAPTERS, min(MAX_SPLIT_CHAPTERS, total_chapters))
    total_chapters = min(total_chapters, len(ordered))
    per_chapter = math.ceil(len(ordered) / total_chapters)
    total_duration = ordered[-1].end_seconds

    chapters = []
    for i in range(total_chapters):
        first = i * per_chapter
        if first >= len(ordered):
            break
        last = min((i + 1) * per_chapter - 1, len(ordered) - 1)
        start = ordered[first].start_seconds
        end = total_duration if last == len(ordered) - 1 else ordered[last].end_seconds
        chapters.append(
            RawChapter(title=f"Chapter {i + 1} ({format_time(start)})", start_time=start, end_time=end)
        )

    logger.info(f"Split {len(ordered)} transcript segments into {len(chapters)} artificial chapters")
    return chapters
