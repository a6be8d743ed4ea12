"""
Sponsor/ad filtering for transcript segments and chapters.
"""

import logging
from collections.abc import Iterable, Sequence

from .models import RawChapter, TranscriptSegment

logger = logging.getLogger("chapterwise")

DEFAULT_BLOCKED_CHAPTER_PHRASES: tuple[str, ...] = (
    "sponsor",
    "advertisement",
    "ad break",
    "promotion",
)

DEFAULT_BLOCKED_SEGMENT_PHRASES: tuple[str, ...] = (
    "is sponsored by",
    "this video is sponsored by",
    "today's sponsor",
    "special thanks to our sponsor",
)

FULL_VIDEO_TITLE = "Full Video"


def _contains_any(text: str, phrases: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(p in lowered for p in phrases)


def filter_segments_and_chapters(
    segments: Iterable[TranscriptSegment],
    chapters: Iterable[RawChapter],
    blocked_chapter_phrases: Iterable[str] = DEFAULT_BLOCKED_CHAPTER_PHRASES,
    blocked_segment_phrases: Iterable[str] = DEFAULT_BLOCKED_SEGMENT_PHRASES,
) -> tuple[list[TranscriptSegment], list[RawChapter]]:
    """Drop segments and chapters whose text contains a blocked phrase (case-insensitive)."""
    chapter_phrases = [p.lower() for p in blocked_chapter_phrases if p]
    segment_phrases = [p.lower() for p in blocked_segment_phrases if p]

    kept_segments = [s for s in segments if not _contains_any(s.text, segment_phrases)]
    kept_chapters = [c for c in chapters if not _contains_any(c.title, chapter_phrases)]
    return kept_segments, kept_chapters


def fallback_chapters(
    filtered: Sequence[RawChapter], raw: Sequence[RawChapter]
) -> list[RawChapter]:
    """Replace an emptied chapter list with one open-ended "Full Video" chapter."""
    if filtered or not raw:
        return list(filtered)
    logger.info(f"All {len(raw)} chapters were filtered out, using a single '{FULL_VIDEO_TITLE}' chapter")
    return [RawChapter(title=FULL_VIDEO_TITLE, start_time=0.0, end_time=None)]
