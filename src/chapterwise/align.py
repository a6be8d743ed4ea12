"""
Assignment of transcript segments to chapter windows.

Every segment is checked against every chapter, which is O(segments x chapters). Chapter
counts stay well under a hundred for real videos, so the nested loop is fine; a sweep
over chapters sorted by adjusted start would be the next step if that ever changes.
"""

import math
from collections.abc import Sequence

from .models import AssignedSegment, ExpandedChapter, TranscriptSegment

# Window length assumed for an open-ended chapter when computing relative positions
OPEN_ENDED_WINDOW_SECONDS = 300.0


def window_end(chapter: ExpandedChapter) -> float:
    """Upper bound of the chapter window, +inf when open-ended."""
    return math.inf if chapter.adjusted_end is None else chapter.adjusted_end


def relative_position(timestamp: float, chapter: ExpandedChapter) -> float:
    """Fractional position of ``timestamp`` inside the chapter window, clamped to [0, 1]."""
    if chapter.adjusted_end is None:
        duration = OPEN_ENDED_WINDOW_SECONDS
    else:
        duration = chapter.adjusted_end - chapter.adjusted_start
    if duration <= 0:
        return 0.0
    pos = (timestamp - chapter.adjusted_start) / duration
    return max(0.0, min(1.0, pos))


def align_segments(
    segments: Sequence[TranscriptSegment], chapters: Sequence[ExpandedChapter]
) -> list[list[AssignedSegment]]:
    """Assign each segment to every chapter whose window contains its start.

    Windows are half-open: ``adjusted_start <= start < adjusted_end``. The returned list
    is parallel to ``chapters``; segments inside each entry are in input order.
    """
    assigned: list[list[AssignedSegment]] = [[] for _ in chapters]
    for seg in segments:
        t = seg.start_seconds
        for i, ch in enumerate(chapters):
            if ch.adjusted_start <= t < window_end(ch):
                assigned[i].append(
                    AssignedSegment(
                        text=seg.text,
                        offset_seconds=t,
                        duration_seconds=seg.end_seconds - seg.start_seconds,
                        relative_position=relative_position(t, ch),
                    )
                )
    return assigned
