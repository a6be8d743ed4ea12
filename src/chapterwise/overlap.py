"""
Chapter window expansion.

Each chapter window is widened by ``offset_seconds`` on both sides (the first chapter
keeps its real start) so neighbouring windows overlap and a per-chapter prompt sees a
little context from the chapters around it.
"""

from collections.abc import Sequence

from .models import ExpandedChapter, RawChapter

DEFAULT_OVERLAP_SECONDS = 5.0


def expand_chapters(
    chapters: Sequence[RawChapter], offset_seconds: float = DEFAULT_OVERLAP_SECONDS
) -> list[ExpandedChapter]:
    """Apply the overlap offset to every chapter window."""
    if offset_seconds < 0:
        raise ValueError(f"overlap offset must be >= 0, got {offset_seconds}")

    expanded: list[ExpandedChapter] = []
    for i, ch in enumerate(chapters):
        adjusted_start = ch.start_time if i == 0 else max(0.0, ch.start_time - offset_seconds)
        adjusted_end = None if ch.end_time is None else ch.end_time + offset_seconds
        expanded.append(
            ExpandedChapter(
                title=ch.title,
                start_time=ch.start_time,
                end_time=ch.end_time,
                adjusted_start=adjusted_start,
                adjusted_end=adjusted_end,
            )
        )
    return expanded
