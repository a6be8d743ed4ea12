"""
Final assembly of chapter content and alignment metadata.
"""

from collections.abc import Sequence
from typing import Optional

from .align import OPEN_ENDED_WINDOW_SECONDS
from .models import (
    AlignmentMetadata,
    AlignmentResult,
    AssignedSegment,
    ChapterContent,
    ExpandedChapter,
)


def empty_alignment(video_id: str, error: Optional[str] = None) -> AlignmentResult:
    """Zeroed result used for missing input and for source failures."""
    return AlignmentResult(
        video_id=video_id,
        metadata=AlignmentMetadata(),
        chapters=(),
        error=error,
    )


def build_content(segments: Sequence[AssignedSegment]) -> tuple[str, tuple[AssignedSegment, ...]]:
    """Sort segments by offset and join their text with single spaces."""
    ordered = tuple(sorted(segments, key=lambda s: s.offset_seconds))
    return " ".join(s.text for s in ordered).strip(), ordered


def assemble_alignment(
    video_id: str,
    chapters: Sequence[ExpandedChapter],
    assigned: Sequence[Sequence[AssignedSegment]],
    transcript_item_count: int,
    overlap_offset_seconds: float,
) -> AlignmentResult:
    """Build the AlignmentResult from expanded chapters and their assigned segments."""
    if not chapters:
        return empty_alignment(video_id)

    contents = []
    for ch, segs in zip(chapters, assigned):
        content, ordered = build_content(segs)
        contents.append(
            ChapterContent(
                title=ch.title,
                start_time=ch.adjusted_start,
                end_time=ch.adjusted_end,
                content=content,
                segments=ordered,
            )
        )

    last = chapters[-1]
    if last.adjusted_end is None:
        total_duration = last.adjusted_start + OPEN_ENDED_WINDOW_SECONDS
    else:
        total_duration = last.adjusted_end

    return AlignmentResult(
        video_id=video_id,
        metadata=AlignmentMetadata(
            total_duration=total_duration,
            chapter_count=len(contents),
            transcript_item_count=transcript_item_count,
            overlap_offset_seconds=overlap_offset_seconds,
        ),
        chapters=tuple(contents),
    )
