"""
Transcript/chapter alignment entry points.

``align_transcript`` is the pure pipeline (filter, fallback chapter, overlap, align,
assemble). ``compute_alignment`` and ``compute_alignment_async`` fetch from the sources
first and never raise for source failures: the error is embedded in the result.
"""

import asyncio
import inspect
import logging
from collections.abc import Iterable, Sequence

from .align import align_segments
from .assemble import assemble_alignment, empty_alignment
from .chapters import split_transcript_to_chapters
from .filters import (
    DEFAULT_BLOCKED_CHAPTER_PHRASES,
    DEFAULT_BLOCKED_SEGMENT_PHRASES,
    fallback_chapters,
    filter_segments_and_chapters,
)
from .models import AlignmentResult, RawChapter, TranscriptSegment
from .overlap import DEFAULT_OVERLAP_SECONDS, expand_chapters
from .sources import ChapterSource, TranscriptSource

logger = logging.getLogger("chapterwise")


def align_transcript(
    video_id: str,
    segments: Sequence[TranscriptSegment],
    chapters: Sequence[RawChapter],
    *,
    overlap_offset_seconds: float = DEFAULT_OVERLAP_SECONDS,
    blocked_chapter_phrases: Iterable[str] = DEFAULT_BLOCKED_CHAPTER_PHRASES,
    blocked_segment_phrases: Iterable[str] = DEFAULT_BLOCKED_SEGMENT_PHRASES,
    synthesize_chapters: bool = False,
) -> AlignmentResult:
    """Align already-fetched transcript segments with chapters."""
    if overlap_offset_seconds < 0:
        raise ValueError(f"overlap offset must be >= 0, got {overlap_offset_seconds}")

    if not segments:
        logger.info(f"No transcript for {video_id}, returning empty alignment")
        return empty_alignment(video_id)

    if not chapters:
        if not synthesize_chapters:
            logger.info(f"No chapters for {video_id}, returning empty alignment")
            return empty_alignment(video_id)
        chapters = split_transcript_to_chapters(segments)

    kept_segments, kept_chapters = filter_segments_and_chapters(
        segments, chapters, blocked_chapter_phrases, blocked_segment_phrases
    )
    logger.debug(
        f"Filtering kept {len(kept_segments)}/{len(segments)} segments and "
        f"{len(kept_chapters)}/{len(chapters)} chapters"
    )
    effective = fallback_chapters(kept_chapters, chapters)

    expanded = expand_chapters(effective, overlap_offset_seconds)
    assigned = align_segments(kept_segments, expanded)
    return assemble_alignment(
        video_id,
        expanded,
        assigned,
        transcript_item_count=len(kept_segments),
        overlap_offset_seconds=overlap_offset_seconds,
    )


def compute_alignment(
    video_id: str,
    transcript_source: TranscriptSource,
    chapter_source: ChapterSource,
    *,
    overlap_offset_seconds: float = DEFAULT_OVERLAP_SECONDS,
    blocked_chapter_phrases: Iterable[str] = DEFAULT_BLOCKED_CHAPTER_PHRASES,
    blocked_segment_phrases: Iterable[str] = DEFAULT_BLOCKED_SEGMENT_PHRASES,
    synthesize_chapters: bool = False,
) -> AlignmentResult:
    """Fetch transcript and chapters with synchronous sources and align them.

    Source failures come back as an empty result carrying ``error``. The one exception
    raised is ``ValueError`` for a negative ``overlap_offset_seconds``, checked before
    any fetch.
    """
    if overlap_offset_seconds < 0:
        raise ValueError(f"overlap offset must be >= 0, got {overlap_offset_seconds}")

    try:
        segments = transcript_source.fetch(video_id)
        chapters = chapter_source.fetch(video_id)
    except Exception as e:
        logger.error(f"Error getting chapters and transcript for video {video_id}: {e}")
        return empty_alignment(video_id, error=str(e) or type(e).__name__)

    return align_transcript(
        video_id,
        segments,
        chapters,
        overlap_offset_seconds=overlap_offset_seconds,
        blocked_chapter_phrases=blocked_chapter_phrases,
        blocked_segment_phrases=blocked_segment_phrases,
        synthesize_chapters=synthesize_chapters,
    )


async def _fetch(source, video_id: str):
    if inspect.iscoroutinefunction(source.fetch):
        return await source.fetch(video_id)
    result = await asyncio.to_thread(source.fetch, video_id)
    if inspect.isawaitable(result):
        return await result
    return result


async def compute_alignment_async(
    video_id: str,
    transcript_source: TranscriptSource,
    chapter_source: ChapterSource,
    *,
    overlap_offset_seconds: float = DEFAULT_OVERLAP_SECONDS,
    blocked_chapter_phrases: Iterable[str] = DEFAULT_BLOCKED_CHAPTER_PHRASES,
    blocked_segment_phrases: Iterable[str] = DEFAULT_BLOCKED_SEGMENT_PHRASES,
    synthesize_chapters: bool = False,
) -> AlignmentResult:
    """Fetch transcript and chapters concurrently and align them.

    Sources may expose either a coroutine or a plain ``fetch``; plain ones run in a
    worker thread.
    Errors are reported the same way as in ``compute_alignment``, including the
    ``ValueError`` for a negative overlap.
    """
    if overlap_offset_seconds < 0:
        raise ValueError(f"overlap offset must be >= 0, got {overlap_offset_seconds}")

    try:
        segments, chapters = await asyncio.gather(
            _fetch(transcript_source, video_id),
            _fetch(chapter_source, video_id),
        )
    except Exception as e:
        logger.error(f"Error getting chapters and transcript for video {video_id}: {e}")
        return empty_alignment(video_id, error=str(e) or type(e).__name__)

    return align_transcript(
        video_id,
        segments,
        chapters,
        overlap_offset_seconds=overlap_offset_seconds,
        blocked_chapter_phrases=blocked_chapter_phrases,
        blocked_segment_phrases=blocked_segment_phrases,
        synthesize_chapters=synthesize_chapters,
    )
