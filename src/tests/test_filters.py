"""
Tests for sponsor filtering.
"""

from chapterwise.filters import (
    FULL_VIDEO_TITLE,
    fallback_chapters,
    filter_segments_and_chapters,
)
from chapterwise.models import RawChapter, TranscriptSegment


def test_filter_drops_blocked_chapters_and_segments():
    """Test case-insensitive substring filtering of both lists."""
    segments = [
        TranscriptSegment(start_seconds=0.0, end_seconds=2.0, text="Welcome back."),
        TranscriptSegment(start_seconds=2.0, end_seconds=4.0, text="This video IS SPONSORED BY Acme."),
        TranscriptSegment(start_seconds=4.0, end_seconds=6.0, text="Let's begin."),
    ]
    chapters = [
        RawChapter(title="Intro", start_time=0.0, end_time=30.0),
        RawChapter(title="Sponsor Segment", start_time=30.0, end_time=60.0),
        RawChapter(title="Main topic", start_time=60.0),
    ]

    kept_segments, kept_chapters = filter_segments_and_chapters(
        segments, chapters, ["sponsor"], ["is sponsored by"]
    )

    assert [s.text for s in kept_segments] == ["Welcome back.", "Let's begin."]
    assert [c.title for c in kept_chapters] == ["Intro", "Main topic"]


def test_filter_uses_injected_phrases_only():
    """Test that an empty phrase list keeps everything."""
    segments = [TranscriptSegment(start_seconds=0.0, end_seconds=1.0, text="today's sponsor is Acme")]
    chapters = [RawChapter(title="Ad break", start_time=0.0)]

    kept_segments, kept_chapters = filter_segments_and_chapters(segments, chapters, [], [])

    assert kept_segments == segments
    assert kept_chapters == chapters


def test_filter_default_phrases():
    """Test the default phrase lists."""
    segments = [TranscriptSegment(start_seconds=0.0, end_seconds=1.0, text="Special thanks to our sponsor")]
    chapters = [RawChapter(title="Advertisement", start_time=0.0)]

    kept_segments, kept_chapters = filter_segments_and_chapters(segments, chapters)

    assert kept_segments == []
    assert kept_chapters == []


def test_fallback_chapter_when_all_filtered():
    """Test the synthetic Full Video chapter."""
    raw = [RawChapter(title="Sponsor", start_time=0.0, end_time=10.0)]

    result = fallback_chapters([], raw)

    assert result == [RawChapter(title=FULL_VIDEO_TITLE, start_time=0.0, end_time=None)]
    assert result[0].open_ended


def test_fallback_keeps_filtered_or_empty_input():
    """Test that fallback only applies when something was filtered away."""
    kept = [RawChapter(title="Intro", start_time=0.0)]

    assert fallback_chapters(kept, kept) == kept
    assert fallback_chapters([], []) == []
