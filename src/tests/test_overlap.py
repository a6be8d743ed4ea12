"""
Tests for chapter window expansion.
"""

import pytest

from chapterwise.models import RawChapter
from chapterwise.overlap import expand_chapters


def test_expand_chapters_offsets():
    """Test start/end adjustment rules."""
    chapters = [
        RawChapter(title="Intro", start_time=2.0, end_time=10.0),
        RawChapter(title="Early", start_time=3.0, end_time=40.0),
        RawChapter(title="Main", start_time=40.0, end_time=None),
    ]

    expanded = expand_chapters(chapters, 5.0)

    # First chapter never starts earlier than its real start
    assert expanded[0].adjusted_start == 2.0
    assert expanded[0].adjusted_end == 15.0
    # Later starts are pulled back but not below zero
    assert expanded[1].adjusted_start == 0.0
    assert expanded[1].adjusted_end == 45.0
    assert expanded[2].adjusted_start == 35.0
    assert expanded[2].adjusted_end is None
    assert expanded[2].open_ended


def test_expand_chapters_keeps_raw_times():
    """Test that raw chapter times are carried through."""
    expanded = expand_chapters([RawChapter(title="A", start_time=0.0, end_time=10.0)], 3.0)

    assert expanded[0].start_time == 0.0
    assert expanded[0].end_time == 10.0
    assert expanded[0].title == "A"


def test_expand_chapters_zero_offset():
    """Test that a zero offset leaves windows unchanged."""
    chapters = [
        RawChapter(title="A", start_time=0.0, end_time=10.0),
        RawChapter(title="B", start_time=10.0),
    ]

    expanded = expand_chapters(chapters, 0.0)

    assert [(c.adjusted_start, c.adjusted_end) for c in expanded] == [(0.0, 10.0), (10.0, None)]


def test_expand_chapters_rejects_negative_offset():
    """Test offset validation."""
    with pytest.raises(ValueError):
        expand_chapters([RawChapter(title="A", start_time=0.0)], -1.0)
