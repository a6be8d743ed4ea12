"""
chapterwise - Chapter-scoped transcript alignment and LLM map-reduce.

A small pipeline for:
- Filtering sponsor segments and chapters
- Widening chapter windows so neighbours overlap
- Assigning transcript segments to chapter windows
- Mapping a prompt over every chapter and reducing the results into one artifact
"""

from .errors import (
    ChapterMapError,
    ChapterwiseError,
    ReduceError,
    ReduceParseError,
    ResponseParseError,
    SourceFetchError,
)
from .mapreduce import ChapterMapReduceProcessor, ProcessorState, run_map_reduce
from .models import (
    AlignmentMetadata,
    AlignmentResult,
    AssignedSegment,
    ChapterContent,
    ChapterSummary,
    ChapterTaskOutcome,
    ExpandedChapter,
    MapReduceResult,
    RawChapter,
    TranscriptSegment,
    Usage,
)
from .pipeline import align_transcript, compute_alignment, compute_alignment_async

__version__ = "0.1.0"

__all__ = [
    "AlignmentMetadata",
    "AlignmentResult",
    "AssignedSegment",
    "ChapterContent",
    "ChapterMapError",
    "ChapterMapReduceProcessor",
    "ChapterSummary",
    "ChapterTaskOutcome",
    "ChapterwiseError",
    "ExpandedChapter",
    "MapReduceResult",
    "ProcessorState",
    "RawChapter",
    "ReduceError",
    "ReduceParseError",
    "ResponseParseError",
    "SourceFetchError",
    "TranscriptSegment",
    "Usage",
    "align_transcript",
    "compute_alignment",
    "compute_alignment_async",
    "run_map_reduce",
]
