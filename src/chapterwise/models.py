"""
Data models for transcript/chapter alignment and chapter map-reduce.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TranscriptSegment:
    """A single transcript line with timing and text."""

    start_seconds: float
    end_seconds: float
    text: str


@dataclass(frozen=True)
class RawChapter:
    """A chapter marker as delivered by a chapter source.

    ``end_time`` is ``None`` for an open-ended chapter (usually the last one).
    """

    title: str
    start_time: float
    end_time: Optional[float] = None

    @property
    def open_ended(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class ExpandedChapter:
    """A chapter whose window was widened by the overlap offset."""

    title: str
    start_time: float
    end_time: Optional[float]
    adjusted_start: float
    adjusted_end: Optional[float]

    @property
    def open_ended(self) -> bool:
        return self.adjusted_end is None


@dataclass(frozen=True)
class AssignedSegment:
    """A transcript segment placed inside a chapter window."""

    text: str
    offset_seconds: float
    duration_seconds: float
    relative_position: float  # 0 = window start, 1 = window end


@dataclass(frozen=True)
class ChapterContent:
    """Chapter window with its concatenated transcript text."""

    title: str
    start_time: float
    end_time: Optional[float]
    content: str
    segments: tuple[AssignedSegment, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "content": self.content,
            "segments": [
                {
                    "text": s.text,
                    "offset": s.offset_seconds,
                    "duration": s.duration_seconds,
                    "relativeOffset": s.relative_position,
                }
                for s in self.segments
            ],
        }


@dataclass(frozen=True)
class AlignmentMetadata:
    total_duration: float = 0.0
    chapter_count: int = 0
    transcript_item_count: int = 0
    overlap_offset_seconds: float = 0.0


@dataclass(frozen=True)
class AlignmentResult:
    """Chapters with aligned transcript content for one video."""

    video_id: str
    metadata: AlignmentMetadata = field(default_factory=AlignmentMetadata)
    chapters: tuple[ChapterContent, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "videoId": self.video_id,
            "metadata": {
                "totalDuration": self.metadata.total_duration,
                "chapterCount": self.metadata.chapter_count,
                "transcriptItemCount": self.metadata.transcript_item_count,
                "overlapOffsetSeconds": self.metadata.overlap_offset_seconds,
            },
            "chapters": [c.to_dict() for c in self.chapters],
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class Usage:
    """Token usage reported by a language model call."""

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class TextResponse:
    text: str
    usage: Usage
    cost: float


@dataclass(frozen=True)
class JSONResponse(Generic[T]):
    json: T
    usage: Usage
    cost: float


@dataclass(frozen=True)
class ChapterSummary:
    """What the reduce prompt sees for one chapter."""

    title: str
    text: str


@dataclass(frozen=True)
class ChapterTaskOutcome:
    """Result of one map-phase call. ``text`` is empty when the call failed."""

    chapter_title: str
    text: str
    cost: float = 0.0


@dataclass(frozen=True)
class ChapterJSONOutcome(Generic[T]):
    """Result of one map-only call. ``result`` is None when the call failed."""

    chapter_title: str
    result: Optional[T]
    cost: float = 0.0


@dataclass(frozen=True)
class MapReduceResult(Generic[T]):
    result: T
    usage: Optional[Usage]
    total_cost: float
