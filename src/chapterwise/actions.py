"""
Derived-artifact actions built on the chapter map-reduce processor.

An action is a pair of caller-supplied prompt functions. With a reduce prompt the
chapters are mapped to text and reduced into one JSON result; without one each chapter
yields its own JSON result.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .mapreduce import ChapterMapReduceProcessor, ChapterPromptFn, ReducePromptFn
from .models import AlignmentResult, MapReduceResult


@dataclass(frozen=True)
class VideoAction:
    name: str
    chapter_prompt: ChapterPromptFn
    reduce_prompt: Optional[ReducePromptFn] = None

    @property
    def chapters_only(self) -> bool:
        return self.reduce_prompt is None


async def process_action(
    processor: ChapterMapReduceProcessor,
    alignment: AlignmentResult,
    action: VideoAction,
    video_metadata: Any = None,
) -> MapReduceResult:
    """Run ``action`` over the aligned chapters."""
    if action.chapters_only:
        return await processor.run_map_only(alignment, action.chapter_prompt, video_metadata)
    return await processor.run_map_reduce(
        alignment, action.chapter_prompt, action.reduce_prompt, video_metadata
    )
