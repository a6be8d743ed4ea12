"""
Chapter map-reduce over a language model.

Map: one text prompt per chapter, all chapters in flight at once. A failed chapter is
logged and contributes empty text and zero cost, it never aborts the batch.
Reduce: one JSON prompt over all chapter outputs, issued only after every map task has
settled. A reduce failure is fatal and raised to the caller.
"""

import asyncio
import enum
import logging
from collections.abc import Callable, Sequence
from typing import Any, Generic, Optional, TypeVar

from tqdm.asyncio import tqdm

from .errors import ChapterMapError, ReduceError, ReduceParseError, ResponseParseError
from .llm import LanguageModelClient
from .models import (
    AlignmentResult,
    ChapterContent,
    ChapterJSONOutcome,
    ChapterSummary,
    ChapterTaskOutcome,
    MapReduceResult,
)

logger = logging.getLogger("chapterwise")

T = TypeVar("T")

ChapterPromptFn = Callable[[Any, ChapterContent], str]
ReducePromptFn = Callable[[Any, list[ChapterSummary]], str]


def summaries_from(outcomes: Sequence[ChapterTaskOutcome]) -> list[ChapterSummary]:
    """Reduce-prompt input; failed chapters appear with empty text."""
    return [ChapterSummary(title=o.chapter_title, text=o.text) for o in outcomes]


class ProcessorState(enum.Enum):
    IDLE = "idle"
    MAP_IN_FLIGHT = "map_in_flight"
    MAP_JOINED = "map_joined"
    REDUCE_IN_FLIGHT = "reduce_in_flight"
    DONE = "done"
    REDUCE_FAILED = "reduce_failed"


class ChapterMapReduceProcessor(Generic[T]):
    """Runs chapter prompts through a language model and reduces them into one result.

    The same processor serves every derived artifact (summaries, recommendation lists,
    Q&A pairs, ...); only the two prompt functions and the reduce output type change.
    One run at a time per instance: ``state`` tracks the current or last run.
    """

    def __init__(
        self,
        client: LanguageModelClient,
        *,
        max_concurrent: Optional[int] = None,
        show_progress: bool = False,
    ):
        if max_concurrent is not None and max_concurrent < 1:
            raise ValueError("max_concurrent must be >= 1")
        self.client = client
        self.max_concurrent = max_concurrent
        self.show_progress = show_progress
        self.state = ProcessorState.IDLE

    def _limiter(self) -> Optional[asyncio.Semaphore]:
        return asyncio.Semaphore(self.max_concurrent) if self.max_concurrent else None

    async def _gather(self, coros: list, desc: str) -> list:
        if not coros:
            return []
        return await tqdm.gather(*coros, desc=desc, disable=not self.show_progress)

    async def _map_chapter(
        self,
        chapter: ChapterContent,
        chapter_prompt_fn: ChapterPromptFn,
        video_metadata: Any,
        semaphore: Optional[asyncio.Semaphore],
    ) -> ChapterTaskOutcome:
        try:
            prompt = chapter_prompt_fn(video_metadata, chapter)
            if semaphore is None:
                response = await self.client.generate_text(prompt)
            else:
                async with semaphore:
                    response = await self.client.generate_text(prompt)
        except Exception as e:
            logger.error(str(ChapterMapError(chapter.title, e)))
            return ChapterTaskOutcome(chapter_title=chapter.title, text="", cost=0.0)
        return ChapterTaskOutcome(chapter_title=chapter.title, text=response.text or "", cost=response.cost)

    async def map_chapters(
        self,
        alignment: AlignmentResult,
        chapter_prompt_fn: ChapterPromptFn,
        video_metadata: Any = None,
    ) -> list[ChapterTaskOutcome]:
        """Map phase only: one outcome per chapter, in chapter order."""
        semaphore = self._limiter()
        tasks = [
            self._map_chapter(chapter, chapter_prompt_fn, video_metadata, semaphore)
            for chapter in alignment.chapters
        ]
        return await self._gather(tasks, desc=f"Map {alignment.video_id}")

    async def run_map_reduce(
        self,
        alignment: AlignmentResult,
        chapter_prompt_fn: ChapterPromptFn,
        reduce_prompt_fn: ReducePromptFn,
        video_metadata: Any = None,
    ) -> MapReduceResult[T]:
        """Map every chapter, then reduce all chapter texts into one JSON result.

        Raises ReduceError (ReduceParseError for unparsable output) if the reduce call
        fails; map failures never raise.
        """
        self.state = ProcessorState.MAP_IN_FLIGHT
        logger.info(f"Mapping {len(alignment.chapters)} chapters for {alignment.video_id}")
        outcomes = await self.map_chapters(alignment, chapter_prompt_fn, video_metadata)
        self.state = ProcessorState.MAP_JOINED

        failed = sum(1 for o in outcomes if not o.text)
        if failed:
            logger.warning(f"{failed}/{len(outcomes)} chapters produced no text for {alignment.video_id}")
        map_cost = sum(o.cost for o in outcomes)

        summaries = summaries_from(outcomes)
        self.state = ProcessorState.REDUCE_IN_FLIGHT
        try:
            prompt = reduce_prompt_fn(video_metadata, summaries)
            response = await self.client.generate_json(prompt)
        except ResponseParseError as e:
            self.state = ProcessorState.REDUCE_FAILED
            raise ReduceParseError(f"Reduce output for {alignment.video_id} is not valid JSON: {e}") from e
        except Exception as e:
            self.state = ProcessorState.REDUCE_FAILED
            raise ReduceError(f"Reduce call failed for {alignment.video_id}: {e}") from e

        if response.json is None:
            self.state = ProcessorState.REDUCE_FAILED
            raise ReduceParseError(f"Reduce output for {alignment.video_id} is empty")

        self.state = ProcessorState.DONE
        total_cost = map_cost + response.cost
        logger.info(f"Map-reduce for {alignment.video_id} done, total cost ${total_cost:.6f}")
        return MapReduceResult(result=response.json, usage=response.usage, total_cost=total_cost)

    async def _map_chapter_json(
        self,
        chapter: ChapterContent,
        chapter_prompt_fn: ChapterPromptFn,
        video_metadata: Any,
        semaphore: Optional[asyncio.Semaphore],
    ) -> ChapterJSONOutcome:
        try:
            prompt = chapter_prompt_fn(video_metadata, chapter)
            if semaphore is None:
                response = await self.client.generate_json(prompt)
            else:
                async with semaphore:
                    response = await self.client.generate_json(prompt)
        except Exception as e:
            logger.error(str(ChapterMapError(chapter.title, e)))
            return ChapterJSONOutcome(chapter_title=chapter.title, result=None, cost=0.0)
        return ChapterJSONOutcome(chapter_title=chapter.title, result=response.json, cost=response.cost)

    async def run_map_only(
        self,
        alignment: AlignmentResult,
        chapter_prompt_fn: ChapterPromptFn,
        video_metadata: Any = None,
    ) -> MapReduceResult[list[ChapterJSONOutcome]]:
        """Per-chapter JSON results without a reduce step. Never raises for chapter failures."""
        self.state = ProcessorState.MAP_IN_FLIGHT
        semaphore = self._limiter()
        tasks = [
            self._map_chapter_json(chapter, chapter_prompt_fn, video_metadata, semaphore)
            for chapter in alignment.chapters
        ]
        outcomes = await self._gather(tasks, desc=f"Map {alignment.video_id}")
        self.state = ProcessorState.DONE
        return MapReduceResult(result=outcomes, usage=None, total_cost=sum(o.cost for o in outcomes))


async def run_map_reduce(
    client: LanguageModelClient,
    alignment: AlignmentResult,
    chapter_prompt_fn: ChapterPromptFn,
    reduce_prompt_fn: ReducePromptFn,
    video_metadata: Any = None,
    *,
    max_concurrent: Optional[int] = None,
    show_progress: bool = False,
) -> MapReduceResult:
    """One-shot map-reduce with a fresh processor."""
    processor: ChapterMapReduceProcessor = ChapterMapReduceProcessor(
        client, max_concurrent=max_concurrent, show_progress=show_progress
    )
    return await processor.run_map_reduce(alignment, chapter_prompt_fn, reduce_prompt_fn, video_metadata)
