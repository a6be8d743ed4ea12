"""
Runtime settings loaded from the environment (and a .env file when present).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .filters import DEFAULT_BLOCKED_CHAPTER_PHRASES, DEFAULT_BLOCKED_SEGMENT_PHRASES
from .llm import DEFAULT_MODEL, OpenAIModelClient
from .mapreduce import ChapterMapReduceProcessor
from .overlap import DEFAULT_OVERLAP_SECONDS


def _split_phrases(raw: Optional[str], default: tuple[str, ...]) -> tuple[str, ...]:
    if raw is None:
        return default
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    youtube_api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    overlap_offset_seconds: float = DEFAULT_OVERLAP_SECONDS
    max_concurrent: Optional[int] = None
    blocked_chapter_phrases: tuple[str, ...] = field(default=DEFAULT_BLOCKED_CHAPTER_PHRASES)
    blocked_segment_phrases: tuple[str, ...] = field(default=DEFAULT_BLOCKED_SEGMENT_PHRASES)


def load_settings(env_file: Union[str, Path, None] = None) -> Settings:
    """Build Settings from environment variables, loading ``env_file`` (or ./.env) first."""
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    overlap = float(os.getenv("CHAPTERWISE_OVERLAP_SECONDS", DEFAULT_OVERLAP_SECONDS))
    if overlap < 0:
        raise ValueError(f"CHAPTERWISE_OVERLAP_SECONDS must be >= 0, got {overlap}")
    max_concurrent = os.getenv("CHAPTERWISE_MAX_CONCURRENT")

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
        model=os.getenv("CHAPTERWISE_MODEL", DEFAULT_MODEL),
        overlap_offset_seconds=overlap,
        max_concurrent=int(max_concurrent) if max_concurrent else None,
        blocked_chapter_phrases=_split_phrases(
            os.getenv("CHAPTERWISE_BLOCKED_CHAPTER_PHRASES"), DEFAULT_BLOCKED_CHAPTER_PHRASES
        ),
        blocked_segment_phrases=_split_phrases(
            os.getenv("CHAPTERWISE_BLOCKED_SEGMENT_PHRASES"), DEFAULT_BLOCKED_SEGMENT_PHRASES
        ),
    )


def build_model_client(settings: Settings, client=None) -> OpenAIModelClient:
    """OpenAI client for ``settings.model``; ``client`` replaces the SDK instance (tests)."""
    return OpenAIModelClient(settings.model, api_key=settings.openai_api_key, client=client)


def build_processor(
    settings: Settings, client=None, show_progress: bool = False
) -> ChapterMapReduceProcessor:
    """Map-reduce processor wired from settings, honouring the concurrency limit."""
    return ChapterMapReduceProcessor(
        build_model_client(settings, client=client),
        max_concurrent=settings.max_concurrent,
        show_progress=show_progress,
    )
