"""
Transcript and chapter sources.

The alignment pipeline only needs something with ``fetch(video_id)``; these are the
file- and API-backed implementations used by the CLI and by callers without their own.
"""

import json
import logging
import re
from pathlib import Path
from typing import Awaitable, Protocol, Union, runtime_checkable

import httpx

from .chapters import parse_description_chapters
from .errors import SourceFetchError
from .models import RawChapter, TranscriptSegment

logger = logging.getLogger("chapterwise")

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"


@runtime_checkable
class TranscriptSource(Protocol):
    def fetch(
        self, video_id: str
    ) -> Union[list[TranscriptSegment], Awaitable[list[TranscriptSegment]]]: ...


@runtime_checkable
class ChapterSource(Protocol):
    def fetch(self, video_id: str) -> Union[list[RawChapter], Awaitable[list[RawChapter]]]: ...


# HH:MM:SS,mmm --> HH:MM:SS,mmm (a "." millisecond separator is accepted too)
_SRT_TIMING_RE = re.compile(
    r"^(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})\s*-->\s*(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})"
)
_SRT_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")


def _srt_seconds(h: str, m: str, s: str, ms: str) -> float:
    return int(h) * 3600 + int(m) * 60 + int(s) + int(ms) / 1000.0


def parse_srt(path: str) -> list[TranscriptSegment]:
    """Parse an SRT file into transcript segments ordered by start time.

    Cue numbers are optional. A cue whose timing line cannot be read raises
    ``ValueError`` naming the block; cues without text are dropped.
    """
    with open(path, encoding="utf-8-sig") as f:
        raw = f.read().replace("\r\n", "\n")

    out: list[TranscriptSegment] = []
    for n, block in enumerate(_SRT_BLOCK_SPLIT_RE.split(raw.strip()), 1):
        lines = [ln.strip() for ln in block.splitlines() if ln.strip()]
        if lines and lines[0].isdigit():
            lines = lines[1:]
        if not lines:
            continue

        timing = _SRT_TIMING_RE.match(lines[0])
        if timing is None:
            raise ValueError(f"Malformed SRT timing in block {n} of {path}: {lines[0]!r}")
        start = _srt_seconds(*timing.group(1, 2, 3, 4))
        end = _srt_seconds(*timing.group(5, 6, 7, 8))
        if end < start:
            raise ValueError(f"SRT block {n} of {path} ends before it starts: {lines[0]!r}")

        text = " ".join(lines[1:])
        if not text:
            logger.debug(f"Skipping empty SRT cue {n} in {path}")
            continue
        out.append(TranscriptSegment(start_seconds=start, end_seconds=end, text=text))

    out.sort(key=lambda s: s.start_seconds)
    return out


def load_segments_json(path: str) -> list[TranscriptSegment]:
    """Load segments from JSON. Fields: start,end,text (or start_seconds,end_seconds,text)."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("segments", [])

    out = []
    for item in data:
        start = item.get("start_seconds", item.get("start"))
        end = item.get("end_seconds", item.get("end", start))
        if start is None:
            raise ValueError(f"Segment without start time in {path}: {item!r}")
        out.append(TranscriptSegment(start_seconds=float(start), end_seconds=float(end), text=str(item.get("text", ""))))
    out.sort(key=lambda s: s.start_seconds)
    return out


def load_chapters_json(path: str) -> list[RawChapter]:
    """Load chapters from JSON: [{title, start_time|startTime, end_time|endTime|null}]."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("chapters", [])

    out = []
    for item in data:
        start = item.get("start_time", item.get("startTime", 0.0))
        end = item.get("end_time", item.get("endTime"))
        out.append(
            RawChapter(
                title=str(item["title"]),
                start_time=float(start),
                end_time=None if end is None else float(end),
            )
        )
    return out


class FileTranscriptSource:
    """Reads ``<video_id>.json`` or ``<video_id>.srt`` from a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def fetch(self, video_id: str) -> list[TranscriptSegment]:
        json_path = self.directory / f"{video_id}.json"
        srt_path = self.directory / f"{video_id}.srt"
        try:
            if json_path.exists():
                return load_segments_json(str(json_path))
            if srt_path.exists():
                return parse_srt(str(srt_path))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise SourceFetchError(video_id, f"Could not read transcript: {e}") from e
        raise SourceFetchError(video_id, f"No transcript found in {self.directory}")


class FileChapterSource:
    """Reads ``<video_id>.chapters.json`` or ``<video_id>.description.txt`` from a directory.

    A missing file means the video has no chapters.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def fetch(self, video_id: str) -> list[RawChapter]:
        json_path = self.directory / f"{video_id}.chapters.json"
        desc_path = self.directory / f"{video_id}.description.txt"
        try:
            if json_path.exists():
                return load_chapters_json(str(json_path))
            if desc_path.exists():
                return parse_description_chapters(desc_path.read_text(encoding="utf-8"))
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise SourceFetchError(video_id, f"Could not read chapters: {e}") from e
        return []


class YouTubeChapterSource:
    """Chapters parsed from the video description via the YouTube Data API v3."""

    def __init__(self, api_key: Union[str, None], timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    def fetch(self, video_id: str) -> list[RawChapter]:
        if not self.api_key:
            logger.error(f"YOUTUBE_API_KEY is not set, no chapters for {video_id}")
            return []

        try:
            r = httpx.get(
                YOUTUBE_VIDEOS_URL,
                params={"part": "snippet", "id": video_id, "key": self.api_key},
                timeout=self.timeout,
            )
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SourceFetchError(video_id, f"YouTube API request failed: {e}") from e

        items = data.get("items") or []
        if not items:
            return []
        description = items[0].get("snippet", {}).get("description", "")
        chapters = parse_description_chapters(description)
        logger.info(f"Parsed {len(chapters)} chapters from description of {video_id}")
        return chapters
