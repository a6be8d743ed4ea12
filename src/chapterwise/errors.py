"""
Exceptions raised by the alignment and map-reduce layers.
"""


class ChapterwiseError(Exception):
    """Base class for chapterwise errors."""


class SourceFetchError(ChapterwiseError):
    """Transcript or chapter retrieval failed."""

    def __init__(self, video_id: str, message: str):
        super().__init__(f"{message} (video {video_id})")
        self.video_id = video_id


class ChapterMapError(ChapterwiseError):
    """A single map-phase call failed. Logged and absorbed, never raised to callers."""

    def __init__(self, chapter_title: str, cause: BaseException):
        super().__init__(f"Map call failed for chapter {chapter_title!r}: {cause}")
        self.chapter_title = chapter_title


class ReduceError(ChapterwiseError):
    """The reduce call failed; the whole map-reduce run fails with it."""


class ReduceParseError(ReduceError):
    """The reduce call returned output that could not be parsed as JSON."""


class ResponseParseError(ChapterwiseError, ValueError):
    """A language model response could not be parsed as JSON."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class UnknownModelError(ChapterwiseError, KeyError):
    """No pricing or definition exists for the requested model id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown model"
