"""
Command-line interface for transcript/chapter alignment.
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .config import load_settings
from .pipeline import compute_alignment
from .sources import FileChapterSource, FileTranscriptSource, YouTubeChapterSource

logger = logging.getLogger("chapterwise")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(prog="chapterwise", description="Chapter-scoped transcript alignment")
    sub = ap.add_subparsers(dest="command", required=True)

    align = sub.add_parser("align", help="Align a transcript with its chapters and print JSON")
    align.add_argument("video_id")
    align.add_argument(
        "--data-dir",
        default=".",
        help="Directory with <id>.json|.srt transcript and <id>.chapters.json|.description.txt",
    )
    align.add_argument(
        "--youtube-chapters",
        action="store_true",
        help="Read chapters from the YouTube description (needs YOUTUBE_API_KEY)",
    )
    align.add_argument("--overlap", type=float, default=None, help="Overlap offset in seconds")
    align.add_argument(
        "--synthesize-chapters",
        action="store_true",
        help="Split the transcript into artificial chapters when the video has none",
    )
    align.add_argument("--env-file", default=None)
    align.add_argument("--output", "-o", default=None, help="Write JSON here instead of stdout")
    align.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    settings = load_settings(args.env_file)

    overlap = settings.overlap_offset_seconds if args.overlap is None else args.overlap
    if overlap < 0:
        logger.error("--overlap must be >= 0")
        return 2

    transcripts = FileTranscriptSource(args.data_dir)
    if args.youtube_chapters:
        chapters = YouTubeChapterSource(settings.youtube_api_key)
    else:
        chapters = FileChapterSource(args.data_dir)

    result = compute_alignment(
        args.video_id,
        transcripts,
        chapters,
        overlap_offset_seconds=overlap,
        blocked_chapter_phrases=settings.blocked_chapter_phrases,
        blocked_segment_phrases=settings.blocked_segment_phrases,
        synthesize_chapters=args.synthesize_chapters,
    )

    payload = json.dumps(result.to_dict(), ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(payload)
        logger.info(f"Alignment written to {args.output}")
    else:
        sys.stdout.write(payload + "\n")

    if result.error:
        logger.error(f"Alignment failed: {result.error}")
        return 1
    logger.info(
        f"{result.metadata.chapter_count} chapters, {result.metadata.transcript_item_count} transcript items"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
