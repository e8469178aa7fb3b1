"""
chapterkit.extract - Full-audio and per-chapter extraction.

Pipeline Stages 3 and 4: transcode the whole downloaded container to one
audio file, then each chapter's time range to its own file. Chapters whose
file already exists are skipped; the full audio is always rewritten.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from chapterkit.exceptions import ChapterExtractionError, TranscodeError
from chapterkit.layout import OutputLayout
from chapterkit.logging import logger
from chapterkit.models import Chapter, ChapterResult
from chapterkit.progress import ProgressFactory, null_progress
from chapterkit.transcode import Transcoder
from chapterkit.utils import format_duration


def extract_full_audio(
    transcoder: Transcoder,
    source: Path,
    destination: Path,
    progress_factory: ProgressFactory = null_progress,
    log=logger,
) -> Path:
    """Transcode the entire source to destination.

    Raises:
        TranscodeError: If transcoding fails (logged before re-raising)
    """
    log.info("Extracting full audio to %s", destination.name)
    try:
        with progress_factory("Full audio") as sink:
            transcoder.transcode(source, destination, progress=sink)
    except TranscodeError as e:
        log.error("Full audio extraction failed: %s", e)
        raise
    log.info("Full audio extracted successfully")
    return destination


def extract_chapter(
    transcoder: Transcoder,
    source: Path,
    chapter: Chapter,
    index: int,
    layout: OutputLayout,
    progress_factory: ProgressFactory = null_progress,
    log=logger,
    destination: Path | None = None,
) -> ChapterResult:
    """Extract one chapter's audio, unless its file already exists.

    Args:
        transcoder: Transcoder to run
        source: Downloaded container file
        chapter: Chapter to extract
        index: 0-based position of the chapter in the video
        layout: Output layout the destination is derived from
        progress_factory: Creates the chapter's progress bar
        log: Logger for status lines
        destination: Output file; defaults to the layout path for the title

    Returns:
        ChapterResult with status "extracted", "skipped" or "failed"
    """
    if destination is None:
        destination = layout.chapter_audio_path(chapter.title)
    number = index + 1

    if destination.exists():
        log.info("Chapter %d: %s already exists, skipping", number, destination.name)
        return ChapterResult(index=index, chapter=chapter, path=destination, status="skipped")

    log.debug(
        "Chapter %d: %s to %s",
        number,
        format_duration(chapter.start_time),
        format_duration(chapter.end_time),
    )
    try:
        with progress_factory(f"Chapter {number}") as sink:
            transcoder.transcode(
                source,
                destination,
                start=chapter.start_time,
                duration=chapter.duration,
                progress=sink,
            )
    except TranscodeError as e:
        log.error("Chapter %d (%s) extraction failed: %s", number, chapter.title, e)
        return ChapterResult(
            index=index, chapter=chapter, path=destination, status="failed", error=str(e)
        )

    log.info("Chapter %d (%s) extracted successfully", number, chapter.title)
    return ChapterResult(index=index, chapter=chapter, path=destination, status="extracted")


def extract_chapters(
    transcoder: Transcoder,
    source: Path,
    chapters: Sequence[Chapter],
    layout: OutputLayout,
    policy: str = "isolate",
    progress_factory: ProgressFactory = null_progress,
    log=logger,
) -> list[ChapterResult]:
    """Extract chapters one at a time, in order.

    With policy "isolate" every chapter is attempted. With "abort" the first
    failure stops the loop and raises ChapterExtractionError carrying the
    results collected so far.
    """
    log.info("Chapters to extract: %d", len(chapters))
    destinations = layout.chapter_audio_paths([chapter.title for chapter in chapters])
    results: list[ChapterResult] = []
    for index, (chapter, destination) in enumerate(zip(chapters, destinations)):
        result = extract_chapter(
            transcoder,
            source,
            chapter,
            index,
            layout,
            progress_factory=progress_factory,
            log=log,
            destination=destination,
        )
        results.append(result)
        if result.status == "failed" and policy == "abort":
            remaining = len(chapters) - index - 1
            raise ChapterExtractionError(
                f"Chapter {result.number} failed, {remaining} remaining chapter(s) not attempted",
                results,
            )
    return results
