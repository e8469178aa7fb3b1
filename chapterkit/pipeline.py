"""
chapterkit.pipeline - Per-video orchestration.

Runs the four stages for one URL: fetch metadata, download media, extract
full audio, extract chapters. Any failure is logged and recorded on the
returned PipelineResult; files already written are left in place.
"""

from __future__ import annotations

from chapterkit.config import ChapterKitConfig
from chapterkit.exceptions import ChapterExtractionError, ChapterKitError
from chapterkit.extract import extract_chapters, extract_full_audio
from chapterkit.fetch import MediaFetcher
from chapterkit.layout import OutputLayout
from chapterkit.logging import logger
from chapterkit.models import PipelineResult
from chapterkit.progress import ProgressFactory, null_progress
from chapterkit.transcode import Transcoder


def process_video(
    url: str,
    config: ChapterKitConfig,
    fetcher: MediaFetcher,
    transcoder: Transcoder,
    progress_factory: ProgressFactory = null_progress,
    log=logger,
) -> PipelineResult:
    """Process one video URL end to end.

    Args:
        url: Video URL as entered by the user
        config: Resolved configuration
        fetcher: Metadata fetcher and downloader
        transcoder: Audio transcoder
        progress_factory: Creates one progress bar per stage
        log: Logger for status lines

    Returns:
        PipelineResult; `error` is set if a stage failed
    """
    result = PipelineResult(url=url)
    log.info("Starting download from: %s", url)

    try:
        metadata = fetcher.fetch_metadata(url)
        result.metadata = metadata
        log.info("Video information retrieved, ID: %s", metadata.id)

        layout = OutputLayout(
            config.output_dir,
            metadata.title,
            container_ext=config.container_ext,
            audio_ext=config.audio_ext,
        )
        if layout.ensure_directory():
            log.info("Created output directory: %s", layout.directory)

        with progress_factory("Download") as sink:
            video_path = fetcher.download(url, layout.video_path, sink)
        result.video_path = video_path
        log.info("Video downloaded as: %s", video_path)

        result.audio_path = extract_full_audio(
            transcoder,
            video_path,
            layout.audio_path,
            progress_factory=progress_factory,
            log=log,
        )

        if metadata.chapters:
            result.chapters = extract_chapters(
                transcoder,
                video_path,
                metadata.chapters,
                layout,
                policy=config.chapter_failure,
                progress_factory=progress_factory,
                log=log,
            )
    except ChapterExtractionError as e:
        result.chapters = e.results
        result.error = str(e)
        log.error("Chapter extraction stopped: %s", e)
    except ChapterKitError as e:
        result.error = str(e)
        log.error("Video processing failed: %s", e)
    except Exception as e:
        result.error = f"Unexpected error: {e}"
        log.exception("Video processing failed with an unexpected error")

    return result
