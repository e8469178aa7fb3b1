"""
chapterkit.fetch - Video metadata fetching and media download.

Pipeline Stages 1 and 2: query the video source for title, id and chapters,
then download the best video+audio streams up to a resolution cap. Both go
through yt-dlp; the MediaFetcher protocol lets tests swap in a fake.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

import yt_dlp
from yt_dlp.utils import DownloadError as YtDlpDownloadError

from chapterkit.config import ChapterKitConfig
from chapterkit.exceptions import DownloadError, MetadataError
from chapterkit.logging import logger
from chapterkit.models import VideoMetadata
from chapterkit.progress import ProgressSink


class MediaFetcher(Protocol):
    """Fetches video metadata and downloads media files."""

    def fetch_metadata(self, url: str) -> VideoMetadata: ...

    def download(self, url: str, destination: Path, progress: ProgressSink) -> Path: ...


def download_percent(status: dict[str, Any]) -> float | None:
    """Percent complete from a yt-dlp progress hook payload, if computable."""
    if status.get("status") == "finished":
        return 100.0
    if status.get("status") != "downloading":
        return None
    downloaded = status.get("downloaded_bytes") or 0
    total = status.get("total_bytes") or status.get("total_bytes_estimate")
    if not total:
        return None
    return downloaded / total * 100


class YtDlpFetcher:
    """MediaFetcher backed by the yt-dlp library."""

    def __init__(self, config: ChapterKitConfig, log=logger) -> None:
        self.config = config
        self.log = log

    def base_options(self) -> dict[str, Any]:
        """Options shared by metadata and download calls."""
        return {
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "noplaylist": True,
            "nocheckcertificate": self.config.no_check_certificates,
            "prefer_free_formats": True,
            "http_headers": self.config.http_headers,
        }

    def download_options(self, destination: Path, progress: ProgressSink) -> dict[str, Any]:
        def hook(status: dict[str, Any]) -> None:
            percent = download_percent(status)
            if percent is not None:
                progress.update(percent)

        # the title part is literal; only the extension is a template field
        literal = str(destination.with_suffix("")).replace("%", "%%")
        opts = self.base_options()
        opts.update(
            {
                "format": self.config.format_selector,
                "outtmpl": literal + ".%(ext)s",
                "merge_output_format": self.config.container_ext,
                "overwrites": True,
                "progress_hooks": [hook],
            }
        )
        return opts

    def fetch_metadata(self, url: str) -> VideoMetadata:
        """Fetch title, id and chapters without downloading.

        Raises:
            MetadataError: If yt-dlp fails or the response is unusable
        """
        try:
            with yt_dlp.YoutubeDL(self.base_options()) as ydl:
                info = ydl.extract_info(url, download=False)
        except YtDlpDownloadError as e:
            raise MetadataError(f"Could not fetch video information: {e}") from e

        if not info:
            raise MetadataError(f"No video information returned for {url}")

        try:
            return VideoMetadata.from_info(info, log=self.log)
        except (KeyError, TypeError, ValueError) as e:
            raise MetadataError(f"Unexpected video information for {url}: {e}") from e

    def download(self, url: str, destination: Path, progress: ProgressSink) -> Path:
        """Download the media to destination, overwriting any existing file.

        Returns:
            Path of the file written (the container extension is decided by
            the merge step, so it is read back from yt-dlp)

        Raises:
            DownloadError: If yt-dlp fails
        """
        opts = self.download_options(destination, progress)
        self.log.debug("Downloading %s with format %s", url, opts["format"])
        try:
            with yt_dlp.YoutubeDL(opts) as ydl:
                info = ydl.extract_info(url, download=True)
        except YtDlpDownloadError as e:
            raise DownloadError(f"Download failed: {e}") from e

        return _downloaded_path(info, destination)


def _downloaded_path(info: dict[str, Any] | None, fallback: Path) -> Path:
    if info:
        for item in info.get("requested_downloads") or []:
            filepath = item.get("filepath")
            if filepath:
                return Path(filepath)
    return fallback
