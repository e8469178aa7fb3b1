"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from chapterkit.config import ChapterKitConfig
from chapterkit.exceptions import MetadataError, TranscodeError
from chapterkit.models import VideoMetadata


class FakeFetcher:
    """MediaFetcher returning canned metadata and writing a dummy container."""

    def __init__(self, metadata: VideoMetadata | None = None) -> None:
        self.metadata = metadata
        self.metadata_calls: list[str] = []
        self.downloads: list[Path] = []

    def fetch_metadata(self, url: str) -> VideoMetadata:
        self.metadata_calls.append(url)
        if self.metadata is None:
            raise MetadataError(f"Could not fetch video information: {url}")
        return self.metadata

    def download(self, url: str, destination: Path, progress) -> Path:
        assert destination.parent.is_dir()
        destination.write_bytes(b"fake container")
        progress.update(100.0)
        self.downloads.append(destination)
        return destination


class FakeTranscoder:
    """Transcoder recording its calls; fails for destinations named in fail_on."""

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self.fail_on: set[str] = set()

    def transcode(self, source, destination, start=None, duration=None, progress=None) -> None:
        self.calls.append(
            {
                "source": source,
                "destination": destination,
                "start": start,
                "duration": duration,
            }
        )
        if destination.name in self.fail_on:
            raise TranscodeError(f"FFmpeg failed for {destination.name}: boom")
        destination.write_bytes(b"fake mp3")
        if progress is not None:
            progress.update(100.0)


@pytest.fixture
def sample_info() -> dict:
    """Return a yt-dlp style info dict for a two-chapter video."""
    return {
        "id": "abc123",
        "title": "Talk",
        "duration": 90,
        "webpage_url": "https://www.youtube.com/watch?v=abc123",
        "chapters": [
            {"start_time": 0.0, "end_time": 30.0, "title": "Intro"},
            {"start_time": 30.0, "end_time": 90.0, "title": "Body"},
        ],
    }


@pytest.fixture
def talk_metadata(sample_info: dict) -> VideoMetadata:
    return VideoMetadata.from_info(sample_info)


@pytest.fixture
def config(tmp_path: Path) -> ChapterKitConfig:
    return ChapterKitConfig(output_dir=tmp_path / "output")


@pytest.fixture
def fetcher(talk_metadata: VideoMetadata) -> FakeFetcher:
    return FakeFetcher(talk_metadata)


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def fetcher_cls() -> type[FakeFetcher]:
    return FakeFetcher
