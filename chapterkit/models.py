"""
chapterkit.models - Video metadata and pipeline result types.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chapterkit.logging import logger

ChapterStatus = Literal["extracted", "skipped", "failed"]


class Chapter(BaseModel):
    """A named time range within a source video."""

    model_config = ConfigDict(frozen=True)

    start_time: float = Field(ge=0.0)
    end_time: float
    title: str

    @model_validator(mode="after")
    def validate_range(self) -> Chapter:
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Chapter {self.title!r} ends at {self.end_time} "
                f"which is not after its start {self.start_time}"
            )
        return self

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time


class VideoMetadata(BaseModel):
    """Title, id and chapters of a video, fetched once per run."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    chapters: tuple[Chapter, ...] = ()
    duration: float | None = None
    webpage_url: str | None = None

    @classmethod
    def from_info(cls, info: dict[str, Any], log=logger) -> VideoMetadata:
        """Build metadata from a yt-dlp info dict.

        Chapters with missing or inverted timestamps are dropped with a
        warning. A chapter lacking end_time ends where the next one starts,
        or at the video duration for the last chapter.

        Raises:
            KeyError: If id or title is missing
        """
        duration = info.get("duration")
        raw_chapters = info.get("chapters") or []

        chapters: list[Chapter] = []
        for i, raw in enumerate(raw_chapters):
            title = raw.get("title") or f"Chapter {i + 1}"
            start = raw.get("start_time")
            end = raw.get("end_time")
            if end is None:
                if i + 1 < len(raw_chapters):
                    end = raw_chapters[i + 1].get("start_time")
                else:
                    end = duration
            if start is None or end is None:
                log.warning("Skipping chapter %d (%s): missing timestamps", i + 1, title)
                continue
            try:
                chapters.append(Chapter(start_time=start, end_time=end, title=title))
            except ValueError as e:
                log.warning("Skipping chapter %d (%s): %s", i + 1, title, e)

        return cls(
            id=str(info["id"]),
            title=str(info["title"]),
            chapters=tuple(chapters),
            duration=float(duration) if duration is not None else None,
            webpage_url=info.get("webpage_url"),
        )


class ChapterResult(BaseModel):
    """Outcome of extracting one chapter."""

    index: int
    chapter: Chapter
    path: Path
    status: ChapterStatus
    error: str | None = None

    @property
    def number(self) -> int:
        return self.index + 1


class PipelineResult(BaseModel):
    """Outcome of processing one video URL."""

    url: str
    metadata: VideoMetadata | None = None
    video_path: Path | None = None
    audio_path: Path | None = None
    chapters: list[ChapterResult] = Field(default_factory=list)
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and all(c.status != "failed" for c in self.chapters)

    def count(self, status: ChapterStatus) -> int:
        return sum(1 for c in self.chapters if c.status == status)
