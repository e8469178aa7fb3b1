"""
chapterkit.layout - Output directory layout.

Every video gets one directory under the output root, named after its
title:

    output/<title>/<title>.<container-ext>   downloaded media
    output/<title>/<title>.mp3               full audio
    output/<title>/<chapter title>.mp3       one per chapter

Chapter stems that clash with the full audio or an earlier chapter get a
numeric suffix.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

CHAPTER_SEPARATOR = " - "

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(name: str) -> str:
    """Make a title usable as a single path component on common filesystems."""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip(" .")
    return cleaned or "untitled"


def chapter_filename_stem(title: str) -> str:
    """Chapter file stem: the first " - " separator removed, then sanitized."""
    return sanitize_filename(title.replace(CHAPTER_SEPARATOR, "", 1))


class OutputLayout:
    """Paths for one video's output files."""

    def __init__(
        self,
        root: Path,
        title: str,
        container_ext: str = "mkv",
        audio_ext: str = "mp3",
    ) -> None:
        self.root = root
        self.title = title
        self.stem = sanitize_filename(title)
        self.directory = root / self.stem
        self.container_ext = container_ext
        self.audio_ext = audio_ext

    @property
    def video_path(self) -> Path:
        return self.directory / f"{self.stem}.{self.container_ext}"

    @property
    def audio_path(self) -> Path:
        return self.directory / f"{self.stem}.{self.audio_ext}"

    def chapter_audio_path(self, chapter_title: str) -> Path:
        return self.chapter_audio_paths([chapter_title])[0]

    def chapter_audio_paths(self, chapter_titles: Sequence[str]) -> list[Path]:
        """Chapter file paths in order, distinct from each other and the full audio.

        A stem already taken (compared case-insensitively) gets " (2)",
        " (3)", ... appended. The result depends only on the titles, so a rerun
        maps every chapter to the same file.
        """
        taken = {self.stem.casefold()}
        paths = []
        for title in chapter_titles:
            base = chapter_filename_stem(title)
            stem = base
            n = 2
            while stem.casefold() in taken:
                stem = f"{base} ({n})"
                n += 1
            taken.add(stem.casefold())
            paths.append(self.directory / f"{stem}.{self.audio_ext}")
        return paths

    def ensure_directory(self) -> bool:
        """Create the video directory (recursively). Returns True if it was created."""
        if self.directory.is_dir():
            return False
        self.directory.mkdir(parents=True, exist_ok=True)
        return True
