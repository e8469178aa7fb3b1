"""
chapterkit.transcode - FFmpeg audio transcoding.

Converts a downloaded container (or a trimmed slice of it) to compressed
audio. Progress is read from ffmpeg's machine-readable `-progress` output
and reported as a percentage of the expected duration.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Protocol

from chapterkit.config import ChapterKitConfig
from chapterkit.exceptions import DependencyError, TranscodeError
from chapterkit.logging import logger
from chapterkit.progress import NullProgressSink, ProgressSink

FFMPEG_INSTALL_HINT = "Install FFmpeg: https://ffmpeg.org/download.html"


class Transcoder(Protocol):
    """Transcodes a media file (or a slice of it) to audio."""

    def transcode(
        self,
        source: Path,
        destination: Path,
        start: float | None = None,
        duration: float | None = None,
        progress: ProgressSink | None = None,
    ) -> None: ...


def parse_progress_line(line: str, total_seconds: float | None) -> float | None:
    """Percent complete from one line of ffmpeg `-progress` output.

    Args:
        line: A `key=value` line
        total_seconds: Expected output duration; None disables time-based
            progress

    Returns:
        Percent (0-100), or None if the line carries no progress
    """
    key, sep, value = line.strip().partition("=")
    if not sep:
        return None
    if key == "progress" and value == "end":
        return 100.0
    # out_time_ms is in microseconds as well, despite the name
    if key not in ("out_time_us", "out_time_ms") or not total_seconds:
        return None
    try:
        elapsed = int(value) / 1_000_000
    except ValueError:
        return None
    return max(0.0, min(100.0, elapsed / total_seconds * 100))


class FFmpegTranscoder:
    """Transcoder backed by the ffmpeg and ffprobe binaries."""

    def __init__(self, config: ChapterKitConfig, log=logger) -> None:
        self.config = config
        self.log = log

    def build_command(
        self,
        source: Path,
        destination: Path,
        start: float | None = None,
        duration: float | None = None,
    ) -> list[str]:
        cmd = [
            self.config.ffmpeg_path,
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-nostats",
            "-progress",
            "pipe:1",
        ]
        if start is not None:
            cmd += ["-ss", f"{start:.3f}"]
        cmd += ["-i", str(source)]
        if duration is not None:
            cmd += ["-t", f"{duration:.3f}"]
        cmd += [
            "-vn",
            "-acodec",
            self.config.audio_codec,
            "-b:a",
            self.config.audio_bitrate,
            "-f",
            self.config.audio_format,
            str(destination),
        ]
        return cmd

    def probe_duration(self, path: Path) -> float | None:
        """Container duration in seconds via ffprobe, or None if unknown."""
        cmd = [
            self.config.ffprobe_path,
            "-v",
            "quiet",
            "-print_format",
            "json",
            "-show_format",
            str(path),
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise DependencyError("ffprobe", "not found on PATH", FFMPEG_INSTALL_HINT) from e
        if result.returncode != 0:
            self.log.debug("ffprobe failed for %s: %s", path, result.stderr.strip())
            return None
        try:
            data = json.loads(result.stdout)
            return float(data["format"]["duration"])
        except (ValueError, KeyError, TypeError):
            return None

    def transcode(
        self,
        source: Path,
        destination: Path,
        start: float | None = None,
        duration: float | None = None,
        progress: ProgressSink | None = None,
    ) -> None:
        """Transcode source (optionally trimmed) to destination, overwriting it.

        Raises:
            TranscodeError: If the source is missing or ffmpeg fails
            DependencyError: If ffmpeg is not installed
        """
        if not source.exists():
            raise TranscodeError(f"Source file not found: {source}")

        sink = progress or NullProgressSink()
        total = duration if duration is not None else self.probe_duration(source)
        if total is not None and start is not None and duration is None:
            total = max(total - start, 0.0)

        cmd = self.build_command(source, destination, start, duration)
        self.log.debug("Running: %s", " ".join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except FileNotFoundError as e:
            raise DependencyError("ffmpeg", "not found on PATH", FFMPEG_INSTALL_HINT) from e

        messages: list[str] = []
        with proc:
            for line in proc.stdout:
                percent = parse_progress_line(line, total)
                if percent is not None:
                    sink.update(percent)
                elif "=" not in line and line.strip():
                    messages.append(line.strip())

        if proc.returncode != 0:
            detail = "\n".join(messages[-10:]) or f"exit code {proc.returncode}"
            raise TranscodeError(f"FFmpeg failed for {destination.name}: {detail}")
