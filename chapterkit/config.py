"""
chapterkit.config - YAML config loading and validation.

Handles loading chapterkit.yaml from the working directory (or an explicit
path) and validating every parameter. Missing files fall back to defaults.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from chapterkit.exceptions import ConfigError

CONFIG_FILENAME = "chapterkit.yaml"


class ChapterKitConfig(BaseModel):
    """Resolved configuration for a chapterkit run."""

    output_dir: Path = Path("output")

    max_height: int = Field(default=1080, gt=0)
    container_ext: str = "mkv"

    audio_codec: str = "libmp3lame"
    audio_bitrate: str = "192k"
    audio_format: str = "mp3"
    audio_ext: str = "mp3"

    affirmative: str = "oui"
    chapter_failure: str = "isolate"

    no_check_certificates: bool = True
    referer: str | None = "youtube.com"
    user_agent: str | None = "googlebot"

    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    @field_validator("chapter_failure")
    @classmethod
    def validate_chapter_failure(cls, v: str) -> str:
        valid = {"isolate", "abort"}
        if v not in valid:
            raise ValueError(f"chapter_failure must be one of: {valid}")
        return v

    @field_validator("container_ext", "audio_ext")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        v = v.lstrip(".")
        if not v or not v.isalnum():
            raise ValueError(f"Invalid file extension: {v!r}")
        return v

    @field_validator("audio_bitrate")
    @classmethod
    def validate_bitrate(cls, v: str) -> str:
        if not v.rstrip("kK").isdigit():
            raise ValueError(f"audio_bitrate must look like '192k', got {v!r}")
        return v

    @field_validator("affirmative")
    @classmethod
    def validate_affirmative(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("affirmative must not be empty")
        return v

    @property
    def format_selector(self) -> str:
        """yt-dlp format string capped at max_height."""
        h = self.max_height
        return f"bestvideo[height<={h}]+bestaudio/best[height<={h}]"

    @property
    def http_headers(self) -> dict[str, str]:
        headers = {}
        if self.referer:
            headers["Referer"] = self.referer
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers


def find_config(start: Path | None = None) -> Path | None:
    """Return chapterkit.yaml in the given (or current) directory, if present."""
    directory = start or Path.cwd()
    config_file = directory / CONFIG_FILENAME
    if config_file.exists():
        return config_file
    return None


def load_config(path: Path | None = None) -> ChapterKitConfig:
    """Load and validate configuration.

    Args:
        path: Explicit config file. If None, chapterkit.yaml in the current
            directory is used when it exists, otherwise defaults.

    Returns:
        Validated ChapterKitConfig

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if path is None:
        path = find_config()
        if path is None:
            return ChapterKitConfig()
    elif not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return ChapterKitConfig(**raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

