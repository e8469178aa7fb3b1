"""
chapterkit.exceptions - Custom exception classes.

All chapterkit-specific exceptions inherit from ChapterKitError.
"""

from __future__ import annotations

from typing import Any


class ChapterKitError(Exception):
    """Base exception for all chapterkit errors."""

    pass


class ConfigError(ChapterKitError):
    """Configuration loading or validation error."""

    pass


class MetadataError(ChapterKitError):
    """Video metadata could not be fetched or parsed."""

    pass


class DownloadError(ChapterKitError):
    """Media download error."""

    pass


class TranscodeError(ChapterKitError):
    """Audio transcoding error."""

    pass


class ChapterExtractionError(ChapterKitError):
    """A chapter failed and the failure policy stopped the remaining chapters."""

    def __init__(self, message: str, results: list[Any] | None = None):
        self.results = results or []
        super().__init__(message)


class DependencyError(ChapterKitError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
