"""Tests for chapterkit.logging module."""

from __future__ import annotations

import logging
import re

import pytest

from chapterkit.logging import DATE_FORMAT, LOG_FORMAT, LOG_TAG, configure_logging, logger


@pytest.fixture
def restore_level():
    level = logger.level
    yield
    logger.setLevel(level)


class TestLogFormat:
    def test_tag(self) -> None:
        assert LOG_TAG == "YoutubeChapterExtractor"

    def test_formatted_line(self) -> None:
        record = logging.LogRecord(
            "chapterkit", logging.INFO, __file__, 1, "Video downloaded as: %s", ("Talk.mkv",), None
        )
        line = logging.Formatter(LOG_FORMAT, DATE_FORMAT).format(record)
        assert re.fullmatch(
            r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[YoutubeChapterExtractor\] "
            r"INFO: Video downloaded as: Talk\.mkv",
            line,
        )


class TestConfigureLogging:
    def test_default_is_info(self, restore_level) -> None:
        configure_logging()
        assert logger.level == logging.INFO

    def test_verbose_is_debug(self, restore_level) -> None:
        configure_logging(verbose=True)
        assert logger.level == logging.DEBUG
