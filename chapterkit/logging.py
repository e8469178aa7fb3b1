"""
chapterkit.logging - Centralized logging configuration.

Log lines carry a timestamp and a fixed tag so they stand out from the
progress bars and prompts sharing the terminal.
"""

from __future__ import annotations

import logging

LOG_TAG = "YoutubeChapterExtractor"
LOG_FORMAT = f"%(asctime)s [{LOG_TAG}] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("chapterkit")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the chapterkit package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise INFO level
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    logger.setLevel(level)
