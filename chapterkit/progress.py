"""
chapterkit.progress - Progress reporting.

Downloads and transcodes report percent-complete updates to a ProgressSink.
The CLI renders them as rich progress bars; tests and quiet runs use the
null sink.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)


class ProgressSink(Protocol):
    """Receives percent-complete updates (0-100)."""

    def update(self, percent: float) -> None: ...


ProgressFactory = Callable[[str], AbstractContextManager[ProgressSink]]


def clamp_percent(percent: float) -> float:
    return max(0.0, min(100.0, percent))


class NullProgressSink:
    """Discards updates but remembers the last one."""

    def __init__(self) -> None:
        self.last: float | None = None

    def update(self, percent: float) -> None:
        self.last = clamp_percent(percent)


class RichProgressSink:
    """Forwards updates to one task of a rich Progress display."""

    def __init__(self, progress: Progress, task_id) -> None:
        self.progress = progress
        self.task_id = task_id

    def update(self, percent: float) -> None:
        self.progress.update(self.task_id, completed=clamp_percent(percent))


@contextmanager
def progress_bar(description: str, console: Console | None = None) -> Iterator[ProgressSink]:
    """Show a progress bar for the duration of the block."""
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=40),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    ) as progress:
        task_id = progress.add_task(description, total=100)
        yield RichProgressSink(progress, task_id)


@contextmanager
def null_progress(description: str) -> Iterator[ProgressSink]:
    yield NullProgressSink()
