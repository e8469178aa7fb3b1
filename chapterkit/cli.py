"""
chapterkit.cli - Typer CLI entry point.

Interactive loop: ask for a video URL, run the pipeline, show a summary,
then ask whether to process another video.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chapterkit import __version__
from chapterkit.config import ChapterKitConfig, load_config
from chapterkit.exceptions import ConfigError
from chapterkit.fetch import MediaFetcher, YtDlpFetcher
from chapterkit.logging import configure_logging, logger
from chapterkit.models import PipelineResult
from chapterkit.pipeline import process_video
from chapterkit.progress import ProgressFactory, progress_bar
from chapterkit.transcode import FFmpegTranscoder, Transcoder
from chapterkit.utils import format_duration, format_size

app = typer.Typer(
    name="chapterkit",
    help="Download a video and extract its full audio plus one MP3 per chapter.",
    add_completion=False,
)
console = Console()

URL_PROMPT = "Video URL"


def should_continue(answer: str, affirmative: str = "oui") -> bool:
    """Only the affirmative token (case-insensitive) continues the loop."""
    return answer.strip().lower() == affirmative.strip().lower()


def print_summary(result: PipelineResult) -> None:
    """Print the outcome of one video."""
    if result.metadata is None:
        console.print(f"[red]✗[/red] Failed: {escape(str(result.error))}")
        return

    if result.chapters:
        table = Table(title=escape(result.metadata.title))
        table.add_column("#", style="dim")
        table.add_column("Chapter", style="cyan")
        table.add_column("Range", style="green")
        table.add_column("Size", style="green")
        table.add_column("Status", style="yellow")

        status_labels = {
            "extracted": "[green]✓ Extracted[/green]",
            "skipped": "[dim]Skipped (already exists)[/dim]",
        }
        for chapter_result in result.chapters:
            chapter = chapter_result.chapter
            status = status_labels.get(
                chapter_result.status, f"[red]Error: {escape(str(chapter_result.error))}[/red]"
            )
            table.add_row(
                str(chapter_result.number),
                escape(chapter.title),
                f"{format_duration(chapter.start_time)}-{format_duration(chapter.end_time)}",
                format_size(chapter_result.path),
                status,
            )
        console.print(table)

    if result.success:
        console.print(
            f"[green]✓[/green] {escape(result.metadata.title)}: "
            f"{result.count('extracted')} chapter(s) extracted, "
            f"{result.count('skipped')} skipped"
        )
        if result.audio_path:
            console.print(f"[dim]  {result.audio_path}[/dim]")
    else:
        message = result.error or "some chapters failed"
        console.print(f"[red]✗[/red] {escape(result.metadata.title)}: {escape(message)}")


def run_interactive(
    config: ChapterKitConfig,
    fetcher: MediaFetcher,
    transcoder: Transcoder,
    progress_factory: ProgressFactory,
    ask: Callable[..., str] = typer.prompt,
) -> list[PipelineResult]:
    """Prompt for URLs until the user declines to continue."""
    results: list[PipelineResult] = []
    while True:
        url = ask(URL_PROMPT).strip()
        result = process_video(
            url,
            config,
            fetcher,
            transcoder,
            progress_factory=progress_factory,
            log=logger,
        )
        print_summary(result)
        results.append(result)

        answer = ask(
            f"Extract another video? ({config.affirmative}/no)",
            default="",
            show_default=False,
        )
        if not should_continue(answer, config.affirmative):
            break

    logger.info("Done.")
    return results


def version_callback(value: bool) -> None:
    if value:
        console.print(f"chapterkit {__version__}")
        raise typer.Exit()


@app.command()
def main(
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to chapterkit.yaml (default: ./chapterkit.yaml if present)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Extract full audio and per-chapter audio from videos, one URL at a time."""
    configure_logging(verbose)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    run_interactive(
        config,
        YtDlpFetcher(config, log=logger),
        FFmpegTranscoder(config, log=logger),
        partial(progress_bar, console=console),
    )
