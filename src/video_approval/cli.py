"""Interactive entry point: batch mode or single YouTube video mode."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from . import tracing
from .analysis import VideoAnalyzer
from .batch import run_batch
from .client import GeminiClient
from .config import AppConfig
from .errors import VideoApprovalError, categorize_error
from .models.verdict import CHECK_LABELS, AnalysisVerdict
from .sources.youtube import fetch_remote_video

logger = logging.getLogger(__name__)

MENU = """\
Video Analysis Tool
=====================

Choose an option:
1. Process all available videos in the videos folder (generates CSV)
2. Download and analyze a single YouTube video
3. Exit
"""

DOWNLOAD_HINTS = (
    "Make sure the YouTube URL is valid",
    "Check if the video is available in your region",
    "Try updating yt-dlp: pip install -U yt-dlp",
)


_LOG_LEVELS = {-1: logging.WARNING, 0: logging.INFO}


def _configure_logging(verbosity: int) -> None:
    """Send ``video_approval`` records to a RichHandler on stderr.

    ``-q`` keeps warnings only, the default shows per-video progress, and any
    ``-v`` adds debug output (raw model replies, download percentages) with
    the emitting source line. Invoking twice reuses the handler.
    """
    level = _LOG_LEVELS.get(verbosity, logging.DEBUG)
    package_logger = logging.getLogger("video_approval")
    package_logger.setLevel(level)

    handler = next(
        (h for h in package_logger.handlers if isinstance(h, RichHandler)), None
    )
    if handler is None:
        handler = RichHandler(markup=False, rich_tracebacks=True, show_path=verbosity > 0)
        package_logger.addHandler(handler)
    handler.setLevel(level)


def format_verdict(verdict: AnalysisVerdict) -> str:
    """Human-readable rendering of one verdict for the console."""
    lines = ["", "=== ANALYSIS RESULT ===", f"Summary: {verdict.summary or 'N/A'}", "", "Checks:"]
    for field, label in CHECK_LABELS:
        mark = "✓" if getattr(verdict.checks, field) else "✗"
        lines.append(f"- {label}: {mark}")
    lines.append("")
    lines.append(f"Final Verdict: {'APPROVED ✓' if verdict.approved else 'REJECTED ✗'}")
    if verdict.reason:
        lines.append(f"Reason: {verdict.reason}")
    if verdict.raw_response:
        lines.append(f"Raw response: {verdict.raw_response}")
    return "\n".join(lines)


def _echo_failure(title: str, exc: Exception, extra_hints: tuple[str, ...] = ()) -> None:
    _, hint = categorize_error(exc)
    click.echo(f"{title}: {exc}", err=True)
    hints = list(extra_hints)
    if hint != str(exc) and hint not in hints:
        hints.insert(0, hint)
    if hints:
        click.echo("\nTroubleshooting tips:")
        for i, h in enumerate(hints, start=1):
            click.echo(f"{i}. {h}")


async def _batch_mode(cfg: AppConfig) -> None:
    async with GeminiClient(cfg) as client:
        report = await run_batch(cfg.videos_dir, VideoAnalyzer(client, cfg), cfg)

    if not report.entries:
        click.echo(f"No video files found in {cfg.videos_dir}.")
        return
    click.echo(f"\nResults saved to: {report.report_path}")
    click.echo("\nSummary:")
    click.echo(f"- Total videos: {report.total}")
    click.echo(f"- Approved: {len(report.approved)}")
    click.echo(f"- Rejected: {len(report.rejected)}")


async def _single_video_mode(cfg: AppConfig, url: str) -> None:
    click.echo("\nDownloading video...")
    try:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            transient=True,
        ) as progress:
            task = progress.add_task("Downloading", total=1.0)
            asset = await fetch_remote_video(
                url,
                cfg.download_dir,
                progress=lambda fraction: progress.update(task, completed=fraction),
            )
    except VideoApprovalError as exc:
        _echo_failure("Download failed", exc, DOWNLOAD_HINTS)
        return

    click.echo(f"\nDownload successful: {asset.title or asset.name}")
    click.echo(f"Saved to: {asset.path}")
    click.echo(f"\n--- Analyzing single video: {asset.path} ---")

    try:
        async with GeminiClient(cfg) as client:
            verdict = await VideoAnalyzer(client, cfg).evaluate(asset.path)
    except VideoApprovalError as exc:
        _echo_failure("Error analyzing video", exc)
        return
    click.echo(format_verdict(verdict))


def run_menu(cfg: AppConfig) -> None:
    """Show the menu once and dispatch the chosen mode."""
    click.echo(MENU)
    choice = click.prompt(
        "Enter your choice (1, 2, or 3)", default="", show_default=False
    ).strip()

    if choice == "1":
        click.echo("\nProcessing all videos in the videos folder...")
        asyncio.run(_batch_mode(cfg))
    elif choice == "2":
        click.echo("\nYouTube Video Download and Analysis")
        url = click.prompt("Enter YouTube video URL", default="", show_default=False).strip()
        if not url:
            click.echo("No URL provided. Exiting...")
            return
        asyncio.run(_single_video_mode(cfg, url))
    elif choice == "3":
        click.echo("Goodbye!")
    else:
        click.echo("Invalid choice. Please enter 1, 2, or 3.", err=True)


@click.command()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (repeat for more).")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Suppress all but warnings.")
@click.option(
    "--videos-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
    help="Directory scanned in batch mode (default: ./videos).",
)
@click.option(
    "--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
    help="Directory for report files (default: ./output).",
)
def main(verbose: int, quiet: bool, videos_dir: Path | None, output_dir: Path | None) -> None:
    """Score short videos against the approval criteria with Gemini."""
    _configure_logging(-1 if quiet else verbose)
    try:
        cfg = AppConfig.from_env().with_overrides(videos_dir=videos_dir, output_dir=output_dir)
        tracing.setup(cfg)
        run_menu(cfg)
    except (KeyboardInterrupt, click.Abort):
        click.echo("\nProcess interrupted. Goodbye!")
        raise SystemExit(0)
    except Exception as exc:
        logger.debug("Unexpected error", exc_info=True)
        _, hint = categorize_error(exc)
        click.echo(f"Unexpected error: {exc}", err=True)
        if hint != str(exc):
            click.echo(hint, err=True)
        raise SystemExit(1)
    finally:
        tracing.shutdown()


if __name__ == "__main__":
    main()
