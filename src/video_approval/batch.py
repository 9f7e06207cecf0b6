"""Batch approval run over a local directory.

Videos are evaluated one at a time with a pacing delay between them to stay
under the Gemini rate limits. A failure on one video becomes a rejected
entry; the run always continues. ``max_concurrency > 1`` opts into bounded
parallelism.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path

from .analysis import VideoAnalyzer
from .config import AppConfig
from .models.batch import BatchEntry, BatchReport
from .models.verdict import AnalysisVerdict, VideoAsset
from .polling import SleepFn
from .report import write_report
from .sources.local import list_local_videos
from .tracing import trace

logger = logging.getLogger(__name__)


async def _evaluate_one(
    analyzer: VideoAnalyzer, asset: VideoAsset, index: int, total: int
) -> BatchEntry:
    logger.info("Processing video %d/%d: %s", index, total, asset.name)
    try:
        verdict = await analyzer.evaluate(asset.path)
    except Exception as exc:
        logger.error("Error processing %s: %s", asset.name, exc)
        verdict = AnalysisVerdict.from_failure(str(exc))
    else:
        logger.info("Completed analysis for: %s", asset.name)
    return BatchEntry(name=asset.name, verdict=verdict)


async def _run_sequential(
    analyzer: VideoAnalyzer, videos: list[VideoAsset], pacing_delay: float, sleep: SleepFn
) -> list[BatchEntry]:
    entries: list[BatchEntry] = []
    for i, asset in enumerate(videos, start=1):
        entries.append(await _evaluate_one(analyzer, asset, i, len(videos)))
        if i < len(videos) and pacing_delay > 0:
            logger.info("Waiting %g seconds before next video...", pacing_delay)
            await sleep(pacing_delay)
    return entries


async def _run_bounded(
    analyzer: VideoAnalyzer,
    videos: list[VideoAsset],
    pacing_delay: float,
    sleep: SleepFn,
    max_concurrency: int,
) -> list[BatchEntry]:
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _process(i: int, asset: VideoAsset) -> BatchEntry:
        async with semaphore:
            entry = await _evaluate_one(analyzer, asset, i, len(videos))
            if i < len(videos) and pacing_delay > 0:
                await sleep(pacing_delay)
            return entry

    return list(await asyncio.gather(*[_process(i, a) for i, a in enumerate(videos, start=1)]))


@trace(name="run_batch", span_type="CHAIN")
async def run_batch(
    directory: str | Path,
    analyzer: VideoAnalyzer,
    config: AppConfig,
    *,
    sleep: SleepFn = asyncio.sleep,
    now: datetime | None = None,
) -> BatchReport:
    """Evaluate every video in *directory* and write the report.

    Args:
        directory: Directory scanned for .mp4/.avi/.mov/.mkv files.
        analyzer: Analyzer used for each video.
        config: Supplies pacing_delay, max_concurrency and output_dir.
        sleep: Awaitable sleep used for pacing.
        now: Timestamp for the report file name (defaults to the current time).

    Returns:
        The report, with ``report_path`` set when a file was written. No
        file is written when the directory holds no videos.

    Raises:
        FilesystemError: If the report cannot be written.
    """
    videos = list_local_videos(directory)
    report = BatchReport(directory=str(directory))
    if not videos:
        logger.warning("No video files found in %s", directory)
        return report

    logger.info("Found %d video file(s) to process:", len(videos))
    for asset in videos:
        logger.info("- %s", asset.name)

    if config.max_concurrency > 1:
        entries = await _run_bounded(
            analyzer, videos, config.pacing_delay, sleep, config.max_concurrency
        )
    else:
        entries = await _run_sequential(analyzer, videos, config.pacing_delay, sleep)

    report = BatchReport(
        directory=str(directory),
        entries=entries,
        report_path=write_report(entries, config.output_dir, now=now),
    )
    logger.info(
        "Processed %d video(s): %d approved, %d rejected (%d failed)",
        report.total,
        len(report.approved),
        len(report.rejected),
        report.failed,
    )
    return report
