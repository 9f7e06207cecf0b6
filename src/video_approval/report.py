"""Two-section tabular report of batch verdicts.

Rows are comma-separated with quote-wrapped string fields (internal quotes
doubled). This is not strict CSV: embedded newlines are not escaped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from pathlib import Path

from .errors import FilesystemError
from .models.batch import BatchEntry
from .models.verdict import CHECK_LABELS

logger = logging.getLogger(__name__)

APPROVED_TITLE = "GOOD VIDEOS (APPROVED)"
REJECTED_TITLE = "BAD VIDEOS (REJECTED)"
RULE = "=" * 50
HEADERS: tuple[str, ...] = (
    "Filename",
    "Summary",
    *(label for _, label in CHECK_LABELS),
    "Approved",
    "Reason",
)
REPORT_PREFIX = "video_analysis_results_"


def _quote(value: str) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def render_row(entry: BatchEntry) -> str:
    """Render one entry in header column order."""
    verdict = entry.verdict
    cells = [
        _quote(entry.name),
        _quote(verdict.summary),
        *(_yes_no(getattr(verdict.checks, field)) for field, _ in CHECK_LABELS),
        _yes_no(verdict.approved),
        _quote(verdict.reason),
    ]
    return ",".join(cells)


def _section(title: str, entries: Iterable[BatchEntry]) -> list[str]:
    return [title, RULE, ",".join(HEADERS), *(render_row(e) for e in entries)]


def render(entries: Sequence[BatchEntry]) -> str:
    """Render approved then rejected entries, each keeping its relative order."""
    approved = [e for e in entries if e.verdict.approved]
    rejected = [e for e in entries if not e.verdict.approved]
    lines = [
        *_section(APPROVED_TITLE, approved),
        "",
        "",
        *_section(REJECTED_TITLE, rejected),
    ]
    return "\n".join(lines)


def report_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 timestamp with ``:`` and ``.`` replaced by ``-``, cut to the second."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    iso = now.isoformat(timespec="milliseconds")
    return iso.replace(":", "-").replace(".", "-")[:19]


def write_report(
    entries: Sequence[BatchEntry],
    output_dir: str | Path,
    *,
    now: datetime | None = None,
) -> Path:
    """Write the rendered report to a timestamped file under *output_dir*.

    Raises:
        FilesystemError: If the directory cannot be created or the file written.
    """
    out = Path(output_dir).expanduser()
    path = out / f"{REPORT_PREFIX}{report_timestamp(now)}.csv"
    try:
        out.mkdir(parents=True, exist_ok=True)
        path.write_text(render(entries), encoding="utf-8")
    except OSError as exc:
        raise FilesystemError(f"Error saving report {path}: {exc}") from exc
    logger.info("Results saved to: %s", path)
    return path
