"""Batch report models — one entry per processed asset.

Returned by run_batch. Entries keep the order in which results were
produced; the approved / rejected views preserve that order.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from .verdict import AnalysisVerdict


class BatchEntry(BaseModel):
    """Result for a single file in a batch run."""

    name: str
    verdict: AnalysisVerdict


class BatchReport(BaseModel):
    """Outcome of one batch run."""

    directory: str
    entries: list[BatchEntry] = Field(default_factory=list)
    report_path: Path | None = None

    @property
    def approved(self) -> list[BatchEntry]:
        return [e for e in self.entries if e.verdict.approved]

    @property
    def rejected(self) -> list[BatchEntry]:
        return [e for e in self.entries if not e.verdict.approved]

    @property
    def total(self) -> int:
        return len(self.entries)

    @property
    def failed(self) -> int:
        return sum(1 for e in self.entries if e.verdict.failed)
