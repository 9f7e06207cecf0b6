"""Pydantic models for assets, verdicts, and batch reports."""

from .batch import BatchEntry, BatchReport
from .verdict import (
    AnalysisVerdict,
    ApprovalChecks,
    ParseFailure,
    ParseOutcome,
    SourceKind,
    VerdictParsed,
    VideoAsset,
)

__all__ = [
    "AnalysisVerdict",
    "ApprovalChecks",
    "BatchEntry",
    "BatchReport",
    "ParseFailure",
    "ParseOutcome",
    "SourceKind",
    "VerdictParsed",
    "VideoAsset",
]
