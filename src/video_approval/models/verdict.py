"""Video asset and verdict models.

``AnalysisVerdict`` mirrors the JSON object the approval prompt asks Gemini
to return. ``VerdictParsed`` / ``ParseFailure`` form the tagged result of
parsing one reply: a reply that cannot be parsed is data, not an exception.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

PARSE_FAILURE_MESSAGE = "Failed to parse response"
PROCESSING_ERROR_SUMMARY = "Error occurred during processing"


class SourceKind(str, Enum):
    """Where a video asset came from."""

    LOCAL_FILE = "local-file"
    DOWNLOADED_REMOTE = "downloaded-remote"


class VideoAsset(BaseModel):
    """A playable video file on local disk."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    source: SourceKind = SourceKind.LOCAL_FILE
    title: str = ""
    duration_seconds: int | None = None


class ApprovalChecks(BaseModel):
    """The eight independent approval criteria. Missing checks count as failed."""

    model_config = ConfigDict(frozen=True)

    vertical_format: bool = False
    no_watermarks: bool = False
    no_subtitles: bool = False
    single_shot: bool = False
    no_talking: bool = False
    instrumental_music_only: bool = False
    has_background_sound: bool = False
    min_8_seconds: bool = False

    @model_validator(mode="before")
    @classmethod
    def _null_means_failed(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: False if v is None else v for k, v in data.items()}
        return data


# (field name, human label) in report column order.
CHECK_LABELS: tuple[tuple[str, str], ...] = (
    ("vertical_format", "Vertical Format"),
    ("no_watermarks", "No Watermarks"),
    ("no_subtitles", "No Subtitles"),
    ("single_shot", "Single Shot"),
    ("no_talking", "No Talking"),
    ("instrumental_music_only", "Instrumental Music Only"),
    ("has_background_sound", "Has Background Sound"),
    ("min_8_seconds", "Min 8 Seconds"),
)


class AnalysisVerdict(BaseModel):
    """Structured outcome of one video's policy evaluation.

    When ``error`` is set the checks are defaults and ``approved`` is False.
    """

    model_config = ConfigDict(frozen=True)

    summary: str = ""
    checks: ApprovalChecks = Field(default_factory=ApprovalChecks)
    approved: bool = False
    reason: str = ""
    error: str | None = None
    raw_response: str | None = None

    @classmethod
    def from_failure(cls, message: str) -> AnalysisVerdict:
        """Verdict recorded for an asset whose evaluation raised."""
        message = message or "Unknown error"
        return cls(
            summary=PROCESSING_ERROR_SUMMARY,
            approved=False,
            reason=message,
            error=message,
        )

    @property
    def failed(self) -> bool:
        return self.error is not None


class VerdictParsed(BaseModel):
    """Reply parsed into a verdict."""

    kind: Literal["ok"] = "ok"
    verdict: AnalysisVerdict


class ParseFailure(BaseModel):
    """Reply that could not be parsed; keeps the raw text for diagnosis."""

    kind: Literal["parse_failure"] = "parse_failure"
    raw_text: str
    detail: str = ""

    def to_verdict(self) -> AnalysisVerdict:
        return AnalysisVerdict(
            approved=False,
            reason=PARSE_FAILURE_MESSAGE,
            error=PARSE_FAILURE_MESSAGE,
            raw_response=self.raw_text,
        )


ParseOutcome = Union[VerdictParsed, ParseFailure]
