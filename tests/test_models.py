"""Tests for Pydantic models."""

import pydantic
import pytest

from video_approval.models import (
    AnalysisVerdict,
    ApprovalChecks,
    BatchEntry,
    BatchReport,
    ParseFailure,
    SourceKind,
    VideoAsset,
)
from video_approval.models.verdict import CHECK_LABELS, PROCESSING_ERROR_SUMMARY


class TestVerdictModels:
    def test_checks_default_to_failed(self):
        checks = ApprovalChecks()
        assert not any(getattr(checks, field) for field, _ in CHECK_LABELS)

    def test_labels_cover_every_check(self):
        assert [field for field, _ in CHECK_LABELS] == list(ApprovalChecks.model_fields)

    def test_verdict_defaults(self):
        v = AnalysisVerdict()
        assert v.approved is False
        assert v.summary == ""
        assert v.failed is False

    def test_verdict_is_frozen(self):
        v = AnalysisVerdict(approved=True)
        with pytest.raises(pydantic.ValidationError):
            v.approved = False

    def test_from_failure(self):
        v = AnalysisVerdict.from_failure("Upload failed: quota")
        assert v.summary == PROCESSING_ERROR_SUMMARY
        assert v.approved is False
        assert v.reason == "Upload failed: quota"
        assert v.failed is True

    def test_from_failure_empty_message(self):
        assert AnalysisVerdict.from_failure("").error == "Unknown error"

    def test_parse_failure_to_verdict(self):
        v = ParseFailure(raw_text="not json").to_verdict()
        assert v.approved is False
        assert v.error == "Failed to parse response"
        assert v.raw_response == "not json"


class TestVideoAsset:
    def test_local_default(self, tmp_path):
        a = VideoAsset(name="a.mp4", path=tmp_path / "a.mp4")
        assert a.source is SourceKind.LOCAL_FILE
        assert a.duration_seconds is None


class TestBatchReport:
    def test_partitions_preserve_order(self):
        entries = [
            BatchEntry(name="a.mp4", verdict=AnalysisVerdict(approved=False)),
            BatchEntry(name="b.mp4", verdict=AnalysisVerdict(approved=True)),
            BatchEntry(name="c.mp4", verdict=AnalysisVerdict.from_failure("boom")),
            BatchEntry(name="d.mp4", verdict=AnalysisVerdict(approved=True)),
        ]
        report = BatchReport(directory="videos", entries=entries)

        assert [e.name for e in report.approved] == ["b.mp4", "d.mp4"]
        assert [e.name for e in report.rejected] == ["a.mp4", "c.mp4"]
        assert report.total == 4
        assert report.failed == 1

    def test_empty(self):
        report = BatchReport(directory="videos")
        assert report.total == 0
        assert report.report_path is None
