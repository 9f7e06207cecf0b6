"""Tests for report rendering and writing."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from video_approval.errors import FilesystemError
from video_approval.models.batch import BatchEntry
from video_approval.models.verdict import AnalysisVerdict, ApprovalChecks
from video_approval.report import HEADERS, render, report_timestamp, write_report

HEADER_ROW = (
    "Filename,Summary,Vertical Format,No Watermarks,No Subtitles,Single Shot,"
    "No Talking,Instrumental Music Only,Has Background Sound,Min 8 Seconds,Approved,Reason"
)


def _entry(name: str, approved: bool, reason: str = "", summary: str = "s", **checks) -> BatchEntry:
    return BatchEntry(
        name=name,
        verdict=AnalysisVerdict(
            summary=summary, checks=ApprovalChecks(**checks), approved=approved, reason=reason,
        ),
    )


class TestRender:
    def test_layout(self):
        text = render([])
        assert text.split("\n") == [
            "GOOD VIDEOS (APPROVED)",
            "=" * 50,
            HEADER_ROW,
            "",
            "",
            "BAD VIDEOS (REJECTED)",
            "=" * 50,
            HEADER_ROW,
        ]
        assert ",".join(HEADERS) == HEADER_ROW

    def test_approved_row_with_empty_reason(self):
        all_true = {f: True for f in ApprovalChecks.model_fields}
        text = render([_entry("cat.mp4", True, summary="A cat", **all_true)])

        approved, rejected = text.split("BAD VIDEOS (REJECTED)")
        row = '"cat.mp4","A cat",Yes,Yes,Yes,Yes,Yes,Yes,Yes,Yes,Yes,""'
        assert row in approved.split("\n")
        assert "cat.mp4" not in rejected

    def test_rejected_row(self):
        text = render([_entry("dog.mov", False, reason="Has subtitles", vertical_format=True)])

        rejected = text.split("BAD VIDEOS (REJECTED)")[1]
        assert '"dog.mov","s",Yes,No,No,No,No,No,No,No,No,"Has subtitles"' in rejected

    def test_quotes_doubled(self):
        text = render([_entry('say "hi".mp4', False, reason='He said "no"', summary='a "b" c')])
        assert '"say ""hi"".mp4","a ""b"" c"' in text
        assert '"He said ""no"""' in text

    def test_partition_preserves_order(self):
        entries = [
            _entry("r1.mp4", False, reason="x"),
            _entry("a1.mp4", True),
            _entry("r2.mp4", False, reason="y"),
            _entry("a2.mp4", True),
        ]
        lines = render(entries).split("\n")
        names = [line.split(",")[0].strip('"') for line in lines if line.startswith('"')]
        assert names == ["a1.mp4", "a2.mp4", "r1.mp4", "r2.mp4"]


class TestReportTimestamp:
    def test_format(self):
        now = datetime(2026, 10, 19, 11, 37, 5, 987654, tzinfo=timezone.utc)
        assert report_timestamp(now) == "2026-10-19T11-37-05"

    def test_converts_to_utc(self):
        tz = timezone(timedelta(hours=2))
        now = datetime(2026, 10, 19, 13, 0, 0, tzinfo=tz)
        assert report_timestamp(now) == "2026-10-19T11-00-00"

    def test_default_is_now(self):
        stamp = report_timestamp()
        assert len(stamp) == 19
        assert ":" not in stamp and "." not in stamp


class TestWriteReport:
    def test_creates_directory_and_file(self, tmp_path):
        out = tmp_path / "nested" / "output"
        now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        path = write_report([_entry("a.mp4", True)], out, now=now)

        assert path == out / "video_analysis_results_2026-01-02T03-04-05.csv"
        assert path.read_text(encoding="utf-8").startswith("GOOD VIDEOS (APPROVED)")

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(FilesystemError, match="Error saving report"):
            write_report([], blocker / "sub")
