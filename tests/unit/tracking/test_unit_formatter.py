# tests/unit/tracking/test_unit_formatter.py — v1
"""Tests for tracking/formatter.py — CLI run summary."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from neuroreport.core.models import DomainOutcome, RunReport
from neuroreport.tracking.formatter import format_report


def _report() -> RunReport:
    start = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    return RunReport(
        subject="Jane Doe",
        run_id="20260301_120000_abcd1234",
        started_at=start,
        completed_at=start + timedelta(seconds=2.5),
        outcomes=[
            DomainOutcome(key="iq", section_ordinal=1, status="generated", rater_tags=["default"]),
            DomainOutcome(key="adhd", section_ordinal=9, status="cached", rater_tags=["self", "observer"]),
            DomainOutcome(
                key="validity", section_ordinal=13, status="failed",
                message="Data source 'validity' unavailable", error_type="MissingDataSource",
            ),
        ],
    )


class TestFormatReport:
    def test_header_and_counts(self):
        text = format_report(_report())
        lines = text.splitlines()
        assert lines[0] == "Run 20260301_120000_abcd1234 for Jane Doe (2.5s)"
        assert "generated=1" in lines[1]
        assert "cached=1" in lines[1]
        assert "failed=1" in lines[1]

    def test_domain_lines(self):
        text = format_report(_report())
        assert "01 iq" in text
        assert "cached [self, observer]" in text
        assert "[default]" not in text

    def test_failures_section(self):
        text = format_report(_report())
        assert "Failures:" in text
        assert "validity: Data source 'validity' unavailable" in text

    def test_without_domains(self):
        text = format_report(_report(), show_domains=False)
        assert "01 iq" not in text
        assert "Failures:" in text
