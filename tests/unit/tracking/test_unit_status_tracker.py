# tests/unit/tracking/test_unit_status_tracker.py — v1
"""Tests for tracking/status_tracker.py — run ids and outcome collection."""

from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from neuroreport.core.models import DomainOutcome
from neuroreport.tracking.status_tracker import StatusTracker, generate_run_id


class TestGenerateRunId:
    def test_format(self):
        ts = datetime(2026, 3, 1, 14, 5, 9, tzinfo=timezone.utc)
        run_id = generate_run_id(ts)
        assert re.fullmatch(r"20260301_140509_[0-9a-f]{8}", run_id)

    def test_unique(self):
        assert generate_run_id() != generate_run_id()


class TestStatusTracker:
    def test_record_and_report_sorted_by_ordinal(self):
        tracker = StatusTracker("Jane", run_id="r1", force_regenerate=True)
        tracker.record(DomainOutcome(key="memory", section_ordinal=5, status="cached"))
        tracker.record(DomainOutcome(key="iq", section_ordinal=1, status="generated"))

        report = tracker.build_report()
        assert [o.key for o in report.outcomes] == ["iq", "memory"]
        assert report.run_id == "r1"
        assert report.force_regenerate is True
        assert report.protect_edits is True
        assert report.completed_at >= report.started_at

    def test_duplicate_rejected(self):
        tracker = StatusTracker("Jane")
        tracker.record(DomainOutcome(key="iq", section_ordinal=1, status="generated"))
        with pytest.raises(ValueError, match="already recorded as generated"):
            tracker.record(DomainOutcome(key="iq", section_ordinal=1, status="failed"))

    def test_has(self):
        tracker = StatusTracker("Jane")
        assert not tracker.has("iq")
        tracker.record(DomainOutcome(key="iq", section_ordinal=1, status="skipped"))
        assert tracker.has("iq")

    def test_generated_run_id(self):
        assert StatusTracker("Jane").run_id
