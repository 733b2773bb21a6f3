# tests/unit/core/test_unit_models.py — v1
"""Tests for core/models.py — DomainSpec, ArtifactRecord, RunReport."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from neuroreport.core.models import (
    ArtifactRecord,
    DomainOutcome,
    DomainSpec,
    RunReport,
)

T0 = datetime(2026, 1, 31, 10, 0, tzinfo=timezone.utc)


class TestDomainSpec:
    def test_minimal(self):
        spec = DomainSpec(
            key="memory", labels=frozenset({"Memory"}),
            section_ordinal=5, data_source="neurocog",
        )
        assert spec.rater_capable is False
        assert spec.age_classes == frozenset({"child", "adult"})

    def test_frozen(self):
        spec = DomainSpec(
            key="memory", labels=frozenset({"Memory"}),
            section_ordinal=5, data_source="neurocog",
        )
        with pytest.raises(ValidationError):
            spec.key = "other"

    def test_labels_required(self):
        with pytest.raises(ValidationError):
            DomainSpec(key="x", labels=frozenset(), section_ordinal=1, data_source="s")

    def test_key_must_be_identifier_like(self):
        with pytest.raises(ValidationError):
            DomainSpec(key="bad key", labels={"X"}, section_ordinal=1, data_source="s")

    def test_negative_ordinal(self):
        with pytest.raises(ValidationError):
            DomainSpec(key="x", labels={"X"}, section_ordinal=-1, data_source="s")

    def test_sorted_labels(self):
        spec = DomainSpec(key="x", labels={"b", "a"}, section_ordinal=1, data_source="s")
        assert spec.sorted_labels == ["a", "b"]


class TestArtifactRecord:
    def test_no_marker_is_edited(self):
        record = ArtifactRecord(path="a.qmd", content_mtime=T0)
        assert record.manually_edited is True

    def test_mtime_after_marker_is_edited(self):
        record = ArtifactRecord(
            path="a.qmd", generated_at=T0, content_mtime=T0 + timedelta(seconds=1)
        )
        assert record.manually_edited is True

    def test_mtime_equal_marker_is_not_edited(self):
        record = ArtifactRecord(path="a.qmd", generated_at=T0, content_mtime=T0)
        assert record.manually_edited is False


class TestRunReport:
    def _report(self) -> RunReport:
        return RunReport(
            subject="Jane",
            run_id="r1",
            started_at=T0,
            completed_at=T0 + timedelta(seconds=3),
            outcomes=[
                DomainOutcome(key="iq", section_ordinal=1, status="generated"),
                DomainOutcome(key="memory", section_ordinal=5, status="cached"),
                DomainOutcome(
                    key="adhd", section_ordinal=9, status="failed", message="boom"
                ),
                DomainOutcome(key="motor", section_ordinal=7, status="skipped"),
            ],
        )

    def test_counts_cover_all_statuses(self):
        counts = self._report().counts
        assert counts == {
            "generated": 1, "cached": 1, "protected": 0, "skipped": 1, "failed": 1,
        }

    def test_failures(self):
        assert self._report().failures == {"adhd": "boom"}

    def test_duration(self):
        assert self._report().duration_seconds == 3.0

    def test_outcome_for(self):
        report = self._report()
        assert report.outcome_for("memory").status == "cached"
        assert report.outcome_for("nope") is None

    def test_keys_with_status(self):
        assert self._report().keys_with_status("skipped") == ["motor"]
