# src/tracking/status_tracker.py — v1
"""Per-run status tracking — one terminal status per domain.

Collects DomainOutcome entries as the orchestrator finishes each domain and
consolidates them into a RunReport.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from neuroreport.core.models import DomainOutcome, RunReport


def generate_run_id(timestamp: datetime | None = None) -> str:
    """Generate a run_id: yyyymmdd_hhmmss_{uuid4_short}."""
    ts = timestamp or datetime.now(timezone.utc)
    return f"{ts.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"


class StatusTracker:
    """Accumulate domain outcomes for a single run."""

    def __init__(
        self,
        subject: str,
        run_id: str | None = None,
        force_regenerate: bool = False,
        protect_edits: bool = True,
    ) -> None:
        self.subject = subject
        self.run_id = run_id or generate_run_id()
        self.started_at = datetime.now(timezone.utc)
        self._force = force_regenerate
        self._protect = protect_edits
        self._outcomes: dict[str, DomainOutcome] = {}

    def record(self, outcome: DomainOutcome) -> None:
        """Record the terminal state of a domain.

        Raises:
            ValueError: If the domain already has a status in this run.
        """
        if outcome.key in self._outcomes:
            previous = self._outcomes[outcome.key].status
            raise ValueError(
                f"Domain '{outcome.key}' already recorded as {previous}"
            )
        self._outcomes[outcome.key] = outcome

    def has(self, key: str) -> bool:
        return key in self._outcomes

    def build_report(self, completed_at: datetime | None = None) -> RunReport:
        """Consolidate recorded outcomes, ordered by section ordinal."""
        outcomes = sorted(self._outcomes.values(), key=lambda o: o.section_ordinal)
        return RunReport(
            subject=self.subject,
            run_id=self.run_id,
            started_at=self.started_at,
            completed_at=completed_at or datetime.now(timezone.utc),
            force_regenerate=self._force,
            protect_edits=self._protect,
            outcomes=outcomes,
        )
