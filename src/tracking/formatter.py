# src/tracking/formatter.py — v1
"""Plain-text rendering of a RunReport for the CLI."""

from __future__ import annotations

from neuroreport.core.models import GENERATION_STATUSES, RunReport


def format_report(report: RunReport, show_domains: bool = True) -> str:
    """Return a multi-line human-readable summary of a run."""
    counts = report.counts
    lines = [
        f"Run {report.run_id} for {report.subject} "
        f"({report.duration_seconds:.1f}s)",
        "  " + "  ".join(f"{s}={counts[s]}" for s in GENERATION_STATUSES),
    ]

    if show_domains:
        for outcome in report.outcomes:
            detail = ""
            if outcome.rater_tags and outcome.rater_tags != ["default"]:
                detail = f" [{', '.join(outcome.rater_tags)}]"
            lines.append(
                f"  {outcome.section_ordinal:02d} {outcome.key:<14s} "
                f"{outcome.status}{detail}"
            )

    failures = report.failures
    if failures:
        lines.append("Failures:")
        for key, message in failures.items():
            lines.append(f"  {key}: {message}")

    return "\n".join(lines)
