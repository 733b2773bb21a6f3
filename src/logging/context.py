# src/logging/context.py — v1
"""Contextual logging support — attach subject, run_id, domain, rater to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per run and per domain.
_subject: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "subject", default=None
)
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_domain: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "domain", default=None
)
_rater: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "rater", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    subject: str | None = None
    run_id: str | None = None
    domain: str | None = None
    rater: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        subject=_subject.get(),
        run_id=_run_id.get(),
        domain=_domain.get(),
        rater=_rater.get(),
    )


def set_run_context(subject: str, run_id: str) -> None:
    """Set run-level context (called once per invocation)."""
    _subject.set(subject)
    _run_id.set(run_id)


def set_domain_context(domain: str | None, rater: str | None = None) -> None:
    """Set domain-level context (called per domain and rater variant)."""
    _domain.set(domain)
    _rater.set(rater)


def clear_context() -> None:
    """Reset all context variables."""
    _subject.set(None)
    _run_id.set(None)
    _domain.set(None)
    _rater.set(None)
