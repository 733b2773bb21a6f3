# src/core/errors.py — v1
"""Error taxonomy for report generation.

Per-domain errors (MissingDataSource, NoUsableData, ProtectedEditConflict,
ProcessorFailure) are caught by the orchestrator and recorded in the run
report. ConcurrentRunDetected, ProcessorLoadError and a final-pass
RenderFailure abort the invocation.
"""

from __future__ import annotations

from pathlib import Path


class NeuroReportError(Exception):
    """Base class for all neuroreport errors."""


class RegistryError(NeuroReportError):
    """Raised when the domain table is inconsistent."""


class DomainNotFound(RegistryError):
    """Raised when a label or key resolves to no domain."""

    def __init__(self, label: str, age_class: str | None = None) -> None:
        self.label = label
        self.age_class = age_class
        suffix = f" for age class '{age_class}'" if age_class else ""
        super().__init__(f"No domain registered for label '{label}'{suffix}")


class MissingDataSource(NeuroReportError):
    """The tabular data file backing a domain is absent or unreadable."""

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        super().__init__(f"Data source '{source}' unavailable: {detail}")


class NoUsableData(NeuroReportError):
    """A domain has no rows, or no row with a populated score column."""

    def __init__(self, domain_key: str, detail: str = "no rows with scores") -> None:
        self.domain_key = domain_key
        super().__init__(f"No usable data for domain '{domain_key}': {detail}")


class ProtectedEditConflict(NeuroReportError):
    """A domain has hand-edited artifacts and edit protection is on."""

    def __init__(self, domain_key: str, paths: list[Path]) -> None:
        self.domain_key = domain_key
        self.paths = paths
        names = ", ".join(p.name for p in paths)
        super().__init__(
            f"Domain '{domain_key}' has manually edited artifacts ({names}); "
            "regenerate with --force-regenerate to overwrite"
        )


class ProcessorFailure(NeuroReportError):
    """The domain processor raised or produced unusable output."""

    def __init__(self, domain_key: str, rater_tag: str, detail: str) -> None:
        self.domain_key = domain_key
        self.rater_tag = rater_tag
        super().__init__(
            f"Processor failed for domain '{domain_key}' ({rater_tag}): {detail}"
        )


class ProcessorLoadError(NeuroReportError):
    """The configured domain processor class cannot be imported."""


class RenderFailure(NeuroReportError):
    """The render engine failed on a given pass."""

    def __init__(self, pass_number: int, detail: str) -> None:
        self.pass_number = pass_number
        super().__init__(f"Render pass {pass_number} failed: {detail}")


class ConcurrentRunDetected(NeuroReportError):
    """Another run holds the workspace sentinel lock."""

    def __init__(self, lock_path: Path, holder: str | None = None) -> None:
        self.lock_path = lock_path
        self.holder = holder
        detail = f" (held by {holder})" if holder else ""
        super().__init__(f"Workflow is already running: {lock_path}{detail}")
