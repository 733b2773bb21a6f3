# src/render/manifest_builder.py — v1
"""Include manifest — the ordered list of artifacts the report pulls in.

The manifest is a Quarto file with one include shortcode per artifact::

    {{< include _02-01_iq.qmd >}}

    {{< include _02-09_adhd_self.qmd >}}

Only domains that ended the run as generated, cached or protected are
listed. The file is replaced atomically; if building fails the previous
manifest stays in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from neuroreport.core.models import MANIFEST_STATUSES
from neuroreport.storage.local_writer import atomic_write

if TYPE_CHECKING:
    from neuroreport.core.models import RunReport
    from neuroreport.pipeline.registry import DomainRegistry
    from neuroreport.storage.layout import WorkspaceLayout

logger = logging.getLogger(__name__)

INCLUDE_TEMPLATE = "{{{{< include {path} >}}}}"


class ManifestBuilder:
    """Build and write the include manifest from a run report."""

    def __init__(self, registry: DomainRegistry, layout: WorkspaceLayout) -> None:
        self._registry = registry
        self._layout = layout

    def build(self, report: RunReport) -> list[str]:
        """Workspace-relative artifact paths, in section then rater order."""
        entries: list[str] = []
        for spec in self._registry.list_specs():
            outcome = report.outcome_for(spec.key)
            if outcome is None or outcome.status not in MANIFEST_STATUSES:
                continue
            entries.extend(
                self._layout.relative(p) for p in self._layout.existing_artifacts(spec)
            )
        return entries

    def write(self, report: RunReport) -> list[str]:
        """Build the manifest for ``report`` and replace the manifest file."""
        entries = self.build(report)
        self.write_entries(entries)
        return entries

    def write_entries(self, entries: list[str]) -> Path:
        path = self._layout.manifest_path
        atomic_write(path, render_manifest(entries))
        logger.info("Wrote manifest %s (%d artifacts)", path.name, len(entries))
        return path


def render_manifest(entries: list[str]) -> str:
    """Manifest file text; empty when there are no entries."""
    if not entries:
        return ""
    return "\n\n".join(INCLUDE_TEMPLATE.format(path=e) for e in entries) + "\n"


def parse_manifest(text: str) -> list[str]:
    """Artifact paths listed in a manifest file."""
    entries: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if line.startswith("{{< include ") and line.endswith(" >}}"):
            entries.append(line[len("{{< include "):-len(" >}}")].strip())
    return entries
