# src/storage/layout.py — v1
"""Workspace file layout.

Defines the naming conventions for per-domain artifacts, their generation
markers, the include manifest, the run lock and the final rendered output.
All names are deterministic from (section ordinal, domain key, rater tag).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from neuroreport.pipeline.raters import RATER_ORDER

if TYPE_CHECKING:
    from neuroreport.config.settings import Settings
    from neuroreport.core.models import DomainSpec

ARTIFACT_PREFIX = "_02-"
ARTIFACT_EXTENSION = ".qmd"
MARKER_SUFFIX = ".generated"
MANIFEST_FILENAME = "_domains_to_include.qmd"
LOCK_FILENAME = ".neuroreport.lock"


def artifact_name(
    section_ordinal: int,
    key: str,
    rater_tag: str | None = None,
    prefix: str = ARTIFACT_PREFIX,
    extension: str = ARTIFACT_EXTENSION,
) -> str:
    """e.g. ``_02-05_memory.qmd`` or ``_02-09_adhd_parent.qmd``."""
    stem = f"{prefix}{section_ordinal:02d}_{key}"
    if rater_tag and rater_tag != "default":
        stem = f"{stem}_{rater_tag}"
    return f"{stem}{extension}"


def subject_slug(subject: str) -> str:
    """File-name-safe form of a subject label."""
    slug = re.sub(r"[^A-Za-z0-9._-]+", "_", subject.strip()).strip("._")
    return slug or "subject"


@dataclass(frozen=True)
class WorkspaceLayout:
    """Paths of every file the tool reads or writes in a workspace."""

    root: Path
    prefix: str = ARTIFACT_PREFIX
    extension: str = ARTIFACT_EXTENSION
    marker_suffix: str = MARKER_SUFFIX
    manifest_filename: str = MANIFEST_FILENAME
    lock_filename: str = LOCK_FILENAME

    @classmethod
    def from_settings(cls, settings: Settings) -> WorkspaceLayout:
        return cls(
            root=Path(settings.workspace_dir),
            prefix=settings.artifact_prefix,
            extension=settings.artifact_extension,
            marker_suffix=settings.marker_suffix,
            manifest_filename=settings.manifest_filename,
            lock_filename=settings.lock_filename,
        )

    # --- Artifacts ---

    def artifact_path(self, spec: DomainSpec, rater_tag: str | None = None) -> Path:
        return self.root / artifact_name(
            spec.section_ordinal, spec.key, rater_tag, self.prefix, self.extension
        )

    def candidate_artifacts(self, spec: DomainSpec) -> list[Path]:
        """Every artifact path a domain can own, in manifest order."""
        paths = [self.artifact_path(spec)]
        if spec.rater_capable:
            paths.extend(self.artifact_path(spec, tag) for tag in RATER_ORDER)
        return paths

    def existing_artifacts(self, spec: DomainSpec) -> list[Path]:
        return [p for p in self.candidate_artifacts(spec) if p.is_file()]

    def marker_path(self, artifact: Path) -> Path:
        return artifact.with_name(artifact.name + self.marker_suffix)

    def relative(self, path: Path) -> str:
        """Workspace-relative POSIX path (as written into the manifest)."""
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    # --- Run-level files ---

    @property
    def manifest_path(self) -> Path:
        return self.root / self.manifest_filename

    @property
    def lock_path(self) -> Path:
        return self.root / self.lock_filename


def final_output_path(
    output_dir: Path,
    subject: str,
    suffix: str,
    name_template: str = "{subject}_report",
) -> Path:
    """Destination of the relocated render output for a subject."""
    return Path(output_dir) / f"{name_template.format(subject=subject_slug(subject))}{suffix}"
