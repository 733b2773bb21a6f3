# src/storage/markers.py — v1
"""Edit protection — generation markers next to each artifact.

When the tool writes an artifact it also writes ``<artifact><suffix>``
recording when (and with which content) it did so. An artifact whose
content changed after its marker, or which has no marker at all, is treated
as manually edited and protected from regeneration.

Marker format (plain text, one ``key: value`` per line)::

    generated_at: 2026-01-31T10:15:42.123456+00:00
    artifact: _02-05_memory.qmd
    content_sha256: 9f86d0...
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

from neuroreport.core.models import ArtifactRecord, GenerationMarker
from neuroreport.storage.change_detection import (
    BaseChangeDetector,
    MtimeChangeDetector,
    file_sha256,
    ns_to_datetime,
)
from neuroreport.storage.layout import MARKER_SUFFIX
from neuroreport.storage.local_writer import atomic_write

logger = logging.getLogger(__name__)

_MARKER_HEADER = "# neuroreport generation marker; edit the artifact, not this file"


class EditProtectionTracker:
    """Record generation markers and answer whether an artifact is protected."""

    def __init__(
        self,
        marker_suffix: str = MARKER_SUFFIX,
        detector: BaseChangeDetector | None = None,
    ) -> None:
        self._suffix = marker_suffix
        self._detector = detector or MtimeChangeDetector()

    @property
    def detector(self) -> BaseChangeDetector:
        return self._detector

    def marker_path(self, artifact: Path) -> Path:
        return artifact.with_name(artifact.name + self._suffix)

    def mark_generated(self, artifact: Path) -> GenerationMarker:
        """Write the marker for a freshly written artifact.

        The recorded time is never earlier than the artifact's own mtime,
        so an artifact is not protected against itself.
        """
        now_ns = max(time.time_ns(), artifact.stat().st_mtime_ns)
        marker = GenerationMarker(
            artifact=artifact.name,
            generated_at=ns_to_datetime(now_ns, round_up=True),
            content_sha256=file_sha256(artifact),
        )
        atomic_write(self.marker_path(artifact), _format_marker(marker))
        return marker

    def read_marker(self, artifact: Path) -> GenerationMarker | None:
        """Parse the marker of an artifact; None if absent or unreadable."""
        path = self.marker_path(artifact)
        if not path.is_file():
            return None
        try:
            return _parse_marker(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Unreadable marker %s: %s", path.name, exc)
            return None

    def is_protected(self, artifact: Path) -> bool:
        """True if the artifact exists and is considered manually edited."""
        if not artifact.is_file():
            return False
        marker = self.read_marker(artifact)
        if marker is None:
            return True
        return self._detector.is_modified(artifact, marker)

    def record(self, artifact: Path) -> ArtifactRecord:
        """On-disk state of an existing artifact."""
        marker = self.read_marker(artifact)
        return ArtifactRecord(
            path=str(artifact),
            generated_at=marker.generated_at if marker else None,
            content_mtime=ns_to_datetime(artifact.stat().st_mtime_ns),
        )

    def clear(self, artifact: Path) -> None:
        """Delete an artifact together with its marker."""
        artifact.unlink(missing_ok=True)
        self.marker_path(artifact).unlink(missing_ok=True)


def _format_marker(marker: GenerationMarker) -> str:
    lines = [
        _MARKER_HEADER,
        f"generated_at: {marker.generated_at.isoformat()}",
        f"artifact: {marker.artifact}",
    ]
    if marker.content_sha256:
        lines.append(f"content_sha256: {marker.content_sha256}")
    return "\n".join(lines) + "\n"


def _parse_marker(text: str) -> GenerationMarker:
    fields: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        fields[key.strip()] = value.strip()

    if "generated_at" not in fields:
        raise ValueError("missing generated_at")
    return GenerationMarker(
        artifact=fields.get("artifact", ""),
        generated_at=datetime.fromisoformat(fields["generated_at"]),
        content_sha256=fields.get("content_sha256") or None,
    )
