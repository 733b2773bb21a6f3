# src/storage/change_detection.py — v1
"""Change detectors — decide whether an artifact was edited since generation.

Two strategies are available: modification time against the marker's
timestamp (default), and SHA-256 content hash against the hash recorded in
the marker. Selected via the EDIT_DETECTION setting.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neuroreport.core.models import GenerationMarker

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_READ_BLOCK = 65536


def file_sha256(path: Path) -> str:
    """SHA-256 hex digest of a file's bytes."""
    digest = hashlib.sha256()
    with open(path, "rb") as fh:
        for block in iter(lambda: fh.read(_READ_BLOCK), b""):
            digest.update(block)
    return digest.hexdigest()


def datetime_to_ns(value: datetime) -> int:
    """Exact integer nanoseconds since the epoch (microsecond resolution)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(microseconds=1) * 1000


def ns_to_datetime(value_ns: int, round_up: bool = False) -> datetime:
    """Datetime from epoch nanoseconds, truncated or rounded up to microseconds."""
    micros = -(-value_ns // 1000) if round_up else value_ns // 1000
    return _EPOCH + timedelta(microseconds=micros)


class BaseChangeDetector(ABC):
    """Strategy interface for manual-edit detection."""

    name: str = "base"

    @abstractmethod
    def is_modified(self, artifact: Path, marker: GenerationMarker) -> bool:
        """True if the artifact changed after the marker was recorded."""


class MtimeChangeDetector(BaseChangeDetector):
    """Edited when the content mtime is strictly later than the marker time."""

    name = "mtime"

    def is_modified(self, artifact: Path, marker: GenerationMarker) -> bool:
        return artifact.stat().st_mtime_ns > datetime_to_ns(marker.generated_at)


class ContentHashChangeDetector(BaseChangeDetector):
    """Edited when the content hash differs from the one recorded at generation.

    Markers written without a hash fall back to the mtime comparison.
    """

    name = "content_hash"

    def __init__(self) -> None:
        self._fallback = MtimeChangeDetector()

    def is_modified(self, artifact: Path, marker: GenerationMarker) -> bool:
        if not marker.content_sha256:
            return self._fallback.is_modified(artifact, marker)
        return file_sha256(artifact) != marker.content_sha256


def create_change_detector(kind: str = "mtime") -> BaseChangeDetector:
    """Instantiate a change detector by name ("mtime" or "content_hash")."""
    if kind == "mtime":
        return MtimeChangeDetector()
    if kind == "content_hash":
        return ContentHashChangeDetector()
    raise ValueError(f"Unknown edit detection strategy: {kind!r}")
