# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    import pandas as pd

AgeClass = Literal["child", "adult"]
RaterTag = Literal["default", "self", "parent", "teacher", "observer"]
GenerationStatus = Literal["generated", "cached", "protected", "skipped", "failed"]

GENERATION_STATUSES: tuple[GenerationStatus, ...] = (
    "generated",
    "cached",
    "protected",
    "skipped",
    "failed",
)

# Statuses whose artifacts go into the include manifest.
MANIFEST_STATUSES: frozenset[str] = frozenset({"generated", "cached", "protected"})


# === DOMAIN REGISTRY ===


class DomainSpec(BaseModel):
    """Static definition of one report section."""

    model_config = ConfigDict(frozen=True)

    key: str
    labels: frozenset[str]
    section_ordinal: int
    data_source: str
    rater_capable: bool = False
    age_classes: frozenset[AgeClass] = frozenset({"child", "adult"})

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:  # noqa: N805
        if not v or not v.replace("_", "").isalnum():
            raise ValueError(f"domain key must be alphanumeric/underscore, got {v!r}")
        return v

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: frozenset[str]) -> frozenset[str]:  # noqa: N805
        if not v:
            raise ValueError("a domain needs at least one label")
        return v

    @field_validator("section_ordinal")
    @classmethod
    def validate_ordinal(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("section_ordinal must be >= 0")
        return v

    @property
    def sorted_labels(self) -> list[str]:
        return sorted(self.labels)


# === ARTIFACTS ===


class GenerationMarker(BaseModel):
    """Side record written next to an artifact when the tool generates it."""

    artifact: str
    generated_at: datetime
    content_sha256: str | None = None


class ArtifactRecord(BaseModel):
    """On-disk state of one generated artifact."""

    path: str
    generated_at: datetime | None = None
    content_mtime: datetime

    @property
    def manually_edited(self) -> bool:
        """True when there is no marker or the content changed after it."""
        if self.generated_at is None:
            return True
        return self.content_mtime > self.generated_at


@dataclass(frozen=True)
class RaterVariant:
    """Rows for one respondent perspective of a domain."""

    rater_tag: RaterTag
    rows: pd.DataFrame

    @property
    def row_count(self) -> int:
        return len(self.rows)


# === RUN REPORT ===


class DomainOutcome(BaseModel):
    """Terminal state of one domain in a run."""

    key: str
    section_ordinal: int
    status: GenerationStatus
    artifacts: list[str] = Field(default_factory=list)
    rater_tags: list[str] = Field(default_factory=list)
    message: str | None = None
    error_type: str | None = None


class RunReport(BaseModel):
    """Per-invocation summary: counts per status plus failure messages."""

    subject: str
    run_id: str
    started_at: datetime
    completed_at: datetime
    force_regenerate: bool = False
    protect_edits: bool = True
    outcomes: list[DomainOutcome] = Field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        counts = {status: 0 for status in GENERATION_STATUSES}
        for outcome in self.outcomes:
            counts[outcome.status] += 1
        return counts

    @property
    def failures(self) -> dict[str, str]:
        """Domain key -> failure message for every failed domain."""
        return {
            o.key: o.message or "unknown error"
            for o in self.outcomes
            if o.status == "failed"
        }

    @property
    def duration_seconds(self) -> float:
        return round((self.completed_at - self.started_at).total_seconds(), 2)

    def outcome_for(self, key: str) -> DomainOutcome | None:
        for outcome in self.outcomes:
            if outcome.key == key:
                return outcome
        return None

    def keys_with_status(self, status: GenerationStatus) -> list[str]:
        return [o.key for o in self.outcomes if o.status == status]
