# src/api/models.py — v1
"""API-level models: RunOptions, WorkflowResult, ProtectedArtifact."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from neuroreport.core.models import RunReport


class RunOptions(BaseModel):
    """Per-invocation switches. None means "use the configured default"."""

    generate: bool = True
    render: bool = True
    force_regenerate: bool | None = None
    protect_edits: bool | None = None
    two_stage: bool | None = None


class WorkflowResult(BaseModel):
    """Everything a caller needs to know about one workflow invocation."""

    subject: str
    run_id: str
    report: RunReport | None = None
    manifest_path: Path
    manifest_entries: list[str] = Field(default_factory=list)
    output_path: Path | None = None


class ProtectedArtifact(BaseModel):
    """An artifact that a regular run would leave untouched."""

    domain_key: str
    path: str
    generated_at: datetime | None = None
    content_mtime: datetime
