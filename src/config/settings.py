# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for workspace layout, data columns, generation
behaviour, render settings and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Workspace ===
    workspace_dir: Path = Path(".")
    data_dir: Path = Path("data")
    data_format: Literal["auto", "parquet", "csv"] = "auto"

    # === Data columns ===
    domain_column: str = "domain"
    rater_column: str = "rater"
    test_column: str = "test"
    age_group_column: str = "age_group"
    score_columns: str = (
        "percentile,raw_score,scaled_score,standard_score,t_score,score,z,"
        "z_score,composite_score"
    )
    pediatric_instruments: str = (
        "wisc5,wppsi4,nepsy2,basc3_prs,basc3_trs,basc3_srp,conners4,cefi,"
        "brief2,vineland3_parent,vineland3_teacher"
    )

    # === Generation ===
    processor_class: str = (
        "neuroreport.processors.quarto_section.QuartoSectionProcessor"
    )
    artifact_prefix: str = "_02-"
    artifact_extension: str = ".qmd"
    marker_suffix: str = ".generated"
    edit_detection: Literal["mtime", "content_hash"] = "mtime"
    protect_edits: bool = True
    force_regenerate: bool = False
    lock_filename: str = ".neuroreport.lock"
    lock_reclaim_stale: bool = True
    manifest_filename: str = "_domains_to_include.qmd"

    # === Render ===
    render_engine: Literal["quarto", "none"] = "quarto"
    quarto_bin: str = "quarto"
    report_template: str = "template.qmd"
    report_format: str = "neurotyp-adult-typst"
    quarto_profile: str = ""
    render_timeout_seconds: float = 900.0
    two_stage_render: bool = True
    enrichment_command: str = ""
    enrichment_wait_seconds: float = 30.0
    output_dir: Path = Path("output")
    output_name_template: str = "{subject}_report"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: str = ""
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("marker_suffix", "artifact_extension")
    @classmethod
    def validate_suffix(cls, v: str) -> str:  # noqa: N805
        """Suffixes are appended to file names and must start with a dot."""
        if not v.startswith(".") or len(v) < 2:
            raise ValueError(f"suffix must start with '.', got {v!r}")
        return v

    @field_validator("enrichment_wait_seconds", "render_timeout_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:  # noqa: N805
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if not self.score_columns_list:
            errors.append("SCORE_COLUMNS must name at least one column")

        if self.manifest_filename.startswith(self.artifact_prefix):
            errors.append(
                "MANIFEST_FILENAME must not start with ARTIFACT_PREFIX "
                f"({self.artifact_prefix!r})"
            )

        if "{subject}" not in self.output_name_template:
            errors.append("OUTPUT_NAME_TEMPLATE must contain '{subject}'")

        if self.lock_filename in (self.manifest_filename, ""):
            errors.append("LOCK_FILENAME must be non-empty and differ from the manifest")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def score_columns_list(self) -> list[str]:
        """Parse comma-separated score columns, in priority order."""
        return [c.strip() for c in self.score_columns.split(",") if c.strip()]

    @property
    def pediatric_instruments_list(self) -> list[str]:
        """Parse comma-separated pediatric instrument prefixes (lower-cased)."""
        return [
            i.strip().lower()
            for i in self.pediatric_instruments.split(",")
            if i.strip()
        ]

    @property
    def data_path(self) -> Path:
        """Data directory resolved against the workspace."""
        return self.workspace_dir / self.data_dir

    @property
    def output_path(self) -> Path:
        """Final output directory resolved against the workspace."""
        return self.workspace_dir / self.output_dir


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-run config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
