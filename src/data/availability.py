# src/data/availability.py — v1
"""Data availability checks — does a domain have anything to report?

A domain is available when its data source loads, at least one row carries
one of the domain's labels, and at least one of those rows has a populated
score column. Missing or unreadable sources count as unavailable.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd
from pydantic import BaseModel, ConfigDict

from neuroreport.core.errors import MissingDataSource, NoUsableData

if TYPE_CHECKING:
    from neuroreport.core.models import DomainSpec
    from neuroreport.data.base_store import BaseTabularStore

logger = logging.getLogger(__name__)

DEFAULT_SCORE_COLUMNS: list[str] = [
    "percentile",
    "raw_score",
    "scaled_score",
    "standard_score",
    "t_score",
    "score",
    "z",
    "z_score",
    "composite_score",
]


class AvailabilityResult(BaseModel):
    """Outcome of an availability check for one domain."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    domain_key: str
    available: bool
    rows: pd.DataFrame | None = None
    score_column: str | None = None
    reason: MissingDataSource | NoUsableData | None = None

    @property
    def row_count(self) -> int:
        return 0 if self.rows is None else len(self.rows)


class DataAvailabilityChecker:
    """Decide per domain whether generation should run."""

    def __init__(
        self,
        store: BaseTabularStore,
        domain_column: str = "domain",
        score_columns: list[str] | None = None,
    ) -> None:
        self._store = store
        self._domain_column = domain_column
        self._score_columns = score_columns or list(DEFAULT_SCORE_COLUMNS)

    def has_data(self, spec: DomainSpec) -> bool:
        return self.check(spec).available

    def check(self, spec: DomainSpec) -> AvailabilityResult:
        """Check a domain and return its usable rows when available."""
        try:
            frame = self._store.load(spec.data_source)
        except MissingDataSource as exc:
            return AvailabilityResult(domain_key=spec.key, available=False, reason=exc)

        rows = frame[frame[self._domain_column].isin(spec.labels)]
        if rows.empty:
            return AvailabilityResult(
                domain_key=spec.key,
                available=False,
                reason=NoUsableData(spec.key, "no rows carry its labels"),
            )

        score_column = self.primary_score_column(rows)
        if score_column is None:
            present = [c for c in self._score_columns if c in rows.columns]
            detail = (
                f"all of {', '.join(present)} are empty"
                if present
                else "no score column present"
            )
            return AvailabilityResult(
                domain_key=spec.key,
                available=False,
                reason=NoUsableData(spec.key, detail),
            )

        logger.debug(
            "Domain %s available: %d rows (score column %s)",
            spec.key, len(rows), score_column,
        )
        return AvailabilityResult(
            domain_key=spec.key,
            available=True,
            rows=rows,
            score_column=score_column,
        )

    def primary_score_column(self, rows: pd.DataFrame) -> str | None:
        """First score column, in priority order, with any populated value."""
        for column in self._score_columns:
            if column not in rows.columns:
                continue
            if populated(rows[column]).any():
                return column
        return None


def populated(values: pd.Series) -> pd.Series:
    """Boolean mask of non-missing cells; blank strings count as missing."""
    mask = values.notna()
    if not pd.api.types.is_numeric_dtype(values):
        mask &= values.astype(str).str.strip() != ""
    return mask
