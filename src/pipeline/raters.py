# src/pipeline/raters.py — v1
"""Rater expansion — split a domain's rows by respondent perspective.

Behavioural domains are reported once per respondent (self, parent,
teacher, observer). Which respondents are eligible depends on whether the
subject is a child or an adult; the age class is inferred from the
instruments present in the data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pandas as pd

from neuroreport.core.models import AgeClass, RaterTag, RaterVariant

if TYPE_CHECKING:
    from neuroreport.core.models import DomainSpec

logger = logging.getLogger(__name__)

RATER_ORDER: tuple[RaterTag, ...] = ("self", "parent", "teacher", "observer")

ELIGIBLE_RATERS: dict[AgeClass, frozenset[str]] = {
    "adult": frozenset({"self", "observer"}),
    "child": frozenset({"self", "parent", "teacher"}),
}

RATER_ALIASES: dict[str, RaterTag] = {
    "self": "self",
    "self-report": "self",
    "self_report": "self",
    "parent": "parent",
    "caregiver": "parent",
    "teacher": "teacher",
    "observer": "observer",
    "clinician": "observer",
    "informant": "observer",
}

PEDIATRIC_AGE_GROUPS: frozenset[str] = frozenset(
    {"child", "children", "pediatric", "paediatric", "adolescent"}
)


def normalize_rater(value: object) -> str:
    """Canonical rater tag for a raw cell value; blanks mean self-report."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return "self"
    text = str(value).strip().lower()
    if not text:
        return "self"
    return RATER_ALIASES.get(text, text)


class RaterExpander:
    """Expand rater-capable domains into one variant per eligible respondent."""

    def __init__(
        self,
        pediatric_instruments: list[str] | None = None,
        rater_column: str = "rater",
        test_column: str = "test",
        age_group_column: str = "age_group",
    ) -> None:
        self._pediatric = tuple(i.lower() for i in (pediatric_instruments or []))
        self._rater_column = rater_column
        self._test_column = test_column
        self._age_group_column = age_group_column

    def detect_age_class(self, rows: pd.DataFrame) -> AgeClass:
        """Child if any row comes from a pediatric-normed instrument."""
        if self._age_group_column in rows.columns:
            groups = rows[self._age_group_column].dropna().astype(str).str.strip().str.lower()
            if groups.isin(PEDIATRIC_AGE_GROUPS).any():
                return "child"

        if self._pediatric and self._test_column in rows.columns:
            tests = rows[self._test_column].dropna().astype(str).str.strip().str.lower()
            if tests.str.startswith(self._pediatric).any():
                return "child"

        return "adult"

    def rater_column_values(self, rows: pd.DataFrame) -> pd.Series:
        """Normalized rater tag per row (all self-report without a rater column)."""
        if self._rater_column not in rows.columns:
            return pd.Series("self", index=rows.index, dtype=object)
        return rows[self._rater_column].map(normalize_rater)

    def expand(
        self,
        spec: DomainSpec,
        rows: pd.DataFrame,
        age_class: AgeClass | None = None,
    ) -> list[RaterVariant]:
        """Split rows into rater variants.

        Non rater-capable domains yield a single ``default`` variant holding
        every row. Rater-capable domains yield one variant per eligible
        respondent that has at least one row, ordered self, parent, teacher,
        observer. An empty list means no eligible respondent has data.
        """
        if not spec.rater_capable:
            return [RaterVariant(rater_tag="default", rows=rows)]

        age_class = age_class or self.detect_age_class(rows)
        eligible = ELIGIBLE_RATERS[age_class]
        tags = self.rater_column_values(rows)

        variants: list[RaterVariant] = []
        for tag in RATER_ORDER:
            if tag not in eligible:
                continue
            subset = rows[tags == tag]
            if subset.empty:
                continue
            variants.append(RaterVariant(rater_tag=tag, rows=subset))

        ignored = sorted(set(tags) - eligible)
        if ignored:
            logger.debug(
                "Domain %s (%s): ignoring respondents %s",
                spec.key, age_class, ", ".join(ignored),
            )
        return variants
