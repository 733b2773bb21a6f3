# src/processors/quarto_section.py — v1
"""Default domain processor: a Quarto section with a score table.

Produces a level-2 heading with a cross-reference anchor, an optional
respondent line, and a pipe table of the domain's scores. Output depends
only on its inputs, so identical data yields identical artifacts.
"""

from __future__ import annotations

import pandas as pd

from neuroreport.pipeline.plugin_kit.base_processor import BaseDomainProcessor

TABLE_COLUMNS: list[str] = [
    "test_name",
    "scale",
    "score",
    "percentile",
    "range",
]

RATER_TITLES: dict[str, str] = {
    "self": "Self-Report",
    "parent": "Parent Report",
    "teacher": "Teacher Report",
    "observer": "Observer Report",
}


class QuartoSectionProcessor(BaseDomainProcessor):
    """Render a domain's rows as a Quarto markdown section."""

    @property
    def name(self) -> str:
        return "quarto_section"

    async def process(self, domain_key: str, rows: pd.DataFrame, rater_tag: str) -> str:
        title = domain_key.replace("_", " ").title()
        anchor = f"sec-{domain_key.replace('_', '-')}"
        if rater_tag in RATER_TITLES:
            title = f"{title}: {RATER_TITLES[rater_tag]}"
            anchor = f"{anchor}-{rater_tag}"

        lines = [f"## {title} {{#{anchor}}}", ""]
        table = self.score_table(rows)
        if table:
            lines.extend(table)
            lines.extend(["", f": Scores ({len(rows)}) {{#tbl-{anchor[4:]}}}"])
        else:
            lines.append("_No tabulated scores._")
        return "\n".join(lines) + "\n"

    def score_table(self, rows: pd.DataFrame) -> list[str]:
        """Pipe-table lines for the columns that exist in ``rows``."""
        columns = [c for c in TABLE_COLUMNS if c in rows.columns]
        if "test_name" not in rows.columns and "test" in rows.columns:
            columns.insert(0, "test")
        if not columns:
            return []

        header = "| " + " | ".join(c.replace("_", " ").title() for c in columns) + " |"
        rule = "|" + "|".join("---" for _ in columns) + "|"
        body = [
            "| " + " | ".join(_cell(row[c]) for c in columns) + " |"
            for _, row in rows.iterrows()
        ]
        return [header, rule, *body]


def _cell(value: object) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).replace("|", "\\|").strip()
