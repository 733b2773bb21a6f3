# src/pipeline/plugin_kit/base_processor.py — v1
"""Standard domain processor interface.

A processor turns the rows of one domain (and one respondent perspective)
into the text of that domain's report artifact. The orchestrator decides
when a processor runs and where its output goes; processors never touch
the filesystem.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pandas as pd


class BaseDomainProcessor(ABC):
    """Standard interface for all domain processors."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique processor identifier."""

    @property
    def version(self) -> str:
        """Processor version (semver)."""
        return "1.0.0"

    @abstractmethod
    async def process(
        self, domain_key: str, rows: pd.DataFrame, rater_tag: str
    ) -> str:
        """Produce artifact content for a domain.

        Args:
            domain_key: Canonical domain key (e.g. "memory").
            rows: Source rows for this domain and respondent.
            rater_tag: "default" for single-variant domains, otherwise
                the respondent ("self", "parent", "teacher", "observer").

        Returns:
            Full text of the artifact.

        Raises:
            Exception: Any error is recorded as a processor failure for
                the domain; the run continues with other domains.
        """
