# src/data/base_store.py — v1
"""Abstract tabular data store interface.

A store hands out one DataFrame per data source handle (e.g. "neurocog").
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pandas as pd


class BaseTabularStore(ABC):
    """Unified interface for scored test data backends."""

    @abstractmethod
    def load(self, source: str) -> pd.DataFrame:
        """Return the full table for a data source.

        Raises:
            MissingDataSource: If the source cannot be loaded.
        """
