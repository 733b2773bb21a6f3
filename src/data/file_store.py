# src/data/file_store.py — v1
"""File-backed tabular store: data/<source>.parquet or data/<source>.csv.

Each source is read at most once per store instance; load failures are
cached too, so a missing file is reported once and not retried per domain.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import pandas as pd

from neuroreport.core.errors import MissingDataSource
from neuroreport.data.base_store import BaseTabularStore

logger = logging.getLogger(__name__)

_EXTENSIONS: dict[str, str] = {"parquet": ".parquet", "csv": ".csv"}


class FileTabularStore(BaseTabularStore):
    """Load scored test tables from a data directory."""

    def __init__(
        self,
        data_dir: Path,
        data_format: Literal["auto", "parquet", "csv"] = "auto",
        domain_column: str = "domain",
    ) -> None:
        self._data_dir = Path(data_dir)
        self._format = data_format
        self._domain_column = domain_column
        self._frames: dict[str, pd.DataFrame] = {}
        self._failures: dict[str, MissingDataSource] = {}

    def source_path(self, source: str) -> Path | None:
        """Resolve the file backing a source, or None if absent."""
        formats = ["parquet", "csv"] if self._format == "auto" else [self._format]
        for fmt in formats:
            candidate = self._data_dir / f"{source}{_EXTENSIONS[fmt]}"
            if candidate.is_file():
                return candidate
        return None

    def load(self, source: str) -> pd.DataFrame:
        if source in self._frames:
            return self._frames[source]
        if source in self._failures:
            raise self._failures[source]

        try:
            frame = self._read(source)
        except MissingDataSource as exc:
            self._failures[source] = exc
            logger.warning("%s", exc)
            raise

        self._frames[source] = frame
        logger.info("Loaded data source '%s': %d rows", source, len(frame))
        return frame

    def _read(self, source: str) -> pd.DataFrame:
        path = self.source_path(source)
        if path is None:
            raise MissingDataSource(source, f"no file in {self._data_dir}")

        try:
            if path.suffix == ".parquet":
                frame = pd.read_parquet(path)
            else:
                frame = pd.read_csv(path)
        except (OSError, ValueError, ImportError) as exc:
            raise MissingDataSource(source, f"cannot read {path.name}: {exc}") from exc

        if self._domain_column not in frame.columns:
            raise MissingDataSource(
                source, f"{path.name} has no '{self._domain_column}' column"
            )
        return frame
