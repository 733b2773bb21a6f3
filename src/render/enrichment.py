# src/render/enrichment.py — v1
"""Enrichment services — out-of-process summary generation.

Enrichment writes narrative summaries that the report picks up on its
second render pass. It is fire-and-forget: the coordinator starts it and
waits a bounded time, it never awaits completion.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class BaseEnrichmentService(ABC):
    """Asynchronous content enrichment trigger."""

    @abstractmethod
    async def trigger(self, manifest_path: Path, subject: str) -> bool:
        """Start enrichment. Returns False if it could not be started."""


class NullEnrichmentService(BaseEnrichmentService):
    """No enrichment configured."""

    async def trigger(self, manifest_path: Path, subject: str) -> bool:
        logger.debug("No enrichment service configured")
        return False


class CommandEnrichmentService(BaseEnrichmentService):
    """Launch an external command in the background.

    The manifest path and subject are appended as the last two arguments.
    The process is detached into its own session so it survives the run.
    """

    def __init__(self, command: list[str], workdir: Path | None = None) -> None:
        if not command:
            raise ValueError("enrichment command must not be empty")
        self._command = list(command)
        self._workdir = workdir
        self._process: asyncio.subprocess.Process | None = None

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        return self._process

    async def trigger(self, manifest_path: Path, subject: str) -> bool:
        args = [*self._command, str(manifest_path), subject]
        try:
            self._process = await asyncio.create_subprocess_exec(
                *args,
                cwd=str(self._workdir) if self._workdir else None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.warning("Could not start enrichment %s: %s", self._command[0], exc)
            return False
        logger.info("Started enrichment (pid %d)", self._process.pid)
        return True
