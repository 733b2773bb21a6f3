# src/render/coordinator.py — v1
"""Render coordinator — single or two-stage rendering of the report.

Two-stage mode:
  1. Start enrichment (fire-and-forget) and render once. A failure of this
     first pass is logged and tolerated.
  2. Wait a bounded, configurable period for enrichment to land.
  3. Render again. A failure here is fatal.
  4. Relocate the produced document to the output directory.

Single-stage mode performs steps 3 and 4 only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from neuroreport.core.errors import RenderFailure
from neuroreport.render.base_render_engine import RenderResult
from neuroreport.render.enrichment import NullEnrichmentService
from neuroreport.storage.layout import final_output_path
from neuroreport.storage.local_writer import LocalWriter

if TYPE_CHECKING:
    from neuroreport.render.base_render_engine import BaseRenderEngine
    from neuroreport.render.enrichment import BaseEnrichmentService
    from neuroreport.storage.base_output_writer import BaseOutputWriter

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class RenderOutcome(BaseModel):
    """What happened during a coordinated render."""

    output_path: Path
    two_stage: bool
    first_pass: RenderResult | None = None
    final_pass: RenderResult
    enrichment_started: bool = False
    waited_seconds: float = 0.0


class RenderCoordinator:
    """Run the render engine once or twice and relocate its output."""

    def __init__(
        self,
        engine: BaseRenderEngine,
        output_dir: Path,
        output_format: str,
        enrichment: BaseEnrichmentService | None = None,
        wait_seconds: float = 30.0,
        output_name_template: str = "{subject}_report",
        writer: BaseOutputWriter | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._engine = engine
        self._output_dir = Path(output_dir)
        self._format = output_format
        self._enrichment = enrichment or NullEnrichmentService()
        self._wait_seconds = wait_seconds
        self._name_template = output_name_template
        self._writer = writer or LocalWriter()
        self._sleep = sleep

    async def run(
        self, manifest_path: Path, subject: str, two_stage: bool = True
    ) -> RenderOutcome:
        """Render the report for ``subject``.

        Raises:
            RenderFailure: If the final (or only) pass fails.
        """
        first: RenderResult | None = None
        started = False
        waited = 0.0

        if two_stage:
            started = await self._enrichment.trigger(manifest_path, subject)
            first = await self._safe_render(manifest_path)
            if first.success:
                logger.info("First render pass complete (%.1fs)", first.duration_seconds)
            else:
                logger.warning("First render pass failed, continuing: %s", first.message)
            if self._wait_seconds > 0:
                logger.info("Waiting %.0fs for enrichment", self._wait_seconds)
                await self._sleep(self._wait_seconds)
                waited = self._wait_seconds

        pass_number = 2 if two_stage else 1
        final = await self._safe_render(manifest_path)
        if not final.success or final.output_path is None:
            raise RenderFailure(pass_number, final.message or "no output produced")

        destination = final_output_path(
            self._output_dir, subject, final.output_path.suffix, self._name_template
        )
        await self._writer.move(str(final.output_path), str(destination))
        logger.info("Report written to %s", destination)

        return RenderOutcome(
            output_path=destination,
            two_stage=two_stage,
            first_pass=first,
            final_pass=final,
            enrichment_started=started,
            waited_seconds=waited,
        )

    async def _safe_render(self, manifest_path: Path) -> RenderResult:
        """Render once, turning engine exceptions into a failed result."""
        try:
            return await self._engine.render(manifest_path, self._format)
        except Exception as exc:
            logger.debug("Render engine raised", exc_info=True)
            return RenderResult(success=False, message=f"{type(exc).__name__}: {exc}")
