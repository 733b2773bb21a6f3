# src/render/quarto_engine.py — v1
"""Quarto render engine — runs ``quarto render <template> -t <format>``.

The template includes the manifest file, so rendering it picks up the
current set of domain artifacts. The produced document lands next to the
template and is relocated by the RenderCoordinator.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from neuroreport.render.base_render_engine import BaseRenderEngine, RenderResult

logger = logging.getLogger(__name__)

_OUTPUT_TAIL_CHARS = 2000


def output_extension(output_format: str) -> str:
    """File extension Quarto produces for a format name."""
    fmt = output_format.lower()
    if "html" in fmt or "revealjs" in fmt:
        return ".html"
    if "docx" in fmt:
        return ".docx"
    return ".pdf"


class QuartoRenderEngine(BaseRenderEngine):
    """Render the report template with the Quarto CLI."""

    def __init__(
        self,
        workdir: Path,
        template: str = "template.qmd",
        quarto_bin: str = "quarto",
        profile: str = "",
        timeout_seconds: float = 900.0,
    ) -> None:
        self._workdir = Path(workdir)
        self._template = template
        self._quarto_bin = quarto_bin
        self._profile = profile
        self._timeout = timeout_seconds

    @property
    def name(self) -> str:
        return "quarto"

    def command(self, output_format: str) -> list[str]:
        cmd = [self._quarto_bin, "render", self._template, "-t", output_format]
        if self._profile:
            cmd.extend(["--profile", self._profile])
        return cmd

    def expected_output(self, output_format: str) -> Path:
        return self._workdir / (Path(self._template).stem + output_extension(output_format))

    async def render(self, manifest_path: Path, output_format: str) -> RenderResult:
        t0 = time.perf_counter()
        if not manifest_path.is_file():
            return RenderResult(success=False, message=f"manifest not found: {manifest_path}")
        if not (self._workdir / self._template).is_file():
            return RenderResult(success=False, message=f"template not found: {self._template}")

        cmd = self.command(output_format)
        logger.info("Rendering: %s", " ".join(cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=str(self._workdir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            return RenderResult(success=False, message=f"cannot run {self._quarto_bin}: {exc}")

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self._timeout or None)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            return RenderResult(
                success=False,
                message=f"render timed out after {self._timeout:.0f}s",
                duration_seconds=round(time.perf_counter() - t0, 2),
            )

        duration = round(time.perf_counter() - t0, 2)
        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if proc.returncode != 0:
            return RenderResult(
                success=False,
                message=f"exit code {proc.returncode}: {output[-_OUTPUT_TAIL_CHARS:].strip()}",
                duration_seconds=duration,
            )

        produced = self.expected_output(output_format)
        if not produced.is_file():
            return RenderResult(
                success=False,
                message=f"render succeeded but {produced.name} was not produced",
                duration_seconds=duration,
            )

        logger.debug("Render produced %s in %.1fs", produced.name, duration)
        return RenderResult(success=True, output_path=produced, duration_seconds=duration)
