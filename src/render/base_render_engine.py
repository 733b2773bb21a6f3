# src/render/base_render_engine.py — v1
"""Abstract render engine interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class RenderResult(BaseModel):
    """Outcome of a single render pass."""

    success: bool
    output_path: Path | None = None
    message: str = ""
    duration_seconds: float = 0.0


class BaseRenderEngine(ABC):
    """Turns the report template (with its include manifest) into a document."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine identifier."""

    @abstractmethod
    async def render(self, manifest_path: Path, output_format: str) -> RenderResult:
        """Render once. Failures are reported in the result, not raised."""


class NullRenderEngine(BaseRenderEngine):
    """Engine that renders nothing; used when RENDER_ENGINE=none."""

    @property
    def name(self) -> str:
        return "none"

    async def render(self, manifest_path: Path, output_format: str) -> RenderResult:
        return RenderResult(success=False, message="rendering is disabled")
