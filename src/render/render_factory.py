# src/render/render_factory.py — v1
"""Factories for the render engine and enrichment service."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from neuroreport.render.base_render_engine import BaseRenderEngine, NullRenderEngine
from neuroreport.render.enrichment import (
    BaseEnrichmentService,
    CommandEnrichmentService,
    NullEnrichmentService,
)

if TYPE_CHECKING:
    from neuroreport.config.settings import Settings


def create_render_engine(settings: Settings) -> BaseRenderEngine:
    """Instantiate the render engine named by RENDER_ENGINE.

    Raises:
        ValueError: If the engine is unknown.
    """
    if settings.render_engine == "quarto":
        from neuroreport.render.quarto_engine import QuartoRenderEngine

        return QuartoRenderEngine(
            workdir=settings.workspace_dir,
            template=settings.report_template,
            quarto_bin=settings.quarto_bin,
            profile=settings.quarto_profile,
            timeout_seconds=settings.render_timeout_seconds,
        )
    if settings.render_engine == "none":
        return NullRenderEngine()
    raise ValueError(f"Unsupported render engine: {settings.render_engine}")


def create_enrichment_service(settings: Settings) -> BaseEnrichmentService:
    """Command-based enrichment if ENRICHMENT_COMMAND is set, else a no-op."""
    command = shlex.split(settings.enrichment_command)
    if not command:
        return NullEnrichmentService()
    return CommandEnrichmentService(command, workdir=settings.workspace_dir)
