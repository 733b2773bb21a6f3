# tests/unit/render/test_unit_enrichment.py — v1
"""Tests for render/enrichment.py and render/render_factory.py."""

from __future__ import annotations

import sys

import pytest

from neuroreport.config.settings import Settings
from neuroreport.render.base_render_engine import NullRenderEngine
from neuroreport.render.enrichment import (
    CommandEnrichmentService,
    NullEnrichmentService,
)
from neuroreport.render.quarto_engine import QuartoRenderEngine
from neuroreport.render.render_factory import (
    create_enrichment_service,
    create_render_engine,
)


class TestNullEnrichment:
    @pytest.mark.asyncio
    async def test_trigger_reports_not_started(self, tmp_path):
        assert await NullEnrichmentService().trigger(tmp_path / "m.qmd", "Jane") is False


class TestCommandEnrichment:
    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            CommandEnrichmentService([])

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")
    async def test_starts_detached_process(self, tmp_path):
        out = tmp_path / "args.txt"
        service = CommandEnrichmentService(
            ["/bin/sh", "-c", f'echo "$0 $1" > {out}'], workdir=tmp_path
        )
        started = await service.trigger(tmp_path / "m.qmd", "Jane")
        assert started is True
        await service.process.wait()
        assert out.read_text().strip() == f"{tmp_path / 'm.qmd'} Jane"

    @pytest.mark.asyncio
    async def test_missing_program(self, tmp_path):
        service = CommandEnrichmentService([str(tmp_path / "no-such-program")])
        assert await service.trigger(tmp_path / "m.qmd", "Jane") is False


class TestFactory:
    def test_quarto_engine(self, tmp_path):
        settings = Settings(_env_file=None, workspace_dir=tmp_path, quarto_bin="/opt/quarto")
        engine = create_render_engine(settings)
        assert isinstance(engine, QuartoRenderEngine)
        assert engine.command("typst")[0] == "/opt/quarto"

    def test_none_engine(self):
        assert isinstance(
            create_render_engine(Settings(_env_file=None, render_engine="none")),
            NullRenderEngine,
        )

    def test_no_enrichment_by_default(self):
        assert isinstance(
            create_enrichment_service(Settings(_env_file=None)), NullEnrichmentService
        )

    def test_command_enrichment_parsed(self):
        settings = Settings(
            _env_file=None, enrichment_command="python -m summaries --model 'llama 3'"
        )
        assert isinstance(create_enrichment_service(settings), CommandEnrichmentService)

    @pytest.mark.asyncio
    async def test_null_engine_never_succeeds(self, tmp_path):
        result = await NullRenderEngine().render(tmp_path / "m.qmd", "typst")
        assert result.success is False
