# tests/unit/render/test_unit_quarto_engine.py — v1
"""Tests for render/quarto_engine.py — QuartoRenderEngine.

A small shell script stands in for the quarto binary.
"""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

from neuroreport.render.quarto_engine import QuartoRenderEngine, output_extension

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")


def _fake_quarto(tmp_path: Path, body: str) -> Path:
    script = tmp_path / "fake-quarto"
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(script.stat().st_mode | stat.S_IEXEC)
    return script


@pytest.fixture
def project(workspace) -> Path:
    (workspace / "template.qmd").write_text("---\ntitle: Report\n---\n")
    (workspace / "_domains_to_include.qmd").write_text("")
    return workspace


class TestOutputExtension:
    @pytest.mark.parametrize("fmt,ext", [
        ("neurotyp-adult-typst", ".pdf"),
        ("typst", ".pdf"),
        ("html", ".html"),
        ("docx", ".docx"),
    ])
    def test_extension(self, fmt, ext):
        assert output_extension(fmt) == ext


class TestCommand:
    def test_command_line(self, workspace):
        engine = QuartoRenderEngine(workspace, quarto_bin="quarto", profile="draft")
        assert engine.command("typst") == [
            "quarto", "render", "template.qmd", "-t", "typst", "--profile", "draft",
        ]


class TestRender:
    @pytest.mark.asyncio
    async def test_success(self, project, tmp_path):
        quarto = _fake_quarto(tmp_path, 'echo "rendering $2 as $4"\ntouch template.pdf\n')
        engine = QuartoRenderEngine(project, quarto_bin=str(quarto))
        result = await engine.render(project / "_domains_to_include.qmd", "typst")
        assert result.success is True
        assert result.output_path == project / "template.pdf"

    @pytest.mark.asyncio
    async def test_nonzero_exit(self, project, tmp_path):
        quarto = _fake_quarto(tmp_path, 'echo "ERROR: typst failed"\nexit 3\n')
        engine = QuartoRenderEngine(project, quarto_bin=str(quarto))
        result = await engine.render(project / "_domains_to_include.qmd", "typst")
        assert result.success is False
        assert "exit code 3" in result.message
        assert "typst failed" in result.message

    @pytest.mark.asyncio
    async def test_no_output_produced(self, project, tmp_path):
        quarto = _fake_quarto(tmp_path, "exit 0\n")
        engine = QuartoRenderEngine(project, quarto_bin=str(quarto))
        result = await engine.render(project / "_domains_to_include.qmd", "typst")
        assert result.success is False
        assert "template.pdf" in result.message

    @pytest.mark.asyncio
    async def test_missing_binary(self, project, tmp_path):
        engine = QuartoRenderEngine(project, quarto_bin=str(tmp_path / "no-such-quarto"))
        result = await engine.render(project / "_domains_to_include.qmd", "typst")
        assert result.success is False
        assert "cannot run" in result.message

    @pytest.mark.asyncio
    async def test_missing_manifest(self, project):
        engine = QuartoRenderEngine(project)
        result = await engine.render(project / "absent.qmd", "typst")
        assert result.success is False
        assert "manifest" in result.message

    @pytest.mark.asyncio
    async def test_missing_template(self, workspace):
        manifest = workspace / "_domains_to_include.qmd"
        manifest.write_text("")
        result = await QuartoRenderEngine(workspace).render(manifest, "typst")
        assert "template" in result.message

    @pytest.mark.asyncio
    async def test_timeout(self, project, tmp_path):
        quarto = _fake_quarto(tmp_path, "exec sleep 5\n")
        engine = QuartoRenderEngine(project, quarto_bin=str(quarto), timeout_seconds=0.2)
        result = await engine.render(project / "_domains_to_include.qmd", "typst")
        assert result.success is False
        assert "timed out" in result.message
