# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py — run and domain context variables."""

from __future__ import annotations

import asyncio

import pytest

from neuroreport.logging.context import (
    LogContext,
    clear_context,
    get_context,
    set_domain_context,
    set_run_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_empty_by_default(self):
        assert get_context().as_dict() == {}

    def test_run_context(self):
        set_run_context("Jane", "20260101_000000_abcd1234")
        ctx = get_context()
        assert ctx.subject == "Jane"
        assert ctx.run_id == "20260101_000000_abcd1234"
        assert ctx.domain is None

    def test_domain_context_replaces_rater(self):
        set_domain_context("adhd", "parent")
        set_domain_context("iq")
        assert get_context().as_dict() == {"domain": "iq"}

    def test_clear(self):
        set_run_context("Jane", "r")
        set_domain_context("iq", "self")
        clear_context()
        assert get_context() == LogContext()

    @pytest.mark.asyncio
    async def test_task_isolation(self):
        async def worker(key: str) -> str | None:
            set_domain_context(key)
            await asyncio.sleep(0)
            return get_context().domain

        results = await asyncio.gather(worker("iq"), worker("memory"))
        assert results == ["iq", "memory"]
