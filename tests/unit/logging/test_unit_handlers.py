# tests/unit/logging/test_unit_handlers.py — v1
"""Tests for logging/handlers.py — size parsing and rotating handler."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from neuroreport.logging.handlers import create_rotating_handler, parse_size


class TestParseSize:
    @pytest.mark.parametrize("text,expected", [
        ("10MB", 10 * 1024**2),
        ("512kb", 512 * 1024),
        ("1.5G", int(1.5 * 1024**3)),
        ("2048", 2048),
        (" 3 MB ", 3 * 1024**2),
    ])
    def test_valid(self, text, expected):
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "ten MB", "10TB", "-1MB", "0"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_size(text)


class TestCreateRotatingHandler:
    def test_creates_parent_directory(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "neuroreport.log"
        handler = create_rotating_handler(str(log_file), rotation="1KB", retention=3)
        try:
            assert isinstance(handler, RotatingFileHandler)
            assert log_file.parent.is_dir()
            assert handler.maxBytes == 1024
            assert handler.backupCount == 3
        finally:
            handler.close()

    def test_delayed_open(self, tmp_path):
        log_file = tmp_path / "run.log"
        handler = create_rotating_handler(str(log_file), level=logging.WARNING)
        try:
            assert not log_file.exists()
            assert handler.level == logging.WARNING
        finally:
            handler.close()

    def test_negative_retention_clamped(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "x.log"), retention=-5)
        try:
            assert handler.backupCount == 0
        finally:
            handler.close()
