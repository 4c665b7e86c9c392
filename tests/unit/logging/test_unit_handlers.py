# tests/unit/logging/test_unit_handlers.py — v1
"""Tests for logging/handlers.py: size parsing and rotating handler."""

from __future__ import annotations

import pytest

from aliaslookup.logging.handlers import create_rotating_handler, parse_size


class TestParseSize:
    @pytest.mark.parametrize("text,expected", [
        ("1KB", 1024),
        ("1MB", 1024**2),
        ("2 gb", 2 * 1024**3),
    ])
    def test_valid(self, text, expected):
        assert parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "10", "MB", "1TB"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_size(text)


class TestCreateRotatingHandler:
    def test_creates_parent(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "a" / "log.txt", rotation="1KB", retention=2)
        try:
            assert (tmp_path / "a").is_dir()
            assert handler.maxBytes == 1024
            assert handler.backupCount == 2
        finally:
            handler.close()
