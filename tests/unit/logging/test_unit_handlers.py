# tests/unit/logging/test_unit_handlers.py - v1
"""Tests for logging/handlers.py: file rotation handler."""

from __future__ import annotations

import pytest

from proposalgen.logging.handlers import _parse_size, create_rotating_handler


class TestParseSize:
    def test_mb(self):
        assert _parse_size("10MB") == 10 * 1024 * 1024

    def test_kb(self):
        assert _parse_size("512KB") == 512 * 1024

    def test_gb(self):
        assert _parse_size("1GB") == 1024 * 1024 * 1024

    def test_case_insensitive(self):
        assert _parse_size("10mb") == 10 * 1024 * 1024

    def test_bare_bytes(self):
        assert _parse_size("4096") == 4096
        assert _parse_size("100B") == 100

    @pytest.mark.parametrize("value", ["10bytes", "", "0MB", "MB", "-1KB"])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid size"):
            _parse_size(value)


class TestCreateRotatingHandler:
    def test_creates_handler(self, tmp_path):
        handler = create_rotating_handler(str(tmp_path / "test.log"), rotation="1MB", retention=5)
        assert handler.maxBytes == 1024 * 1024
        assert handler.backupCount == 5
        handler.close()

    def test_creates_parent_dirs_lazily_opens(self, tmp_path):
        log_file = tmp_path / "deep" / "dir" / "run.log"
        handler = create_rotating_handler(log_file)
        assert log_file.parent.is_dir()
        assert not log_file.exists()
        handler.close()
