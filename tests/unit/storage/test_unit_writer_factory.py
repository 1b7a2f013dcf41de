# tests/unit/storage/test_unit_writer_factory.py - v1
"""Tests for storage/writer_factory.py."""

from __future__ import annotations

from pathlib import Path

from proposalgen.config.settings import Settings
from proposalgen.storage.local_writer import LocalWriter
from proposalgen.storage.writer_factory import create_writer


def test_local_writer_rooted_at_output_dir(tmp_path: Path):
    writer = create_writer(Settings(_env_file=None, output_dir=tmp_path / "site"))
    assert isinstance(writer, LocalWriter)
    assert writer.location("x.html") == str(tmp_path / "site" / "x.html")
