# tests/unit/storage/test_unit_summary.py - v1
"""Tests for storage/summary.py."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from proposalgen.core.models import RecordResult, RunSummary
from proposalgen.storage.summary import write_summary


def test_write_summary_creates_parent_and_overwrites(tmp_path: Path):
    path = tmp_path / "reports" / "generation-summary.json"
    path.parent.mkdir()
    path.write_text("stale", encoding="utf-8")
    summary = RunSummary(
        run_id="r1",
        timestamp=datetime(2026, 10, 19, tzinfo=timezone.utc),
        provider="google",
        model="gemini-2.0-flash-exp",
        selection_mode="changed",
        results=[RecordResult(identifier="a.json", status="success", url="https://x/a.html")],
    )

    written = write_summary(summary, path)

    assert written == path
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["run_id"] == "r1"
    assert data["selection_mode"] == "changed"
    assert data["timestamp"].startswith("2026-10-19T00:00:00")
    assert data["results"][0]["url"] == "https://x/a.html"


def test_write_summary_new_directory(tmp_path: Path):
    summary = RunSummary(
        run_id="r2", timestamp=datetime.now(timezone.utc),
        provider="p", model="m", selection_mode="all",
    )
    path = write_summary(summary, tmp_path / "a" / "b" / "s.json")
    assert json.loads(path.read_text(encoding="utf-8"))["processed"] == 0
