# src/storage/summary.py - v1
"""Run summary persistence.

The summary is a pure serialization of the in-memory RunSummary; nothing
is recomputed at write time and the system never reads it back.
"""

from __future__ import annotations

import logging
from pathlib import Path

from proposalgen.core.models import RunSummary

logger = logging.getLogger(__name__)


def write_summary(summary: RunSummary, path: Path) -> Path:
    """Write the run summary as indented JSON, overwriting any previous one."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(summary.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Run summary written to %s", path)
    return path
