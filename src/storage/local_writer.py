# src/storage/local_writer.py - v3
"""Local filesystem output writer (default backend)."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from proposalgen.storage.base_output_writer import ArtifactWriteError, BaseOutputWriter

logger = logging.getLogger(__name__)


class LocalWriter(BaseOutputWriter):
    """Write artifacts into a local directory."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        """Initialize with optional base path.

        Args:
            base_path: Root directory for all writes. If None, paths are used as given.
        """
        self._base = Path(base_path).expanduser() if base_path else None

    def _resolve(self, path: str) -> Path:
        """Resolve a path relative to base_path."""
        if self._base is not None:
            return self._base / path
        return Path(path)

    def location(self, path: str) -> str:
        return str(self._resolve(path))

    async def write(self, path: str, content: bytes | str) -> str:
        """Write content through a temp file so a failed write never leaves half a file."""
        p = self._resolve(path)
        data = content.encode("utf-8") if isinstance(content, str) else content
        tmp_name: str | None = None
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=p.parent, prefix=f".{p.name}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, p)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ArtifactWriteError(str(p), str(e)) from e
        logger.debug("Wrote %s (%d bytes)", p, len(data))
        return self.location(path)

    async def exists(self, path: str) -> bool:
        """Check if a local path exists."""
        return self._resolve(path).is_file()
