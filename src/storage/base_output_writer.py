# src/storage/base_output_writer.py - v2
"""Abstract output writer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ArtifactWriteError(Exception):
    """Raised when the output store rejects a write."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write {path}: {reason}")


class BaseOutputWriter(ABC):
    """Unified interface for output storage backends, keyed by artifact name."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> str:
        """Create or overwrite path. Returns the location written.

        Raises:
            ArtifactWriteError: If the store rejects the write.
        """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    def location(self, path: str) -> str:
        """Return the display location of path (file path, URI, ...)."""
