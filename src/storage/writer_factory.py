# src/storage/writer_factory.py - v3
"""Factory: instantiate the output writer from configuration."""

from __future__ import annotations

from proposalgen.config.settings import Settings
from proposalgen.storage.base_output_writer import BaseOutputWriter
from proposalgen.storage.local_writer import LocalWriter


def create_writer(settings: Settings) -> BaseOutputWriter:
    """Create the output writer rooted at settings.output_dir."""
    return LocalWriter(base_path=settings.output_dir)
