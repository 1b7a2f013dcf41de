# src/config/run_config.py - v1
"""Immutable per-run configuration handed to the orchestrator.

Built once from Settings at startup; the instruction template is read here
so every record in the run sees the same text.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from proposalgen.config.settings import ConfigurationError, Settings
from proposalgen.llm.retry import CeilingLadder


@dataclass(frozen=True)
class RunConfig:
    """Resolved configuration for one generation run."""

    provider: str
    model: str
    instruction: str
    ladder: CeilingLadder
    temperature: float = 0.7
    request_timeout_s: float = 600.0
    publish_base_url: str = ""
    summary_path: Path = Path("generation-summary.json")
    delete_source_on_success: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, instruction: str | None = None) -> RunConfig:
        """Resolve a RunConfig from settings.

        Args:
            settings: Application settings.
            instruction: Instruction text; read from settings.instruction_file if None.

        Raises:
            ConfigurationError: If the instruction file cannot be read.
        """
        if instruction is None:
            instruction = load_instruction(settings.instruction_file)
        return cls(
            provider=settings.llm_provider,
            model=settings.llm_model,
            instruction=instruction,
            ladder=CeilingLadder(tuple(settings.ceiling_ladder_list)),
            temperature=settings.llm_temperature,
            request_timeout_s=settings.request_timeout_s,
            publish_base_url=settings.publish_base_url,
            summary_path=settings.summary_path,
            delete_source_on_success=settings.delete_source_on_success,
        )


def load_instruction(path: Path) -> str:
    """Read the static instruction template. Its contents are not interpreted."""
    try:
        return Path(path).expanduser().read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read instruction file {path}: {e}") from e
