# src/config/settings.py - v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for deployment-specific settings: which backend to
call, where proposals live, where HTML lands, and how the ceiling ladder
is shaped. Every field maps to an upper-case environment variable
(e.g. CEILING_LADDER, PROPOSALS_DIR).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDER ===
    llm_provider: str = "google"
    llm_model: str = "gemini-2.0-flash-exp"
    llm_temperature: float = 0.7

    # Provider API keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    google_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # === Generation ===
    ceiling_ladder: str = "65000,32000,16000"
    request_timeout_s: float = 600.0

    # === Input ===
    proposals_dir: Path = Path("data/proposals")
    instruction_file: Path = Path("scripts/system-prompt.txt")
    selection_mode: Literal["all", "changed", "missing"] = "all"
    delete_source_on_success: bool = False

    # === Output ===
    output_dir: Path = Path("public/proposal")
    summary_path: Path = Path("generation-summary.json")
    publish_base_url: str = "https://iexcelproposal.netlify.app/proposal"

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("llm_temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:  # noqa: N805
        if not 0.0 <= v <= 2.0:
            raise ValueError("llm_temperature must be within [0, 2]")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        try:
            ladder = self.ceiling_ladder_list
        except ValueError:
            errors.append(f"CEILING_LADDER must be comma-separated integers, got {self.ceiling_ladder!r}")
        else:
            if not ladder:
                errors.append("CEILING_LADDER must contain at least one ceiling")
            elif any(c <= 0 for c in ladder):
                errors.append("CEILING_LADDER values must be positive")
            elif any(a <= b for a, b in zip(ladder, ladder[1:])):
                errors.append("CEILING_LADDER must be strictly descending")

        if self.request_timeout_s <= 0:
            errors.append("REQUEST_TIMEOUT_S must be > 0")

        if not self.publish_base_url.strip():
            errors.append("PUBLISH_BASE_URL must not be empty")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def ceiling_ladder_list(self) -> list[int]:
        """Parse comma-separated ceiling ladder."""
        return [int(c.strip()) for c in self.ceiling_ladder.split(",") if c.strip()]


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
