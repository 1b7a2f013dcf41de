# tests/conftest.py - v1
"""Shared test fixtures for unit and integration tests.

Provides a scripted mock backend, sample proposal directories and a
ready-made RunConfig. No network access: every backend call is mocked.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from proposalgen.config.run_config import RunConfig
from proposalgen.llm.retry import CeilingLadder
from proposalgen.logging.context import clear_context
from tests.helpers import MockLLMClient, write_proposal


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()


@pytest.fixture
def mock_llm() -> MockLLMClient:
    return MockLLMClient()


@pytest.fixture
def proposals_dir(tmp_path: Path) -> Path:
    """Two proposals: Acme (company_name) and Globex (companyName)."""
    d = tmp_path / "proposals"
    write_proposal(d, "acme.json", {"company_name": "Acme Corp.", "scope": "Website"})
    write_proposal(d, "globex.json", {"companyName": "Globex & Co", "scope": "Ads"})
    return d


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "public" / "proposal"
    out.mkdir(parents=True)
    return out


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    return RunConfig(
        provider="mock",
        model="mock-model",
        instruction="Format the proposal as a single HTML page.",
        ladder=CeilingLadder((65000, 32000, 16000)),
        temperature=0.7,
        request_timeout_s=5.0,
        publish_base_url="https://example.test/proposal",
        summary_path=tmp_path / "generation-summary.json",
    )
