# tests/unit/storage/test_unit_layout.py - v1
"""Tests for storage/layout.py: artifact naming and URLs."""

from __future__ import annotations

from pathlib import Path

import pytest

from proposalgen.core.models import ProposalRecord
from proposalgen.storage.layout import artifact_name, artifact_url, normalize_name


def _record(identifier: str = "acme.json", name: str | None = "Acme Corp.") -> ProposalRecord:
    return ProposalRecord(
        identifier=identifier, organization_name=name, body={}, source_path=Path(identifier),
    )


@pytest.mark.parametrize("raw,expected", [
    ("Acme Corp.", "acmecorp"),
    ("Globex & Co", "globexco"),
    ("ACME-2024 Ltd", "acme2024ltd"),
    ("Café Müller", "cafmller"),
    ("!!!", ""),
])
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


def test_normalize_is_idempotent():
    once = normalize_name("Big Bang Theory, Inc.")
    assert normalize_name(once) == once


def test_artifact_name_from_organization():
    assert artifact_name(_record()) == "acmecorp.html"


def test_artifact_name_is_deterministic():
    assert artifact_name(_record()) == artifact_name(_record())


def test_artifact_name_falls_back_to_identifier():
    assert artifact_name(_record("client-42.json", None)) == "client-42.html"


def test_artifact_name_fallback_when_name_normalizes_to_nothing():
    assert artifact_name(_record("odd.json", "***")) == "odd.html"


@pytest.mark.parametrize("base", [
    "https://iexcelproposal.netlify.app/proposal",
    "https://iexcelproposal.netlify.app/proposal/",
])
def test_artifact_url(base):
    assert artifact_url(base, "acmecorp.html") == (
        "https://iexcelproposal.netlify.app/proposal/acmecorp.html"
    )
