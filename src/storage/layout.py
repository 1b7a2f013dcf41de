# src/storage/layout.py - v2
"""Output naming conventions.

Artifact names are a pure function of the record so that re-running on
the same record always lands on the same file.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from proposalgen.core.models import ProposalRecord

ARTIFACT_EXTENSION = ".html"

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(name: str) -> str:
    """Lowercase and strip every character outside [a-z0-9]."""
    return _NON_ALNUM.sub("", name.lower())


def artifact_name(record: ProposalRecord) -> str:
    """Derive the output filename for a record.

    Prefers the normalized organization name; falls back to the identifier
    with its extension replaced when the name is absent or normalizes to
    nothing.
    """
    if record.organization_name:
        stem = normalize_name(record.organization_name)
        if stem:
            return stem + ARTIFACT_EXTENSION
    return str(PurePath(record.identifier).with_suffix(ARTIFACT_EXTENSION))


def artifact_url(base_url: str, name: str) -> str:
    """Format the published URL of an artifact (reporting only)."""
    return f"{base_url.rstrip('/')}/{name}"
