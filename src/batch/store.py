# src/batch/store.py - v1
"""Proposal store: the directory of JSON proposal records.

Identifiers are the record filenames (e.g. "acme.json"), listed in sorted
order so every run discovers records the same way.
"""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from proposalgen.core.models import ProposalRecord

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"

# Fields that may carry the organization name, in priority order.
ORGANIZATION_FIELDS: tuple[str, ...] = ("company_name", "companyName")


class StoreUnavailable(Exception):
    """Raised when the proposal store cannot be listed. Fatal for the run."""


class RecordReadError(Exception):
    """Raised when a single record cannot be read or parsed."""

    def __init__(self, identifier: str, reason: str) -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Cannot read record {identifier}: {reason}")


class ProposalStore:
    """Read-side access to proposal records on the local filesystem."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root).expanduser()

    @property
    def root(self) -> Path:
        return self._root

    def list_identifiers(self) -> list[str]:
        """List record identifiers in discovery (sorted) order.

        Raises:
            StoreUnavailable: If the root is missing or unreadable.
        """
        if not self._root.is_dir():
            raise StoreUnavailable(f"Proposal store is not a directory: {self._root}")
        try:
            names = sorted(
                p.name for p in self._root.iterdir()
                if p.is_file() and p.suffix.lower() == RECORD_SUFFIX
            )
        except OSError as e:
            raise StoreUnavailable(f"Cannot list proposal store {self._root}: {e}") from e

        logger.info("Found %d proposal(s) in %s", len(names), self._root)
        return list(dict.fromkeys(names))

    def path_of(self, identifier: str) -> Path:
        return self._root / identifier

    def read_record(self, identifier: str) -> ProposalRecord:
        """Read and parse one record.

        Raises:
            RecordReadError: If the file is missing, unreadable or not a JSON object.
        """
        path = self.path_of(identifier)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RecordReadError(identifier, str(e)) from e
        if not isinstance(data, dict):
            raise RecordReadError(identifier, f"expected a JSON object, got {type(data).__name__}")

        return ProposalRecord(
            identifier=identifier,
            organization_name=_organization_name(data),
            body=data,
            source_path=path,
        )

    def delete(self, identifier: str) -> None:
        """Remove a source record. Only used by the opt-in cleanup policy."""
        self.path_of(identifier).unlink()
        logger.info("Deleted source record %s", identifier)

    def resolve_paths(self, paths: Iterable[str | Path]) -> set[str]:
        """Map externally supplied changed paths onto known record identifiers.

        Paths may be absolute or relative to the working directory; a bare
        filename is matched against the store directly. Paths outside the
        store, non-record files and deleted records are ignored.
        """
        known = set(self.list_identifiers())
        root = self._root.resolve()
        resolved: set[str] = set()
        for raw in paths:
            p = Path(str(raw).strip())
            if not str(p) or p.suffix.lower() != RECORD_SUFFIX:
                continue
            if len(p.parts) == 1:
                candidate = p.name
            elif p.resolve().parent == root:
                candidate = p.name
            else:
                continue
            if candidate in known:
                resolved.add(candidate)
        return resolved

    def modified_since(self, ref: str, repo_root: Path | None = None) -> set[str]:
        """Identifiers of records added or modified since a git revision.

        Raises:
            StoreUnavailable: If git is unavailable or the ref cannot be diffed.
        """
        cwd = repo_root or self._root
        try:
            proc = subprocess.run(
                ["git", "-C", str(cwd), "rev-parse", "--show-toplevel"],
                capture_output=True, text=True, check=True, timeout=30,
            )
            toplevel = Path(proc.stdout.strip())
            proc = subprocess.run(
                ["git", "-C", str(toplevel), "diff", "--name-only",
                 "--diff-filter=ACMR", ref, "--", str(self._root.resolve())],
                capture_output=True, text=True, check=True, timeout=30,
            )
        except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            detail = getattr(e, "stderr", None) or str(e)
            raise StoreUnavailable(f"Cannot diff proposals against {ref!r}: {detail.strip()}") from e

        changed = [toplevel / line.strip() for line in proc.stdout.splitlines() if line.strip()]
        logger.debug("git diff %s reported %d changed path(s)", ref, len(changed))
        return self.resolve_paths(changed)


def _organization_name(data: dict) -> str | None:
    for key in ORGANIZATION_FIELDS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
