# src/batch/selector.py - v1
"""Input selector: decide which proposal records a run (re)generates.

Each selection mode is a policy answering one question per identifier,
"is this record a member?". The selector walks the store in discovery
order, keeps the members, and applies the empty-result fallback the
policy asks for.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from proposalgen.batch.store import ProposalStore, RecordReadError
from proposalgen.core.models import SelectionMode
from proposalgen.storage.base_output_writer import BaseOutputWriter
from proposalgen.storage.layout import artifact_name

logger = logging.getLogger(__name__)


class SelectionPolicy(ABC):
    """Membership test for one selection mode."""

    mode: SelectionMode
    # Select everything when the policy matches nothing.
    fallback_to_all: bool = False

    @abstractmethod
    async def includes(self, identifier: str) -> bool:
        """Whether the record should be processed in this run."""


class AllPolicy(SelectionPolicy):
    """Every record present in the store."""

    mode: SelectionMode = "all"

    async def includes(self, identifier: str) -> bool:
        return True


class ChangedPolicy(SelectionPolicy):
    """Records whose source changed in an externally supplied revision range."""

    mode: SelectionMode = "changed"
    fallback_to_all = True

    def __init__(self, changed: Iterable[str]) -> None:
        self._changed = frozenset(changed)

    async def includes(self, identifier: str) -> bool:
        return identifier in self._changed


class MissingOutputPolicy(SelectionPolicy):
    """Records with no artifact at the expected output location yet."""

    mode: SelectionMode = "missing"

    def __init__(self, store: ProposalStore, writer: BaseOutputWriter) -> None:
        self._store = store
        self._writer = writer

    async def includes(self, identifier: str) -> bool:
        try:
            record = self._store.read_record(identifier)
        except RecordReadError as e:
            # Artifact name not derivable; let the orchestrator report it.
            logger.debug("Including %s, output location unknown: %s", identifier, e.reason)
            return True
        return not await self._writer.exists(artifact_name(record))


class InputSelector:
    """Produce the ordered, duplicate-free list of identifiers to process."""

    def __init__(self, store: ProposalStore, policy: SelectionPolicy) -> None:
        self._store = store
        self._policy = policy

    async def select(self) -> list[str]:
        """Apply the policy to every record in discovery order.

        Raises:
            StoreUnavailable: If the store cannot be listed.
        """
        identifiers = list(dict.fromkeys(self._store.list_identifiers()))
        selected = [i for i in identifiers if await self._policy.includes(i)]

        if not selected and identifiers and self._policy.fallback_to_all:
            logger.warning(
                "Selection mode '%s' matched no records, falling back to all %d",
                self._policy.mode, len(identifiers),
            )
            selected = identifiers

        logger.info(
            "Selected %d of %d record(s) (mode=%s)",
            len(selected), len(identifiers), self._policy.mode,
        )
        return selected


def create_policy(
    mode: SelectionMode,
    store: ProposalStore,
    writer: BaseOutputWriter | None = None,
    changed: Iterable[str] | None = None,
) -> SelectionPolicy:
    """Build the selection policy for a mode name.

    Raises:
        ValueError: If the mode is unknown.
    """
    if mode == "all":
        return AllPolicy()
    if mode == "changed":
        return ChangedPolicy(changed or ())
    if mode == "missing":
        if writer is None:
            logger.warning("No output store to check, selection mode 'missing' behaves as 'all'")
            return AllPolicy()
        return MissingOutputPolicy(store, writer)
    raise ValueError(f"Unknown selection mode: {mode!r}")
