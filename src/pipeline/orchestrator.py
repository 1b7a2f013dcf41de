# src/pipeline/orchestrator.py - v2
"""Generation orchestrator: one record at a time, from request to artifact.

For each selected record:
  1. read the record and build the request at the largest ceiling
  2. walk the ceiling ladder against the backend
  3. normalize and validate the returned HTML
  4. write it under the name derived from the record
  5. append a RecordResult to the run summary

Records are processed strictly sequentially in selector order. Every
per-record error ends up as a failure result; nothing aborts the loop.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from proposalgen.batch.store import ProposalStore, RecordReadError
from proposalgen.config.run_config import RunConfig
from proposalgen.core.models import RecordResult, RunSummary, SelectionMode
from proposalgen.llm.base_client import BaseLLMClient
from proposalgen.llm.retry import generate_with_ladder
from proposalgen.logging.context import set_record_context, set_run_context
from proposalgen.pipeline.html_output import InvalidOutputShape, normalize_html, validate_html
from proposalgen.pipeline.prompt_builder import build_request
from proposalgen.storage.base_output_writer import ArtifactWriteError, BaseOutputWriter
from proposalgen.storage.layout import artifact_name, artifact_url
from proposalgen.storage.summary import write_summary

logger = logging.getLogger(__name__)


def new_run_id() -> str:
    """Run id like 20261019_142501_a1b2c."""
    now = datetime.now(timezone.utc)
    return f"{now.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:5]}"


class GenerationOrchestrator:
    """Drive the generation backend over a sequence of record identifiers.

    Args:
        config: Immutable run configuration.
        client: Generation backend.
        store: Source of proposal records.
        writer: Output store for artifacts.
    """

    def __init__(
        self,
        config: RunConfig,
        client: BaseLLMClient,
        store: ProposalStore,
        writer: BaseOutputWriter,
    ) -> None:
        self._config = config
        self._client = client
        self._store = store
        self._writer = writer

    async def run(
        self,
        identifiers: Sequence[str],
        selection_mode: SelectionMode = "all",
        run_id: str | None = None,
        write: bool = True,
    ) -> RunSummary:
        """Process every identifier in order and write the run summary.

        The summary is written even when records failed; callers read
        summary.exit_code to decide the process status.
        """
        run_id = run_id or new_run_id()
        set_run_context(run_id)
        t0 = time.monotonic()
        summary = RunSummary(
            run_id=run_id,
            timestamp=datetime.now(timezone.utc),
            provider=self._config.provider,
            model=self._config.model,
            selection_mode=selection_mode,
        )

        total = len(identifiers)
        if not total:
            logger.info("Nothing to do: no records selected")
        for index, identifier in enumerate(identifiers, start=1):
            set_record_context(identifier)
            logger.info("[%d/%d] Processing %s", index, total, identifier)
            result = await self.process_record(identifier)
            summary.results.append(result)
            self._report(result)
        set_record_context(None)

        summary.duration_seconds = round(time.monotonic() - t0, 2)
        self._report_tally(summary)
        if write:
            write_summary(summary, self._config.summary_path)
        return summary

    async def process_record(self, identifier: str) -> RecordResult:
        """Process one record to completion. Never raises for per-record errors."""
        try:
            record = self._store.read_record(identifier)
        except RecordReadError as e:
            return _failure(identifier, "unreadable_record", e.reason)

        request = build_request(
            self._config.instruction,
            record,
            max_tokens=self._config.ladder.initial,
            temperature=self._config.temperature,
        )
        ladder_result = await generate_with_ladder(
            self._client, request, self._config.ladder, self._config.request_timeout_s,
        )
        outcome = ladder_result.outcome
        attempts = ladder_result.attempts

        if outcome.kind == "rejected":
            return _failure(identifier, "rejected", outcome.reason, attempts=attempts)
        if ladder_result.exhausted:
            reason = f"All {len(attempts)} ceiling(s) failed; last error: {outcome.reason}"
            return _failure(identifier, "retry_exhausted", reason, attempts=attempts)

        truncated = outcome.kind == "truncated"
        try:
            # Truncated text is kept as-is; only emptiness is checked.
            html = normalize_html(outcome.text, validate=not truncated)
            if truncated and not html:
                validate_html(html)
        except InvalidOutputShape as e:
            return _failure(identifier, "invalid_output_shape", str(e), attempts=attempts)

        name = artifact_name(record)
        try:
            path = await self._writer.write(name, html)
        except ArtifactWriteError as e:
            return _failure(
                identifier, "artifact_write_failure", e.reason,
                attempts=attempts, artifact_name=name,
            )

        result = RecordResult(
            identifier=identifier,
            status="success",
            artifact_name=name,
            artifact_path=path,
            url=artifact_url(self._config.publish_base_url, name),
            truncated=truncated,
            reason=outcome.reason if truncated else None,
            size_bytes=len(html.encode("utf-8")),
            attempts=attempts,
        )

        if self._config.delete_source_on_success and not truncated:
            try:
                self._store.delete(identifier)
                result.source_deleted = True
            except OSError as e:
                logger.warning("Could not delete source record %s: %s", identifier, e)

        return result

    def _report(self, result: RecordResult) -> None:
        if result.failed:
            logger.error(
                "Failed %s (%s): %s", result.identifier, result.error_kind, result.reason,
            )
        elif result.truncated:
            logger.warning(
                "Generated %s -> %s (%d bytes) but output was TRUNCATED",
                result.identifier, result.artifact_name, result.size_bytes,
            )
        else:
            logger.info(
                "Generated %s -> %s (%d bytes)",
                result.identifier, result.artifact_name, result.size_bytes,
            )

    def _report_tally(self, summary: RunSummary) -> None:
        logger.info(
            "Run %s complete: %d processed, %d succeeded, %d failed, %d truncated in %.1fs",
            summary.run_id, summary.processed, summary.succeeded, summary.failed,
            summary.truncated, summary.duration_seconds,
        )
        for failure in summary.failures:
            logger.error("  %s: %s", failure.identifier, failure.reason)


def _failure(
    identifier: str,
    error_kind: str,
    reason: str | None,
    **fields: object,
) -> RecordResult:
    return RecordResult(
        identifier=identifier,
        status="failure",
        error_kind=error_kind,  # type: ignore[arg-type]
        reason=reason or error_kind,
        **fields,  # type: ignore[arg-type]
    )
