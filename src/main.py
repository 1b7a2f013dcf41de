# src/main.py - v3
"""CLI entry point: generate and select commands.

Usage:
    proposalgen generate [--mode all|changed|missing] [options]
    proposalgen select [--mode all|changed|missing] [options]

Exit codes: 0 when every selected record succeeded (or nothing was
selected), 1 when at least one record failed, 2 on a fatal error before
any record was attempted, 130 when interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from proposalgen.config.settings import ConfigurationError, Settings, load_settings
from proposalgen.logging.logger import setup_logging
from proposalgen.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RECORD_FAILURES = 1
EXIT_FATAL = 2


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_RECORD_FAILURES

    try:
        settings = load_settings(**_settings_overrides(args))
    except (ConfigurationError, ValidationError) as exc:
        setup_logging(level="INFO", log_format="text")
        logger.error("Invalid configuration: %s", exc)
        return EXIT_FATAL

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    from proposalgen.batch.store import StoreUnavailable
    from proposalgen.llm.client_factory import UnsupportedProviderError

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except (StoreUnavailable, ConfigurationError, UnsupportedProviderError) as exc:
        logger.error("Fatal: %s", exc)
        return EXIT_FATAL


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="proposalgen",
        description=f"proposalgen v{__version__} - generate HTML proposals with an LLM",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- generate ---
    p_generate = subparsers.add_parser(
        "generate", help="Generate HTML for the selected proposals",
    )
    _add_selection_args(p_generate)
    p_generate.add_argument("--provider", default=None, help="LLM provider (default: LLM_PROVIDER)")
    p_generate.add_argument("--model", default=None, help="Model name (default: LLM_MODEL)")
    p_generate.add_argument(
        "--instruction-file", type=Path, default=None,
        help="Instruction template prepended to every prompt",
    )
    p_generate.add_argument(
        "--summary", type=Path, default=None,
        help="Where to write the JSON run summary",
    )
    p_generate.add_argument(
        "--ladder", default=None,
        help="Comma-separated, strictly descending output ceilings (e.g. 65000,32000,16000)",
    )
    p_generate.add_argument(
        "--timeout", type=float, default=None,
        help="Per-attempt timeout in seconds",
    )
    p_generate.add_argument(
        "--delete-source", action="store_true", default=None,
        help="Delete each source record after a clean, complete generation",
    )
    p_generate.set_defaults(func=_cmd_generate)

    # --- select ---
    p_select = subparsers.add_parser(
        "select", help="Show which proposals would be generated (no API calls)",
    )
    _add_selection_args(p_select)
    p_select.set_defaults(func=_cmd_select)

    return parser


def _add_selection_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--mode", choices=["all", "changed", "missing"], default=None,
        help="Selection mode (default: 'changed' when a changed-set flag is given, else SELECTION_MODE or 'all')",
    )
    p.add_argument(
        "--changed", nargs="*", default=None, metavar="PATH",
        help="Changed proposal paths (mode 'changed')",
    )
    p.add_argument(
        "--changed-file", type=Path, default=None,
        help="File listing changed paths, one per line; '-' reads stdin (mode 'changed')",
    )
    p.add_argument(
        "--since", default=None, metavar="REF",
        help="Git revision; proposals changed since REF are selected (mode 'changed')",
    )
    p.add_argument("--proposals-dir", type=Path, default=None, help="Proposal JSON directory")
    p.add_argument("-o", "--output-dir", type=Path, default=None, help="HTML output directory")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def _settings_overrides(args: argparse.Namespace) -> dict[str, object]:
    """Map CLI flags onto Settings fields; unset flags defer to env/.env.

    Any changed-set flag without an explicit --mode selects mode 'changed'.
    """
    mapping = {
        "mode": "selection_mode",
        "proposals_dir": "proposals_dir",
        "output_dir": "output_dir",
        "provider": "llm_provider",
        "model": "llm_model",
        "instruction_file": "instruction_file",
        "summary": "summary_path",
        "ladder": "ceiling_ladder",
        "timeout": "request_timeout_s",
        "delete_source": "delete_source_on_success",
    }
    overrides: dict[str, object] = {
        field: getattr(args, flag)
        for flag, field in mapping.items()
        if getattr(args, flag, None) is not None
    }
    if "selection_mode" not in overrides and _has_changed_input(args):
        overrides["selection_mode"] = "changed"
    return overrides


def _has_changed_input(args: argparse.Namespace) -> bool:
    """Whether any of --changed, --changed-file or --since was given."""
    return (
        getattr(args, "changed", None) is not None
        or getattr(args, "changed_file", None) is not None
        or bool(getattr(args, "since", None))
    )


async def _select(args: argparse.Namespace, settings: Settings):
    """Build the store and writer and run the selector."""
    from proposalgen.batch.selector import InputSelector, create_policy
    from proposalgen.batch.store import ProposalStore
    from proposalgen.storage.writer_factory import create_writer

    store = ProposalStore(settings.proposals_dir)
    writer = create_writer(settings)
    changed = None
    if settings.selection_mode == "changed":
        changed = _changed_identifiers(args, store)
    elif _has_changed_input(args):
        logger.warning(
            "--changed, --changed-file and --since are ignored in selection mode '%s'",
            settings.selection_mode,
        )
    policy = create_policy(settings.selection_mode, store, writer=writer, changed=changed)
    identifiers = await InputSelector(store, policy).select()
    return store, writer, identifiers


def _changed_identifiers(args: argparse.Namespace, store) -> set[str]:
    """Collect changed identifiers from --changed, --changed-file and --since."""
    paths: list[str] = list(args.changed or [])
    if args.changed_file is not None:
        if str(args.changed_file) == "-":
            text = sys.stdin.read()
        else:
            try:
                text = args.changed_file.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigurationError(f"Cannot read changed-file {args.changed_file}: {e}") from e
        paths.extend(line for line in text.splitlines() if line.strip())

    identifiers = store.resolve_paths(paths)
    if args.since:
        identifiers |= store.modified_since(args.since)
    return identifiers


async def _cmd_generate(args: argparse.Namespace, settings: Settings) -> int:
    """Select proposals and generate their HTML."""
    from proposalgen.config.run_config import RunConfig
    from proposalgen.llm.client_factory import create_llm_client
    from proposalgen.pipeline.orchestrator import GenerationOrchestrator

    config = RunConfig.from_settings(settings)
    client = create_llm_client(config.provider, config.model, settings)
    store, writer, identifiers = await _select(args, settings)

    orchestrator = GenerationOrchestrator(config, client, store, writer)
    try:
        summary = await orchestrator.run(identifiers, selection_mode=settings.selection_mode)
    except OSError as e:
        logger.error("Could not write run summary to %s: %s", config.summary_path, e)
        return EXIT_FATAL

    print("\n=== Generation complete ===")
    print(f"  Processed:  {summary.processed}")
    print(f"  Succeeded:  {summary.succeeded}")
    print(f"  Failed:     {summary.failed}")
    print(f"  Truncated:  {summary.truncated}")
    print(f"  Duration:   {summary.duration_seconds:.1f}s")
    for result in summary.results:
        if result.url:
            print(f"  {result.identifier} -> {result.url}")
    if summary.failures:
        print("\nFailed records:")
        for result in summary.failures:
            print(f"  {result.identifier}: [{result.error_kind}] {result.reason}")
    return summary.exit_code


async def _cmd_select(args: argparse.Namespace, settings: Settings) -> int:
    """Print the selected proposals and their artifact names."""
    from proposalgen.batch.store import RecordReadError
    from proposalgen.storage.layout import artifact_name

    store, _, identifiers = await _select(args, settings)
    print(f"\n{len(identifiers)} proposal(s) selected (mode={settings.selection_mode}):")
    for identifier in identifiers:
        try:
            name = artifact_name(store.read_record(identifier))
        except RecordReadError:
            name = "<unreadable>"
        print(f"  {identifier} -> {name}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
