# SPDX-License-Identifier: MIT
"""Command-line interface for migrating and comparing RiSc documents."""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any, Sequence

import logfire

from .comparison import compare
from .exceptions import RiScError, UnsupportedMigrationError
from .flat_diff import diff
from .io_utils import document_to_data, parse_document
from .migration import migrate
from .models import RiSc, UnknownRiSc
from .observability import init_logfire, logfire_level
from .runtime import Settings, load_settings
from .utils import CollectingErrorHandler

LOG_LEVELS = ["fatal", "error", "warn", "notice", "info", "debug", "trace"]

# Exit status for documents that cannot be migrated, compared or diffed
EXIT_RISC_ERROR = 2

logger = logging.getLogger(__name__)


def _print_version() -> None:
    """Print the installed package version."""
    try:
        pkg_version = version("risc-core")
    except PackageNotFoundError:  # pragma: no cover - fallback for editable installs
        pkg_version = "unknown"
    print(f"risc-core {pkg_version}")


def _configure_logging(args: argparse.Namespace, settings: Settings) -> None:
    """Configure Logfire based on verbosity flags and the configured level."""
    base = LOG_LEVELS.index(logfire_level(settings.log_level))
    index = max(0, min(len(LOG_LEVELS) - 1, base + args.verbose - args.quiet))
    init_logfire(settings.logfire_token, LOG_LEVELS[index])  # type: ignore[arg-type]
    logging.basicConfig(level=logging.DEBUG if settings.diagnostics else logging.INFO)


def _read_document(path: str) -> RiSc:
    text = Path(path).read_text(encoding="utf-8")
    handler = CollectingErrorHandler()
    document = parse_document(text, handler)
    if isinstance(document, UnknownRiSc):
        logger.warning(
            "Could not read %s as a supported RiSc: %s",
            path,
            "; ".join(handler.messages),
        )
    return document


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _cmd_migrate(args: argparse.Namespace, settings: Settings) -> None:
    """Migrate a document and print it with its migration status."""
    document = _read_document(args.file)
    target = args.target or settings.latest_supported_version
    if isinstance(document, UnknownRiSc):
        raise UnsupportedMigrationError(f"{args.file} is not a supported RiSc")
    migrated, status = migrate(document, target, args.last_published)
    _emit(
        {
            "risc": document_to_data(migrated),
            "migrationStatus": status.model_dump(mode="json", by_alias=True),
        }
    )


def _cmd_compare(args: argparse.Namespace, settings: Settings) -> None:
    """Compare two documents and print the change report."""
    change = compare(
        _read_document(args.updated), _read_document(args.old), args.last_published
    )
    _emit(change.to_payload())


def _cmd_diff(args: argparse.Namespace, settings: Settings) -> None:
    """Print the flat path diff of two raw documents."""
    base = Path(args.base).read_text(encoding="utf-8")
    head = Path(args.head).read_text(encoding="utf-8")
    _emit(diff(base, head).to_payload())


def _add_common_args(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Add CLI options shared across subcommands."""
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity; may be repeated",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Decrease log verbosity; may be repeated",
    )
    return parser


def _add_last_published_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--last-published",
        type=datetime.fromisoformat,
        default=None,
        help="ISO-8601 timestamp of the last publication, used when migrating to 4.2",
    )


def _add_migrate_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``migrate`` subcommand parser."""
    parser = subparsers.add_parser(
        "migrate",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Migrate a RiSc to a newer schema version",
    )
    parser.add_argument("file", help="Path to the RiSc document (JSON or YAML)")
    parser.add_argument(
        "--target",
        default=None,
        help="Target schema version. Defaults to the configured latest version.",
    )
    _add_last_published_arg(parser)
    parser.set_defaults(func=_cmd_migrate)
    return parser


def _add_compare_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``compare`` subcommand parser."""
    parser = subparsers.add_parser(
        "compare",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Report field-level changes between two RiSc documents",
    )
    parser.add_argument("updated", help="Path to the updated RiSc document")
    parser.add_argument("old", help="Path to the old RiSc document")
    _add_last_published_arg(parser)
    parser.set_defaults(func=_cmd_compare)
    return parser


def _add_diff_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    common: argparse.ArgumentParser,
) -> argparse.ArgumentParser:
    """Create the ``diff`` subcommand parser."""
    parser = subparsers.add_parser(
        "diff",
        parents=[common],
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Report differing paths between two raw documents",
    )
    parser.add_argument("base", help="Path to the base document")
    parser.add_argument("head", help="Path to the head document")
    parser.set_defaults(func=_cmd_diff)
    return parser


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser configured with subcommands."""
    parser = argparse.ArgumentParser(
        prog="risc-core",
        description="Migrate, compare and diff risk scorecard (RiSc) documents.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the risc-core version and exit.",
    )
    common = _add_common_args(
        argparse.ArgumentParser(
            add_help=False, formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
    )
    subparsers = parser.add_subparsers(dest="command")
    _add_migrate_subparser(subparsers, common)
    _add_compare_subparser(subparsers, common)
    _add_diff_subparser(subparsers, common)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments and dispatch to the requested subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.version:
        _print_version()
        return
    if args.command is None:
        parser.print_help()
        raise SystemExit(1)
    settings = load_settings(args.config)
    _configure_logging(args, settings)
    try:
        with logfire.span("cli.command", attributes={"command": args.command}):
            args.func(args, settings)
    except RiScError as exc:
        logger.error("%s failed: %s", args.command, exc)
        raise SystemExit(EXIT_RISC_ERROR) from exc


if __name__ == "__main__":
    main()
