"""Command-line entry point: ``gummibaum expand`` and ``gummibaum template``.

Usage
-----
gummibaum expand --file letter.tex --csv people.csv --row NAME=name [--fan-out --out letters]
gummibaum template report.tex [table.tex ...] --csv people.csv --const TITLE=Report

Notes
-----
Argument defaults come from ``gummibaum.settings.RuntimeSettings`` (the
environment and an optional ``.env`` file). Any ``AppError`` aborts the run
with a diagnostic on stderr naming the failing stage and exit status 1.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape as markup_escape

from gummibaum.config import LOG_FILENAME_EXPAND, LOG_FILENAME_TEMPLATE
from gummibaum.exceptions import AppError
from gummibaum.pipeline.expansion.processor import OutputMode
from gummibaum.pipeline.expansion.runner import (
    ExpandOptions,
    configure_logging,
    run_expand,
)
from gummibaum.pipeline.templating.runner import TemplateOptions, run_template
from gummibaum.settings import RuntimeSettings

logger = logging.getLogger(__name__)

_STAGE_LABELS = {
    "parse": "parse error",
    "lookup": "lookup error",
    "io": "I/O error",
    "usage": "usage error",
    "config": "configuration error",
}


def build_parser(settings: RuntimeSettings) -> argparse.ArgumentParser:
    """Build the argument parser with defaults taken from ``settings``."""
    parser = argparse.ArgumentParser(
        prog="gummibaum",
        description="Expand LaTeX documents with constants and CSV data.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    expand = subparsers.add_parser(
        "expand", help="Repeat the marked body once per CSV row."
    )
    expand.add_argument(
        "--file", type=Path, required=True, help="Input template file."
    )
    expand.add_argument(
        "--const",
        action="append",
        default=[],
        metavar="VAR=VALUE",
        help="Replace placeholder VAR with VALUE (repeatable).",
    )
    expand.add_argument(
        "--row",
        action="append",
        default=[],
        metavar="VAR=FIELD",
        help="Replace placeholder VAR with the CSV field FIELD (repeatable).",
    )
    expand.add_argument("--config", type=Path, help="JSON file with Const and Rows.")
    expand.add_argument("--csv", type=Path, help="CSV file containing the data.")
    expand.add_argument(
        "--no-header",
        action="store_true",
        help="The CSV has no header row; fields are only addressable by position.",
    )
    expand.add_argument(
        "--out",
        type=Path,
        help="Output file (merge) or directory (fan-out). Defaults to stdout.",
    )
    expand.add_argument(
        "--fan-out",
        action="store_true",
        help="Write one file per CSV row instead of a single document.",
    )

    template = subparsers.add_parser(
        "template", help="Render Jinja2 templates with constants and CSV data."
    )
    template.add_argument("templates", type=Path, nargs="+", help="Template files.")
    template.add_argument(
        "--const-file",
        type=Path,
        action="append",
        default=[],
        help="JSON file with constant values (repeatable).",
    )
    template.add_argument(
        "--csv",
        type=Path,
        action="append",
        default=[],
        help="CSV file made available under its file stem (repeatable).",
    )
    template.add_argument(
        "--const",
        action="append",
        default=[],
        metavar="VAR=VALUE",
        help="Constant value (repeatable), overrides const files.",
    )
    template.add_argument("--out", type=Path, help="Output file. Defaults to stdout.")

    for sub in (expand, template):
        sub.add_argument(
            "--delimiter",
            default=settings.csv_delimiter,
            help="CSV delimiter character.",
        )
        sub.add_argument(
            "--no-escape",
            action="store_true",
            default=settings.no_escape,
            help="Globally suppress LaTeX escaping of inserted values.",
        )
        sub.add_argument(
            "--log-level",
            default=settings.log_level,
            help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        )
    return parser


def report_error(error: AppError, console: Console | None = None) -> None:
    """Print a diagnostic for ``error`` naming its stage and context."""
    console = console or Console(stderr=True)
    label = _STAGE_LABELS.get(error.stage, error.stage)
    console.print(f"[bold red]Error ({label}):[/] {markup_escape(error.message)}")
    for key, value in error.context.items():
        console.print(f"  {key}: {markup_escape(str(value))}")


def _expand_options(args: argparse.Namespace) -> ExpandOptions:
    return ExpandOptions(
        document_path=args.file,
        const_pairs=args.const,
        row_pairs=args.row,
        config_path=args.config,
        csv_path=args.csv,
        csv_delimiter=args.delimiter,
        csv_header=not args.no_header,
        escape=not args.no_escape,
        output_path=args.out,
        mode=OutputMode.FAN_OUT if args.fan_out else OutputMode.MERGE,
    )


def _template_options(args: argparse.Namespace) -> TemplateOptions:
    return TemplateOptions(
        template_paths=args.templates,
        const_files=args.const_file,
        csv_paths=args.csv,
        const_pairs=args.const,
        csv_delimiter=args.delimiter,
        escape=not args.no_escape,
        output_path=args.out,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    try:
        settings = RuntimeSettings()
    except AppError as error:
        report_error(error)
        return 1
    args = build_parser(settings).parse_args(argv)
    log_filename = (
        LOG_FILENAME_EXPAND if args.command == "expand" else LOG_FILENAME_TEMPLATE
    )
    configure_logging(
        args.log_level, enable_file=settings.file_logs, log_filename=log_filename
    )
    try:
        if args.command == "expand":
            written = run_expand(_expand_options(args))
            logger.info("Done: %d documents written.", written)
        else:
            run_template(_template_options(args))
    except AppError as error:
        logger.debug("Run aborted", exc_info=True)
        report_error(error)
        return 1
    return 0


def entry_point() -> None:
    """Console-script wrapper around ``main``."""
    sys.exit(main())


if __name__ == "__main__":  # pragma: no cover - CLI entry
    entry_point()
