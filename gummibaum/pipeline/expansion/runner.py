"""Expand-mode runner.

This module provides the programmatic entry point of the ``expand`` command
and the logging configuration shared with the command line. It wires the
loaders, handlers, splitter and driver together; no substitution logic lives
here.

Every input (config, document, CSV data) is loaded and validated before the
first line is written, so a parse or read failure never leaves partial
output behind.

Examples
--------
>>> from pathlib import Path
>>> from gummibaum.pipeline.expansion.processor import OutputMode
>>> from gummibaum.pipeline.expansion.runner import ExpandOptions, run_expand
>>> options = ExpandOptions(
...     document_path=Path("letter.tex"),
...     const_pairs=["SENDER=Jane"],
...     row_pairs=["NAME=name"],
...     csv_path=Path("people.csv"),
...     output_path=Path("letters"),
...     mode=OutputMode.FAN_OUT,
... )
>>> written = run_expand(options)  # doctest: +SKIP
"""

from __future__ import annotations

import contextlib
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from gummibaum.config import (
    DEFAULT_CSV_DELIMITER,
    DEFAULT_ENCODING,
    DEFAULT_LATEX_REPLACERS,
    LOG_DIR,
    LOG_FILENAME_EXPAND,
    LOG_FORMAT,
)
from gummibaum.exceptions import ConfigurationError, OutputError

from .collection import Collection
from .data_loader import (
    load_csv_source,
    load_document,
    load_expand_config_file,
    merge_mappings,
    parse_var_val_list,
)
from .escaping import EscapeFunc, escape_from_pairs
from .handlers import ConstantHandler, RowHandler
from .processor import (
    DirectorySinkFactory,
    ExpansionDriver,
    OutputMode,
    substitute_lines,
)
from .splitter import split_document

logger = logging.getLogger(__name__)


def configure_logging(
    log_level: str = "INFO",
    enable_file: bool = True,
    log_filename: str = LOG_FILENAME_EXPAND,
) -> None:
    """Configure console and optional file logging for a run.

    Existing root handlers are removed first, so calling this repeatedly is
    safe. Failing to create the log file only disables file logging.

    Parameters
    ----------
    log_level : str, optional
        Logging level name (e.g. ``"INFO"``, ``"DEBUG"``).
    enable_file : bool, optional
        Whether to also log to ``LOG_DIR / log_filename``.
    log_filename : str, optional
        Name of the log file inside ``LOG_DIR``.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_error: OSError | None = None
    if enable_file:
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(0, logging.FileHandler(LOG_DIR / log_filename, mode="a"))
        except OSError as error:
            file_error = error
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
    if file_error is not None:
        logger.warning("File logging disabled: %s", file_error)


@dataclass
class ExpandOptions:
    """Everything a single ``expand`` run is configured with.

    ``const_pairs`` and ``row_pairs`` are ``var=val`` strings from the
    command line; they override the mappings of ``config_path``.
    ``output_path`` is a file (or stdout when ``None``) in merge mode and a
    directory in fan-out mode.
    """

    document_path: Path
    const_pairs: list[str] = field(default_factory=list)
    row_pairs: list[str] = field(default_factory=list)
    config_path: Path | None = None
    csv_path: Path | None = None
    csv_delimiter: str = DEFAULT_CSV_DELIMITER
    csv_header: bool = True
    escape: bool = True
    output_path: Path | None = None
    mode: OutputMode = OutputMode.MERGE


def build_handlers(
    options: ExpandOptions,
) -> tuple[ConstantHandler, RowHandler | None]:
    """Build the constant handler and, if row pairs exist, the row template.

    Command-line pairs are applied after the config file mappings and win on
    conflicts.
    """
    file_consts: dict[str, str] = {}
    file_rows: dict[str, str] = {}
    if options.config_path is not None:
        file_consts, file_rows = load_expand_config_file(options.config_path)
    consts = merge_mappings(file_consts, parse_var_val_list(options.const_pairs))
    rows = merge_mappings(file_rows, parse_var_val_list(options.row_pairs))
    escape: EscapeFunc | None = None
    if options.escape:
        escape = escape_from_pairs(DEFAULT_LATEX_REPLACERS)
    row_handler = RowHandler(rows, escape) if rows else None
    return ConstantHandler(consts, escape), row_handler


def load_collection(options: ExpandOptions) -> Collection | None:
    """Read the CSV data source of ``options`` if one is configured."""
    if options.csv_path is None:
        return None
    source = load_csv_source(
        options.csv_path, options.csv_delimiter, options.csv_header
    )
    return Collection.from_source(source)


def _open_merge_output(path: Path | None) -> contextlib.AbstractContextManager[TextIO]:
    if path is None:
        return contextlib.nullcontext(sys.stdout)
    try:
        return Path(path).open("w", encoding=DEFAULT_ENCODING)
    except OSError as error:
        raise OutputError(
            f"unable to create output file {path}: {error}",
            context={"path": str(path)},
        ) from error


def run_expand(options: ExpandOptions) -> int:
    """Run expand mode and return the number of documents written.

    Raises
    ------
    gummibaum.exceptions.AppError
        Any parse, read, configuration or write failure; see
        ``gummibaum.exceptions`` for the hierarchy.
    """
    const_handler, row_handler = build_handlers(options)
    lines = load_document(options.document_path)
    logger.info("Read %d lines from %s", len(lines), options.document_path)

    if row_handler is None and options.mode is OutputMode.MERGE:
        with _open_merge_output(options.output_path) as stream:
            substitute_lines(lines, const_handler, stream)
        logger.info("Substituted constants without repetition")
        return 1

    document = split_document(lines)
    collection = load_collection(options)
    driver = ExpansionDriver(document, const_handler, row_handler, collection)

    if options.mode is OutputMode.FAN_OUT:
        if options.output_path is None:
            raise ConfigurationError("fan-out mode requires an output directory")
        if collection is None:
            raise ConfigurationError("fan-out mode requires a CSV data source")
        try:
            Path(options.output_path).mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise OutputError(
                f"unable to create output directory {options.output_path}: {error}",
                context={"path": str(options.output_path)},
            ) from error
        result = driver.fan_out(DirectorySinkFactory(options.output_path))
        return len(result.written)

    with _open_merge_output(options.output_path) as stream:
        driver.merge(stream)
    logger.info(
        "Expanded %d columns into one document",
        len(collection) if collection is not None else 0,
    )
    return 1


__all__ = [
    "ExpandOptions",
    "build_handlers",
    "configure_logging",
    "load_collection",
    "run_expand",
]
