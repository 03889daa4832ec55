"""Loaders for documents, configuration and CSV data.

This module turns the files a run is configured with into the in-memory
values the expansion engine works on:

- ``var=val`` pairs from the command line;
- the expand-mode JSON config with its ``Const`` and ``Rows`` mappings;
- plain JSON constant files used by template mode;
- CSV files, exposed as a ``TabularSource``;
- the input document itself, as a list of lines.

Every failure is translated into the project's exception taxonomy:
``ParseError`` for malformed content, ``DataSourceError`` for files that
can't be opened or read. Nothing is returned on failure.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, TextIO

from gummibaum.config import (
    CONFIG_CONST_KEY,
    CONFIG_ROWS_KEY,
    DEFAULT_CSV_DELIMITER,
    DEFAULT_ENCODING,
    FORBIDDEN_CSV_DELIMITERS,
)
from gummibaum.exceptions import DataSourceError, ParseError

from .splitter import read_lines

logger = logging.getLogger(__name__)


def parse_var_val_pair(pair: str) -> tuple[str, str]:
    """Split ``pair`` of the form ``var=val`` at the first ``=``.

    Raises
    ------
    ParseError
        If ``pair`` contains no ``=``.

    Examples
    --------
    >>> parse_var_val_pair("NAME=John=Doe")
    ('NAME', 'John=Doe')
    """
    variable, separator, value = pair.partition("=")
    if not separator:
        raise ParseError(
            f'invalid variable / value pair "{pair}": must be var=val',
            context={"pair": pair},
        )
    return variable, value


def parse_var_val_list(pairs: Iterable[str]) -> dict[str, str]:
    """Parse several ``var=val`` pairs; later pairs overwrite earlier ones."""
    return dict(parse_var_val_pair(pair) for pair in pairs)


def merge_mappings(*sources: Mapping[str, str] | None) -> dict[str, str]:
    """Fold ``sources`` into a new dict, later sources winning on conflicts.

    ``None`` entries are skipped and no source is modified.

    Examples
    --------
    >>> merge_mappings({"a": "1", "b": "2"}, None, {"b": "3"})
    {'a': '1', 'b': '3'}
    """
    merged: dict[str, str] = {}
    for source in sources:
        if source:
            merged.update(source)
    return merged


def _open_text(path: Path, what: str, **kwargs: Any) -> TextIO:
    try:
        return path.open("r", encoding=DEFAULT_ENCODING, **kwargs)
    except OSError as error:
        raise DataSourceError(
            f"unable to open {what} {path}: {error}", context={"path": str(path)}
        ) from error


def _decode_json(stream: TextIO, what: str) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as error:
        raise ParseError(
            f"invalid JSON in {what}: {error.msg}",
            context={"line": error.lineno, "column": error.colno},
        ) from error
    except (OSError, UnicodeDecodeError) as error:
        raise DataSourceError(f"failed to read {what}: {error}") from error


def _string_mapping(value: Any, what: str) -> dict[str, str]:
    if not isinstance(value, dict):
        raise ParseError(f"{what} must be a JSON object mapping names to strings")
    for key, item in value.items():
        if not isinstance(item, str):
            raise ParseError(
                f"{what}: value for {key!r} must be a string, got {type(item).__name__}",
                context={"key": key},
            )
    return dict(value)


def load_expand_config(stream: TextIO) -> tuple[dict[str, str], dict[str, str]]:
    """Decode an expand-mode config and return its ``(const, rows)`` mappings.

    The config is a JSON object with the optional keys ``Const`` and
    ``Rows`` (any capitalization), each mapping strings to strings.

    Raises
    ------
    ParseError
        For invalid JSON, unknown keys or non-string values.
    """
    content = _decode_json(stream, "config")
    if not isinstance(content, dict):
        raise ParseError("config must be a JSON object with Const and Rows")
    sections: dict[str, dict[str, str]] = {CONFIG_CONST_KEY: {}, CONFIG_ROWS_KEY: {}}
    known = {name.lower(): name for name in sections}
    for key, value in content.items():
        section = known.get(key.lower())
        if section is None:
            raise ParseError(
                f"unknown field {key!r} in config, expected "
                f"{CONFIG_CONST_KEY!r} and {CONFIG_ROWS_KEY!r}",
                context={"key": key},
            )
        sections[section] = _string_mapping(value, f"config field {key!r}")
    return sections[CONFIG_CONST_KEY], sections[CONFIG_ROWS_KEY]


def load_expand_config_file(path: Path) -> tuple[dict[str, str], dict[str, str]]:
    """Like ``load_expand_config`` but read from ``path``."""
    with _open_text(Path(path), "config file") as stream:
        consts, rows = load_expand_config(stream)
    logger.info(
        "Loaded config %s: %d constants, %d row placeholders",
        path,
        len(consts),
        len(rows),
    )
    return consts, rows


def load_const_json(stream: TextIO) -> dict[str, str]:
    """Decode a JSON object mapping placeholder names to constant values."""
    return _string_mapping(_decode_json(stream, "constants"), "constants")


def load_const_json_file(path: Path) -> dict[str, str]:
    """Like ``load_const_json`` but read from ``path``."""
    with _open_text(Path(path), "constants file") as stream:
        return load_const_json(stream)


def load_document(path: Path) -> list[str]:
    """Read the input document at ``path`` into lines.

    Only ``\\n`` ends a line; a lone ``\\r`` stays part of the line.
    """
    with _open_text(Path(path), "document", newline="\n") as stream:
        return read_lines(stream)


class CSVSource:
    """``TabularSource`` holding the fully parsed content of a CSV stream.

    Parameters
    ----------
    header : list[str] | None
        Field names, or ``None`` if the CSV was read without header.
    rows : list[list[str]]
        Data rows; rows may differ in length.
    """

    def __init__(self, header: list[str] | None, rows: list[list[str]]) -> None:
        self._header = header
        self._rows = rows

    def header(self) -> list[str] | None:
        return self._header

    def rows(self) -> list[list[str]]:
        return self._rows

    @classmethod
    def from_stream(
        cls,
        stream: TextIO,
        delimiter: str = DEFAULT_CSV_DELIMITER,
        has_header: bool = True,
    ) -> CSVSource:
        """Parse all of ``stream`` as CSV.

        With ``has_header`` the first row holds the field names and must be
        present. Rows of any length are accepted; blank lines are skipped.

        Raises
        ------
        ParseError
            For malformed CSV or a missing header row.
        DataSourceError
            If reading the stream fails.
        """
        if len(delimiter) != 1 or delimiter in FORBIDDEN_CSV_DELIMITERS:
            raise ParseError(
                "CSV delimiter must be a single character other than a quote or "
                f"line break, got {delimiter!r}"
            )
        reader = csv.reader(stream, delimiter=delimiter, strict=True)
        try:
            records = [record for record in reader if record]
        except csv.Error as error:
            raise ParseError(
                f"invalid CSV on line {reader.line_num}: {error}",
                context={"line": reader.line_num},
            ) from error
        except (OSError, UnicodeDecodeError) as error:
            raise DataSourceError(f"failed to read CSV: {error}") from error
        header: list[str] | None = None
        if has_header:
            if not records:
                raise ParseError("can't read head from csv, does not contain any row")
            header, records = records[0], records[1:]
        return cls(header, records)


def load_csv_source(
    path: Path,
    delimiter: str = DEFAULT_CSV_DELIMITER,
    has_header: bool = True,
) -> CSVSource:
    """Open ``path`` and parse it with ``CSVSource.from_stream``."""
    with _open_text(Path(path), "CSV file", newline="") as stream:
        source = CSVSource.from_stream(stream, delimiter, has_header)
    logger.info("Loaded %d data rows from %s", len(source.rows()), path)
    return source
