"""Template-mode runner.

Collects the data for template mode and renders the templates:

1. constants from every ``--const-file`` JSON file, later files winning;
2. a ``Collection`` for every ``--csv`` file, named after the file stem
   (``people.csv`` becomes ``people``);
3. ``--const`` pairs from the command line, overriding file constants.

A name that is both a constant and a collection keeps the constant.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gummibaum.config import (
    DEFAULT_CSV_DELIMITER,
    DEFAULT_ENCODING,
    DEFAULT_LATEX_REPLACERS,
)
from gummibaum.exceptions import OutputError
from gummibaum.pipeline.expansion.collection import Collection
from gummibaum.pipeline.expansion.data_loader import (
    load_const_json_file,
    load_csv_source,
    merge_mappings,
    parse_var_val_list,
)
from gummibaum.pipeline.expansion.escaping import escape_from_pairs

from .renderer import render_templates

logger = logging.getLogger(__name__)


@dataclass
class TemplateOptions:
    """Everything a single ``template`` run is configured with."""

    template_paths: list[Path]
    const_files: list[Path] = field(default_factory=list)
    csv_paths: list[Path] = field(default_factory=list)
    const_pairs: list[str] = field(default_factory=list)
    csv_delimiter: str = DEFAULT_CSV_DELIMITER
    escape: bool = True
    output_path: Path | None = None


def build_template_data(
    consts: Mapping[str, str], collections: Mapping[str, Collection]
) -> dict[str, Any]:
    """Combine constants and collections into the template namespace."""
    data: dict[str, Any] = dict(consts)
    for name, collection in collections.items():
        if name in data:
            logger.warning(
                "Key %s is a constant as well as a data file, using const value", name
            )
            continue
        data[name] = collection
    return data


def load_template_data(options: TemplateOptions) -> dict[str, Any]:
    """Load constants and collections configured in ``options``."""
    consts = merge_mappings(
        *(load_const_json_file(path) for path in options.const_files)
    )
    collections: dict[str, Collection] = {}
    for csv_path in options.csv_paths:
        source = load_csv_source(Path(csv_path), options.csv_delimiter, True)
        collections[Path(csv_path).stem] = Collection.from_source(source)
    consts = merge_mappings(consts, parse_var_val_list(options.const_pairs))
    return build_template_data(consts, collections)


def run_template(options: TemplateOptions) -> str:
    """Render the templates of ``options`` and write the result.

    Output goes to ``options.output_path`` or stdout. The rendered text is
    also returned.
    """
    data = load_template_data(options)
    escape = escape_from_pairs(DEFAULT_LATEX_REPLACERS) if options.escape else None
    rendered = render_templates(options.template_paths, data, escape)
    try:
        if options.output_path is None:
            stream_cm = contextlib.nullcontext(sys.stdout)
        else:
            stream_cm = Path(options.output_path).open(
                "w", encoding=DEFAULT_ENCODING
            )
        with stream_cm as stream:
            stream.write(rendered)
    except OSError as error:
        raise OutputError(f"failed to write template output: {error}") from error
    logger.info("Rendered %s", Path(options.template_paths[0]).name)
    return rendered


__all__ = [
    "TemplateOptions",
    "build_template_data",
    "load_template_data",
    "run_template",
]
