"""Expansion engine package.

This package exposes the public API of expand mode: the tabular data model,
the line handlers, the document splitter, the expansion driver and the
loaders for configuration and CSV data. A consumer (the CLI, a script or a
notebook) should import from this package rather than from the submodules.

The module-level ``__all__`` restricts the public API to names declared in:

- gummibaum/pipeline/expansion/collection.py
- gummibaum/pipeline/expansion/data_loader.py
- gummibaum/pipeline/expansion/escaping.py
- gummibaum/pipeline/expansion/handlers.py
- gummibaum/pipeline/expansion/processor.py
- gummibaum/pipeline/expansion/runner.py
- gummibaum/pipeline/expansion/splitter.py

Examples
--------
>>> import io
>>> from gummibaum.pipeline.expansion import (
...     Collection, ConstantHandler, ExpansionDriver, MemorySource, RowHandler,
...     split_document,
... )
>>> doc = split_document(["Hi GREETING", "%begin gummibaum repeat", "NAME",
...                       "%end gummibaum repeat", "Bye"])
>>> people = Collection.from_source(MemorySource(["name"], [["Ann"], ["Bob"]]))
>>> out = io.StringIO()
>>> ExpansionDriver(doc, ConstantHandler({"GREETING": "all"}),
...                 RowHandler({"NAME": "name"}), people).merge(out)
>>> out.getvalue().splitlines()
['Hi all', 'Ann', 'Bob', 'Bye']
"""

from .collection import (
    ByName,
    ByPosition,
    Collection,
    Column,
    ColumnKey,
    DataFrameSource,
    MemorySource,
    TabularSource,
)
from .data_loader import (
    CSVSource,
    load_const_json,
    load_const_json_file,
    load_csv_source,
    load_document,
    load_expand_config,
    load_expand_config_file,
    merge_mappings,
    parse_var_val_list,
    parse_var_val_pair,
)
from .escaping import EscapeFunc, MultiReplacer, escape_from_pairs, escape_with_defaults
from .handlers import (
    BoundRowHandler,
    ConstantHandler,
    LineHandler,
    RowHandler,
    apply_handlers,
    write_handlers,
)
from .processor import (
    DirectorySinkFactory,
    ExpansionDriver,
    FanOutResult,
    OutputMode,
    substitute_lines,
)
from .runner import ExpandOptions, configure_logging, run_expand
from .splitter import Document, read_lines, split_document

__all__ = [
    "BoundRowHandler",
    "ByName",
    "ByPosition",
    "CSVSource",
    "Collection",
    "Column",
    "ColumnKey",
    "ConstantHandler",
    "DataFrameSource",
    "DirectorySinkFactory",
    "Document",
    "EscapeFunc",
    "ExpandOptions",
    "ExpansionDriver",
    "FanOutResult",
    "LineHandler",
    "MemorySource",
    "MultiReplacer",
    "OutputMode",
    "RowHandler",
    "TabularSource",
    "apply_handlers",
    "configure_logging",
    "escape_from_pairs",
    "escape_with_defaults",
    "load_const_json",
    "load_const_json_file",
    "load_csv_source",
    "load_document",
    "load_expand_config",
    "load_expand_config_file",
    "merge_mappings",
    "parse_var_val_list",
    "parse_var_val_pair",
    "read_lines",
    "run_expand",
    "split_document",
    "substitute_lines",
    "write_handlers",
]
