"""Global configuration constants for the project.

Defines the document markers, lookup sentinel, output naming, escape tables
and logging settings used across the expansion and templating pipelines.
"""

from __future__ import annotations

from pathlib import Path

# Log directory, relative to the working directory
LOG_DIR: Path = Path.cwd() / "logs"

# Document markers, matched as literal line prefixes
BEGIN_REPEAT_MARKER: str = "%begin gummibaum repeat"
END_REPEAT_MARKER: str = "%end gummibaum repeat"

# Returned by best-effort column lookups when a key or position is not found
NO_COL_ENTRY: str = "NO VALUE"

# CSV defaults
DEFAULT_CSV_DELIMITER: str = ","
# Characters csv.reader can't use as a field delimiter
FORBIDDEN_CSV_DELIMITERS: frozenset[str] = frozenset({'"', "\r", "\n"})

# Encoding of every file read or written: documents, data, templates, output
DEFAULT_ENCODING: str = "utf-8"

# Fan-out output files, formatted with the 1-based column ordinal
FANOUT_FILENAME_FORMAT: str = "out{index}.tex"

# Keys of the expand-mode JSON config (matched case-insensitively)
CONFIG_CONST_KEY: str = "Const"
CONFIG_ROWS_KEY: str = "Rows"

# Template mode delimiters; "{{" and "}}" clash with LaTeX braces
TEMPLATE_VARIABLE_START: str = "#("
TEMPLATE_VARIABLE_END: str = "#)"
TEMPLATE_BLOCK_START: str = "#(%"
TEMPLATE_BLOCK_END: str = "%#)"
TEMPLATE_COMMENT_START: str = "#(#"
TEMPLATE_COMMENT_END: str = "#)#"

# LaTeX special characters as ordered (pattern, replacement) pairs.
# Some replacements need the trailing space to terminate the control word.
DEFAULT_LATEX_REPLACERS: tuple[tuple[str, str], ...] = (
    ("&", r"\&"),
    ("%", r"\%"),
    ("$", r"\$"),
    ("#", r"\#"),
    ("_", r"\_"),
    ("{", r"\{"),
    ("}", r"\}"),
    ("~", r"\textasciitilde "),
    ("^", r"\textasciicircum "),
    ("\\", r"\textbackslash "),
)

# Logging
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME_EXPAND: str = "expand.log"
LOG_FILENAME_TEMPLATE: str = "template.log"
DEFAULT_LOG_LEVEL: str = "INFO"

# Environment variables read by gummibaum.settings
ENV_LOG_LEVEL: str = "GUMMIBAUM_LOG_LEVEL"
ENV_CSV_DELIMITER: str = "GUMMIBAUM_CSV_DELIMITER"
ENV_NO_ESCAPE: str = "GUMMIBAUM_NO_ESCAPE"
ENV_DISABLE_FILE_LOGS: str = "DISABLE_FILE_LOGS"
