"""Runtime settings loaded from the environment and an optional ``.env`` file.

``RuntimeSettings`` is the boundary between the process environment and the
defaults of the command line. It reads a ``.env`` file from the working
directory (if present) and then the ``GUMMIBAUM_*`` variables; explicit
command-line flags always take precedence over these values.

Examples
--------
>>> import os
>>> os.environ["GUMMIBAUM_CSV_DELIMITER"] = ";"
>>> from gummibaum.settings import RuntimeSettings
>>> RuntimeSettings().csv_delimiter
';'
>>> del os.environ["GUMMIBAUM_CSV_DELIMITER"]
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from gummibaum.config import (
    DEFAULT_CSV_DELIMITER,
    DEFAULT_LOG_LEVEL,
    ENV_CSV_DELIMITER,
    ENV_DISABLE_FILE_LOGS,
    ENV_LOG_LEVEL,
    ENV_NO_ESCAPE,
    FORBIDDEN_CSV_DELIMITERS,
)
from gummibaum.exceptions import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


def _env_flag(name: str) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"invalid boolean value {raw!r} for {name}", context={"variable": name}
    )


class RuntimeSettings:
    r"""Settings shared by the ``expand`` and ``template`` commands.

    Attributes
    ----------
    log_level : str
        Default logging level name.
    csv_delimiter : str
        Default CSV delimiter, a single character.
    no_escape : bool
        If True, LaTeX escaping of inserted values is disabled by default.
    file_logs : bool
        Whether a log file is written next to console logging.

    Raises
    ------
    ConfigurationError
        If a variable holds an invalid value.
    """

    def __init__(self, env_dir: Path | None = None) -> None:
        env_path = Path(env_dir if env_dir is not None else Path.cwd()) / ".env"
        if env_path.exists():
            # Real environment variables win over the file.
            load_dotenv(env_path, override=False)
        self.log_level: str = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(
                f"invalid log level {self.log_level!r} in {ENV_LOG_LEVEL}",
                context={"variable": ENV_LOG_LEVEL},
            )
        self.csv_delimiter: str = os.getenv(ENV_CSV_DELIMITER, DEFAULT_CSV_DELIMITER)
        if self.csv_delimiter == "\\t":
            self.csv_delimiter = "\t"
        delimiter = self.csv_delimiter
        if len(delimiter) != 1 or delimiter in FORBIDDEN_CSV_DELIMITERS:
            raise ConfigurationError(
                f"{ENV_CSV_DELIMITER} must be a single character other than a quote "
                f"or line break, got {delimiter!r}",
                context={"variable": ENV_CSV_DELIMITER},
            )
        self.no_escape: bool = _env_flag(ENV_NO_ESCAPE)
        self.file_logs: bool = not (
            _env_flag(ENV_DISABLE_FILE_LOGS) or os.getenv("PYTEST_CURRENT_TEST")
        )
