"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses used throughout the codebase to represent the failure
modes of a run: malformed input (parse), failed lookups, read and write
failures (io), programming-contract violations (usage) and invalid settings
(config). Every error carries the ``stage`` it belongs to so the command line
can name the failing stage in its diagnostic.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'PARSE_ERROR'``).
    message : str
        Human-readable message describing the error.
    stage : str
        Pipeline stage the error belongs to (``parse``, ``lookup``, ``io``,
        ``usage`` or ``config``).
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging, e.g. a line number or the
        ordinal of the column being written.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    stage : str
        Failing pipeline stage.
    context : dict
        Structured, non-sensitive context for logging.

    Examples
    --------
    >>> e = AppError('CODE', 'message', stage='io', context={'column': 2})
    >>> e.code
    'CODE'
    >>> e.context['column']
    2
    """

    __slots__ = ("code", "message", "stage", "context")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        stage: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.stage = stage
        self.context = dict(context or {})

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "stage": self.stage,
            "context": self.context,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, stage="config", context=context
        )


class ParseError(AppError):
    """Raised for malformed input: pairs, documents, JSON or CSV content."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("PARSE_ERROR", message, stage="parse", context=context)


class TemplateRenderError(ParseError):
    """Raised when a template-mode template fails to parse or render."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context)
        self.code = "TEMPLATE_RENDER_ERROR"


class DataSourceError(AppError):
    """Raised when an input document, config file or data source can't be read."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("DATA_SOURCE_ERROR", message, stage="io", context=context)


class OutputError(AppError):
    """Raised when an output sink can't be opened or written."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("OUTPUT_ERROR", message, stage="io", context=context)


class ColumnKeyError(AppError, LookupError):
    """Raised by strict column accessors for an invalid position or name."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "COLUMN_KEY_ERROR", message, stage="lookup", context=context
        )


class UsageError(AppError):
    """Raised when an API is used against its contract.

    This signals a programming error, e.g. substituting row values before a
    column was bound, and is never meant to be recovered from.
    """

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("USAGE_ERROR", message, stage="usage", context=context)
