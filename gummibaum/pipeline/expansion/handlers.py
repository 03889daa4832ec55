"""Line handlers for expand mode.

A handler rewrites a single line of the input document. Handlers compose
left to right: ``apply_handlers`` feeds each handler the output of the
previous one and never re-runs an earlier handler on a later output.

- ``ConstantHandler`` replaces placeholders with fixed values.
- ``RowHandler`` is a template that replaces placeholders with fields of a
  data column. It can't substitute anything by itself; ``bind`` returns a
  ``BoundRowHandler`` for one column, or ``substitute`` takes the column
  explicitly. A template may be bound any number of times, each bound copy
  is independent.

All values are escaped once (if an escape function is given) before they are
inserted; the surrounding line is never escaped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Protocol, TextIO

from gummibaum.exceptions import OutputError, UsageError

from .collection import Column
from .escaping import EscapeFunc, MultiReplacer


class LineHandler(Protocol):
    """A single line-rewriting stage."""

    def handle_line(self, line: str) -> str: ...


def apply_handlers(line: str, handlers: Iterable[LineHandler]) -> str:
    """Apply ``handlers`` one after the other to ``line``.

    Examples
    --------
    >>> const = ConstantHandler({"NAME": "Jane"})
    >>> apply_handlers("Dear NAME,", [const])
    'Dear Jane,'
    """
    result = line
    for handler in handlers:
        result = handler.handle_line(result)
    return result


def write_handlers(
    stream: TextIO, line: str, handlers: Iterable[LineHandler]
) -> None:
    """Write the handled ``line`` followed by a newline to ``stream``.

    Raises
    ------
    OutputError
        If writing to ``stream`` fails.
    """
    try:
        stream.write(apply_handlers(line, handlers) + "\n")
    except OSError as error:
        raise OutputError(f"failed to write output: {error}") from error


class ConstantHandler:
    """Replace placeholders with constant values.

    Parameters
    ----------
    mapping : Mapping[str, str]
        Placeholder to value, e.g. ``{"NAME": "John"}``.
    escape : EscapeFunc | None, optional
        Applied once to every value at construction time.
    """

    __slots__ = ("_replacer",)

    def __init__(
        self, mapping: Mapping[str, str], escape: EscapeFunc | None = None
    ) -> None:
        pairs = [
            (placeholder, escape(value) if escape is not None else value)
            for placeholder, value in mapping.items()
        ]
        self._replacer = MultiReplacer(pairs)

    def handle_line(self, line: str) -> str:
        return self._replacer.replace(line)


class RowHandler:
    """Template for substituting the fields of one column into a line.

    Parameters
    ----------
    mapping : Mapping[str, str]
        Placeholder to field name, e.g. ``{"REPL-TOKEN": "token"}``.
    escape : EscapeFunc | None, optional
        Applied to every field value before substitution.
    """

    __slots__ = ("_placeholders", "_escape")

    def __init__(
        self, mapping: Mapping[str, str], escape: EscapeFunc | None = None
    ) -> None:
        self._placeholders: tuple[tuple[str, str], ...] = tuple(mapping.items())
        self._escape = escape

    def __bool__(self) -> bool:
        return bool(self._placeholders)

    @property
    def placeholders(self) -> Sequence[tuple[str, str]]:
        return self._placeholders

    def bind(self, column: Column) -> BoundRowHandler:
        """Return a handler substituting values from ``column``.

        The template itself is left untouched.
        """
        return BoundRowHandler(self, column)

    def substitute(self, line: str, column: Column) -> str:
        """Replace all registered placeholders in ``line`` with ``column`` values.

        Fields missing from the column are substituted with ``NO_COL_ENTRY``.
        """
        if not self._placeholders:
            return line
        return self.replacer_for(column).replace(line)

    def replacer_for(self, column: Column) -> MultiReplacer:
        """Build the replacer holding the escaped ``column`` values."""
        escape = self._escape
        pairs = []
        for placeholder, field_name in self._placeholders:
            value = column.get_by_name(field_name)
            if escape is not None:
                value = escape(value)
            pairs.append((placeholder, value))
        return MultiReplacer(pairs)

    def handle_line(self, line: str) -> str:
        raise UsageError(
            "no column bound, RowHandler.bind must be called before handling lines",
            context={"line": line},
        )


class BoundRowHandler:
    """A ``RowHandler`` bound to a single column.

    The column values are looked up and escaped once, when the handler is
    created.
    """

    __slots__ = ("_replacer",)

    def __init__(self, template: RowHandler, column: Column) -> None:
        self._replacer = template.replacer_for(column)

    def handle_line(self, line: str) -> str:
        return self._replacer.replace(line)
