"""LaTeX helper functions available inside templates.

- ``latex(*args)`` escapes its arguments joined by spaces;
- ``verb(delimiter, *args)`` wraps its arguments in ``\\verb``;
- ``join(separator, *args)`` joins arguments, flattening lists, escaping
  every item.

Helpers are built around an escape function so that ``--no-escape`` turns
them into plain string helpers.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from gummibaum.exceptions import TemplateRenderError
from gummibaum.pipeline.expansion.escaping import EscapeFunc


def _as_text(args: tuple[Any, ...]) -> str:
    return " ".join(str(arg) for arg in args)


def make_latex(escape: EscapeFunc | None) -> Callable[..., str]:
    """Return the ``latex`` helper for ``escape``."""

    def latex(*args: Any) -> str:
        text = _as_text(args)
        return escape(text) if escape is not None else text

    return latex


def verb(delimiter: str, *args: Any) -> str:
    r"""Return ``\verb<delimiter>text<delimiter>`` for the joined ``args``.

    Raises
    ------
    TemplateRenderError
        If ``delimiter`` is not exactly one character or occurs in the text.

    Examples
    --------
    >>> verb("|", "foo & bar")
    '\\verb|foo & bar|'
    """
    if len(delimiter) != 1:
        raise TemplateRenderError(
            "invalid delimiter length for \\verb environment: expected 1 and "
            f"got {len(delimiter)}"
        )
    text = _as_text(args)
    if delimiter in text:
        raise TemplateRenderError(
            f"error executing \\verb environment: input string contains delimiter {delimiter}"
        )
    return f"\\verb{delimiter}{text}{delimiter}"


def make_join(escape: EscapeFunc | None) -> Callable[..., str]:
    """Return the ``join`` helper for ``escape``."""

    def join(separator: str, *args: Any) -> str:
        items: list[str] = []
        for arg in args:
            values = arg if isinstance(arg, (list, tuple)) else [arg]
            for value in values:
                text = str(value)
                items.append(escape(text) if escape is not None else text)
        return separator.join(items)

    return join
