"""Literal multi-pattern replacement and LaTeX escaping.

Both the substitution handlers and the escape functions rely on the same
primitive: replace many literal tokens in a single left-to-right scan of the
text. Replacement text is never scanned again, so an escaped value can't be
escaped twice and a substituted value can't trigger another placeholder.

No escape table is applied implicitly. Callers build an escape function from
a table (usually ``DEFAULT_LATEX_REPLACERS`` from ``gummibaum.config``) and
pass it into the handlers or the template renderer.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from gummibaum.config import DEFAULT_LATEX_REPLACERS

EscapeFunc = Callable[[str], str]


class MultiReplacer:
    """Replace a fixed set of literal tokens in one scan.

    At any position where several tokens match, the token registered first
    wins. Empty tokens are ignored. If a token is registered twice the first
    replacement is used.

    Parameters
    ----------
    pairs : Iterable[tuple[str, str]]
        Ordered ``(token, replacement)`` pairs.

    Examples
    --------
    >>> MultiReplacer([("X", "foo")]).replace("X-X")
    'foo-foo'
    >>> MultiReplacer([("a", "b"), ("b", "a")]).replace("ab")
    'ba'
    """

    __slots__ = ("_replacements", "_pattern")

    def __init__(self, pairs: Iterable[tuple[str, str]]) -> None:
        replacements: dict[str, str] = {}
        for token, replacement in pairs:
            if token and token not in replacements:
                replacements[token] = replacement
        self._replacements = replacements
        self._pattern: re.Pattern[str] | None = None
        if replacements:
            self._pattern = re.compile(
                "|".join(re.escape(token) for token in replacements)
            )

    def __len__(self) -> int:
        return len(self._replacements)

    def replace(self, text: str) -> str:
        """Return ``text`` with every non-overlapping token occurrence replaced."""
        if self._pattern is None:
            return text
        replacements = self._replacements
        return self._pattern.sub(lambda match: replacements[match.group(0)], text)


def escape_from_pairs(pairs: Iterable[tuple[str, str]]) -> EscapeFunc:
    """Build an escape function from ordered ``(pattern, replacement)`` pairs.

    Parameters
    ----------
    pairs : Iterable[tuple[str, str]]
        Substitution pairs, e.g. ``[("&", "\\\\&")]`` replaces each ``&``
        with ``\\&``.

    Returns
    -------
    EscapeFunc
        Function applying all substitutions in a single scan.

    Examples
    --------
    >>> escape = escape_from_pairs([("&", "\\\\&")])
    >>> escape("A & B")
    'A \\\\& B'
    """
    return MultiReplacer(pairs).replace


def escape_with_defaults(
    additional: Iterable[tuple[str, str]] = (),
) -> EscapeFunc:
    """Return an escape function for the default LaTeX table plus ``additional``.

    Default pairs come first and therefore take precedence over additional
    pairs registering the same pattern.
    """
    return escape_from_pairs([*DEFAULT_LATEX_REPLACERS, *additional])
