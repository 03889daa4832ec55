"""Split an expand-mode document into head, body and foot.

The body is the region between a line starting with ``%begin gummibaum
repeat`` and a line starting with ``%end gummibaum repeat``; both marker
lines are dropped. Markers are recognized once per document and by literal,
case-sensitive prefix only. Once the end marker has been seen every further
line, marker or not, belongs to the foot.

A body line that itself starts with the end marker text ends the body early;
there is no way to escape a marker.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO

from gummibaum.config import BEGIN_REPEAT_MARKER, END_REPEAT_MARKER
from gummibaum.exceptions import DataSourceError, ParseError

logger = logging.getLogger(__name__)


class SplitState(enum.Enum):
    IN_HEAD = "head"
    IN_BODY = "body"
    IN_FOOT = "foot"


@dataclass(frozen=True)
class Document:
    """The three sections of a successfully split document."""

    head: tuple[str, ...]
    body: tuple[str, ...]
    foot: tuple[str, ...]

    def lines(self) -> tuple[str, ...]:
        """Return head, body and foot lines in document order."""
        return self.head + self.body + self.foot


def read_lines(stream: TextIO) -> list[str]:
    """Read ``stream`` into lines without their line terminators.

    Each line loses one trailing ``\\n`` and then one trailing ``\\r``; a
    final line without terminator is kept as is.

    Raises
    ------
    DataSourceError
        If reading or decoding the stream fails.
    """
    lines: list[str] = []
    try:
        for raw_line in stream:
            if raw_line.endswith("\n"):
                raw_line = raw_line[:-1]
            if raw_line.endswith("\r"):
                raw_line = raw_line[:-1]
            lines.append(raw_line)
    except (OSError, UnicodeDecodeError) as error:
        raise DataSourceError(
            f"failed to read document: {error}", context={"line": len(lines) + 1}
        ) from error
    return lines


def split_document(
    lines: Iterable[str],
    begin_marker: str = BEGIN_REPEAT_MARKER,
    end_marker: str = END_REPEAT_MARKER,
) -> Document:
    """Partition ``lines`` into a ``Document``.

    Parameters
    ----------
    lines : Iterable[str]
        Document lines without line terminators.
    begin_marker : str, optional
        Prefix of the line opening the repeated body.
    end_marker : str, optional
        Prefix of the line closing the repeated body.

    Returns
    -------
    Document
        Head, body and foot; marker lines are not part of any section.

    Raises
    ------
    ParseError
        If the begin marker or the end marker is missing.

    Examples
    --------
    >>> doc = split_document(["a", "%begin gummibaum repeat", "b", "%end gummibaum repeat", "c"])
    >>> doc.head, doc.body, doc.foot
    (('a',), ('b',), ('c',))
    """
    state = SplitState.IN_HEAD
    head: list[str] = []
    body: list[str] = []
    foot: list[str] = []
    line_count = 0
    for line in lines:
        line_count += 1
        if state is SplitState.IN_HEAD:
            if line.startswith(begin_marker):
                state = SplitState.IN_BODY
            else:
                head.append(line)
        elif state is SplitState.IN_BODY:
            if line.startswith(end_marker):
                state = SplitState.IN_FOOT
            else:
                body.append(line)
        else:
            foot.append(line)
    if state is SplitState.IN_HEAD:
        raise ParseError(
            f"invalid template syntax, missing begin marker {begin_marker!r}",
            context={"lines": line_count, "marker": begin_marker},
        )
    if state is SplitState.IN_BODY:
        raise ParseError(
            f"invalid template syntax, missing end marker {end_marker!r}",
            context={"lines": line_count, "marker": end_marker},
        )
    logger.debug(
        "Split document: %d head, %d body, %d foot lines",
        len(head),
        len(body),
        len(foot),
    )
    return Document(tuple(head), tuple(body), tuple(foot))
