"""Expand a split document into merged or per-column output.

The ``ExpansionDriver`` combines a ``Document`` with the constant handler,
an optional row handler template and an optional ``Collection``:

- head and foot lines only pass through the constant handler;
- the body is repeated once per column, each line passing through the
  constant handler and then the row handler bound to that column;
- without row placeholders nothing is repeated.

Output is routed either to a single stream (merge mode) or to one sink per
column (fan-out mode). In fan-out mode a sink that can't be opened only
costs that column, while a failed write aborts the run. At most one sink is
open at a time and it is always closed before the next column starts.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from gummibaum.config import DEFAULT_ENCODING, FANOUT_FILENAME_FORMAT
from gummibaum.exceptions import ConfigurationError, OutputError

from .collection import Collection, Column
from .handlers import ConstantHandler, LineHandler, RowHandler, write_handlers
from .splitter import Document

logger = logging.getLogger(__name__)

SinkFactory = Callable[[int], TextIO]


class OutputMode(str, enum.Enum):
    MERGE = "merge"
    FAN_OUT = "fan-out"


class DirectorySinkFactory:
    """Open one text file per column inside ``directory``.

    Files are named with ``filename_format`` formatted with the 1-based
    column ordinal, ``out1.tex``, ``out2.tex`` and so on by default.
    """

    def __init__(
        self,
        directory: Path,
        filename_format: str = FANOUT_FILENAME_FORMAT,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.directory = Path(directory)
        self.filename_format = filename_format
        self.encoding = encoding

    def path_for(self, index: int) -> Path:
        return self.directory / self.filename_format.format(index=index)

    def __call__(self, index: int) -> TextIO:
        return self.path_for(index).open("w", encoding=self.encoding)


@dataclass
class FanOutResult:
    """Ordinals of the columns written and skipped in fan-out mode."""

    written: list[int] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.written) + len(self.skipped)


def substitute_lines(
    lines: Iterable[str], const_handler: ConstantHandler, stream: TextIO
) -> int:
    """Write ``lines`` through the constant handler only; return the line count.

    This is the plain substitution path used when no row placeholders are
    configured; the lines don't need to contain any markers.
    """
    count = 0
    for line in lines:
        write_handlers(stream, line, [const_handler])
        count += 1
    return count


class ExpansionDriver:
    """Produce expanded output for one document.

    Parameters
    ----------
    document : Document
        The split input document.
    const_handler : ConstantHandler
        Applied to every line.
    row_handler : RowHandler | None, optional
        Template bound to each column for the body lines. ``None`` or an
        empty mapping disables repetition.
    collection : Collection | None, optional
        Data columns; without it the body is skipped in merge mode.

    Examples
    --------
    >>> import io
    >>> from gummibaum.pipeline.expansion.collection import MemorySource
    >>> doc = Document(("H",), ("- NAME",), ("F",))
    >>> data = Collection.from_source(MemorySource(["name"], [["a"], ["b"]]))
    >>> out = io.StringIO()
    >>> ExpansionDriver(doc, ConstantHandler({}), RowHandler({"NAME": "name"}), data).merge(out)
    >>> out.getvalue()
    'H\\n- a\\n- b\\nF\\n'
    """

    def __init__(
        self,
        document: Document,
        const_handler: ConstantHandler,
        row_handler: RowHandler | None = None,
        collection: Collection | None = None,
    ) -> None:
        self.document = document
        self.const_handler = const_handler
        self.row_handler = row_handler
        self.collection = collection

    @property
    def repeats_body(self) -> bool:
        """True if row placeholders are configured."""
        return bool(self.row_handler)

    def _write_lines(
        self, stream: TextIO, lines: Iterable[str], handlers: list[LineHandler]
    ) -> None:
        for line in lines:
            write_handlers(stream, line, handlers)

    def _write_body(
        self, stream: TextIO, row_handler: RowHandler, column: Column
    ) -> None:
        handlers: list[LineHandler] = [self.const_handler, row_handler.bind(column)]
        self._write_lines(stream, self.document.body, handlers)

    def merge(self, stream: TextIO) -> None:
        """Write the whole expansion to ``stream``.

        Raises
        ------
        OutputError
            If writing fails.
        """
        constants: list[LineHandler] = [self.const_handler]
        row_handler = self.row_handler
        if not row_handler:
            self._write_lines(stream, self.document.lines(), constants)
            return
        self._write_lines(stream, self.document.head, constants)
        if self.collection is not None:
            for column in self.collection:
                self._write_body(stream, row_handler, column)
        else:
            logger.info("No data collection given, skipping the repeated body")
        self._write_lines(stream, self.document.foot, constants)

    def write_column(self, stream: TextIO, column: Column) -> None:
        """Write head, the body expanded for ``column`` and foot to ``stream``.

        Without row placeholders the body is left out.
        """
        constants: list[LineHandler] = [self.const_handler]
        self._write_lines(stream, self.document.head, constants)
        if self.row_handler:
            self._write_body(stream, self.row_handler, column)
        self._write_lines(stream, self.document.foot, constants)

    def fan_out(self, sink_factory: SinkFactory) -> FanOutResult:
        """Write one sink per column, in collection order.

        Parameters
        ----------
        sink_factory : SinkFactory
            Called with the 1-based column ordinal; returns an open text
            stream or raises ``OSError``.

        Returns
        -------
        FanOutResult
            Written and skipped column ordinals.

        Raises
        ------
        ConfigurationError
            If no collection is available.
        OutputError
            If writing to or closing a sink fails; no further columns are
            processed.
        """
        if self.collection is None:
            raise ConfigurationError("fan-out mode requires a data collection")
        result = FanOutResult()
        for index, column in enumerate(self.collection, start=1):
            try:
                sink = sink_factory(index)
            except OSError as error:
                logger.error("Unable to create output for column %d: %s", index, error)
                result.skipped.append(index)
                continue
            try:
                with sink:
                    self.write_column(sink, column)
            except (OutputError, OSError) as error:
                raise OutputError(
                    f"failed to write output for column {index}: {error}",
                    context={"column": index},
                ) from error
            logger.debug("Wrote output for column %d", index)
            result.written.append(index)
        logger.info(
            "Fan-out finished: %d written, %d skipped",
            len(result.written),
            len(result.skipped),
        )
        return result

    def run(
        self,
        mode: OutputMode,
        stream: TextIO | None = None,
        sink_factory: SinkFactory | None = None,
    ) -> FanOutResult | None:
        """Dispatch to ``merge`` or ``fan_out`` according to ``mode``."""
        if mode is OutputMode.FAN_OUT:
            if sink_factory is None:
                raise ConfigurationError("fan-out mode requires an output directory")
            return self.fan_out(sink_factory)
        if stream is None:
            raise ConfigurationError("merge mode requires an output stream")
        self.merge(stream)
        return None
