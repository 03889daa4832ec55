"""Tabular data model for the expansion engine.

A ``Column`` is one materialized data row (the naming follows the document
author's view: every row of the data source becomes one column of output).
It pairs a header of field names with the row's values and can be read by
position or by field name. A ``Collection`` is the ordered list of all
columns of one ``TabularSource``, sharing a single header.

Lookups come in two tiers with identical semantics:

- best-effort accessors (``get_by_position``, ``get_by_name``, ``get``)
  return ``NO_COL_ENTRY`` when nothing is found;
- strict accessors (``at``, ``value``, ``element``) raise
  ``ColumnKeyError``.

Keys for the polymorphic accessors are tagged: ``ByPosition(2)`` or
``ByName("email")``.

Examples
--------
>>> column = Column(("a", "b"), ("1",))
>>> column.get_by_position(0), column.get_by_name("b")
('1', 'NO VALUE')
>>> column.get(ByName("a"))
'1'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Protocol

import pandas as pd

from gummibaum.config import NO_COL_ENTRY
from gummibaum.exceptions import ColumnKeyError


class TabularSource(Protocol):
    """Anything that provides a header and rows of string values.

    ``header`` may return ``None`` when the source has no field names; its
    columns are then only accessible by position. Either method may raise to
    signal a read failure.
    """

    def header(self) -> Sequence[str] | None: ...

    def rows(self) -> Sequence[Sequence[str]]: ...


class ColumnKey(ABC):
    """Tagged key for ``Column.get`` and ``Column.element``."""

    @abstractmethod
    def lookup(self, column: Column) -> str:
        """Best-effort lookup of this key in ``column``."""

    @abstractmethod
    def fetch(self, column: Column) -> str:
        """Strict lookup of this key in ``column``."""


@dataclass(frozen=True)
class ByPosition(ColumnKey):
    """Address a value by its 0-based position in the row."""

    index: int

    def lookup(self, column: Column) -> str:
        return column.get_by_position(self.index)

    def fetch(self, column: Column) -> str:
        return column.at(self.index)


@dataclass(frozen=True)
class ByName(ColumnKey):
    """Address a value by its header field name."""

    name: str

    def lookup(self, column: Column) -> str:
        return column.get_by_name(self.name)

    def fetch(self, column: Column) -> str:
        return column.value(self.name)


class Column:
    """One data row with positional and name-keyed access.

    The lookup mapping pairs header and values up to the shorter of the two;
    surplus values stay reachable by position. For duplicate header names the
    last occurrence wins.

    Parameters
    ----------
    header : Sequence[str]
        Field names; shared with the other columns of a collection.
    values : Sequence[str]
        Field values of this row.
    """

    __slots__ = ("_header", "_values", "_mapping")

    def __init__(self, header: Sequence[str], values: Sequence[str]) -> None:
        self._header = header
        self._values = tuple(values)
        self._mapping: Mapping[str, str] = MappingProxyType(
            dict(zip(header, self._values))
        )

    def __repr__(self) -> str:
        return f"Column(header={list(self._header)!r}, values={list(self._values)!r})"

    def __len__(self) -> int:
        return len(self._values)

    @property
    def header(self) -> Sequence[str]:
        return self._header

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    @property
    def mapping(self) -> Mapping[str, str]:
        """Read-only view of the name to value mapping."""
        return self._mapping

    def get_by_position(self, index: int) -> str:
        """Return the value at ``index`` or ``NO_COL_ENTRY`` if out of range."""
        if index < 0 or index >= len(self._values):
            return NO_COL_ENTRY
        return self._values[index]

    def get_by_name(self, name: str) -> str:
        """Return the value for field ``name`` or ``NO_COL_ENTRY``."""
        return self._mapping.get(name, NO_COL_ENTRY)

    def get(self, key: ColumnKey) -> str:
        """Best-effort lookup by tagged key.

        Anything that isn't a ``ColumnKey`` yields ``NO_COL_ENTRY``.
        """
        if not isinstance(key, ColumnKey):
            return NO_COL_ENTRY
        return key.lookup(self)

    def at(self, index: int) -> str:
        """Return the value at ``index``.

        Raises
        ------
        ColumnKeyError
            If ``index`` is not in ``[0, len(values))``.
        """
        if index < 0 or index >= len(self._values):
            raise ColumnKeyError(
                f"invalid index: {index}, index must be >= 0 and < {len(self._values)}",
                context={"index": index, "size": len(self._values)},
            )
        return self._values[index]

    def value(self, name: str) -> str:
        """Return the value for field ``name``.

        Raises
        ------
        ColumnKeyError
            If ``name`` is not a mapped field; the message lists valid keys.
        """
        try:
            return self._mapping[name]
        except KeyError:
            valid_keys = ", ".join(self._mapping)
            raise ColumnKeyError(
                f"invalid key: {name}, allowed keys are {valid_keys}",
                context={"key": name},
            ) from None

    def element(self, key: ColumnKey) -> str:
        """Strict lookup by tagged key.

        Raises
        ------
        ColumnKeyError
            If the key is not a ``ColumnKey`` or does not resolve.
        """
        if not isinstance(key, ColumnKey):
            raise ColumnKeyError(
                "invalid key type for column: expected ByPosition or ByName, "
                f"got {type(key).__name__}"
            )
        return key.fetch(self)


class Collection:
    """Ordered columns sharing one header.

    Use ``Collection.from_source`` to build one from a ``TabularSource``.
    """

    __slots__ = ("_header", "_columns")

    def __init__(self, header: tuple[str, ...], columns: Sequence[Column]) -> None:
        self._header = header
        self._columns = tuple(columns)

    def __repr__(self) -> str:
        return f"Collection(header={list(self._header)!r}, columns={len(self._columns)})"

    def __len__(self) -> int:
        return len(self._columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __getitem__(self, index: int) -> Column:
        return self._columns[index]

    @property
    def header(self) -> tuple[str, ...]:
        return self._header

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @classmethod
    def from_source(cls, source: TabularSource) -> Collection:
        """Read header and rows once and build one column per row.

        Errors raised by the source propagate unchanged; no collection is
        built in that case.

        Parameters
        ----------
        source : TabularSource
            Provider of the header and the raw rows.

        Returns
        -------
        Collection
            Columns in source order, all referencing the same header tuple.
        """
        raw_header = source.header()
        rows = source.rows()
        header = tuple(raw_header) if raw_header is not None else ()
        return cls(header, [Column(header, row) for row in rows])


class MemorySource:
    """``TabularSource`` over predefined in-memory data."""

    def __init__(
        self,
        header: Sequence[str] | None,
        rows: Sequence[Sequence[str]],
    ) -> None:
        self._header = header
        self._rows = rows

    def header(self) -> Sequence[str] | None:
        return self._header

    def rows(self) -> Sequence[Sequence[str]]:
        return self._rows


class DataFrameSource:
    """``TabularSource`` over a pandas DataFrame.

    Column labels become the header; every cell is rendered as a string and
    missing values (``NaN``/``None``) become empty strings.
    """

    def __init__(self, dataframe: pd.DataFrame) -> None:
        self._dataframe = dataframe

    def header(self) -> list[str]:
        return [str(label) for label in self._dataframe.columns]

    def rows(self) -> list[list[str]]:
        filled = self._dataframe.astype(object).where(self._dataframe.notna(), "")
        return [[str(cell) for cell in record] for record in filled.itertuples(index=False)]
