"""
Restartable Cursors over Immutable Sources

A backtracking pipeline scans the same source once per branch. Plain Python
iterators cannot do that: consuming one consumes it for everybody. A
``Cursor`` separates the position from the data:

- the data (a tuple or a ``pyarrow.Table``) is immutable and shared,
- the position is private to each cursor,
- ``clone()`` duplicates the position, ``restart()`` starts over,
- ``map`` / ``filter`` build lazy adaptors that clone and restart through
  to the cursor they wrap.

Typical use inside an arrow:

    edges = restartable(pa.table({"src": [...], "dst": [...]}))
    successors = lambda n: edges.restart().filter(lambda e: e[0] == n).map(second)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import (
    Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union
)

import pyarrow as pa

from .exceptions import NotRestartableError, UnknownColumnError, ensure_arrow

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


# =============================================================================
# Cursor Base
# =============================================================================

class Cursor(ABC, Generic[T]):
    """
    Iterator over an immutable source that can be cloned and restarted.

    Laws (for any cursor c):
      1) Independence: advancing c.clone() never advances c, and vice versa
      2) Restart:      list(c.restart()) == list(c.restart())
      3) Position:     list(c.clone()) == list(c), taken from the same state

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a type-class.
    ::: This is stateful.
    """

    __slots__ = ()

    def __iter__(self) -> "Cursor[T]":
        return self

    @abstractmethod
    def __next__(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def clone(self) -> "Cursor[T]":
        """A new cursor at the same position over the same data."""
        raise NotImplementedError

    @abstractmethod
    def restart(self) -> "Cursor[T]":
        """A new cursor at the start of the same data."""
        raise NotImplementedError

    def __copy__(self) -> "Cursor[T]":
        return self.clone()

    def map(self, fn: Callable[[T], U]) -> "MapCursor[T, U]":
        """Lazily apply ``fn`` to each element."""
        return MapCursor(self, ensure_arrow(fn, "fn"))

    def filter(self, pred: Callable[[T], bool]) -> "FilterCursor[T]":
        """Lazily keep the elements satisfying ``pred``."""
        return FilterCursor(self, ensure_arrow(pred, "pred"))

    def remaining(self) -> List[T]:
        """The elements still ahead of this cursor, without consuming them."""
        return list(self.clone())


# =============================================================================
# Sources
# =============================================================================

class SequenceCursor(Cursor[T]):
    """Index-based cursor into a shared tuple.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a cursor.
    ::: This is stateful.
    """

    __slots__ = ("_data", "_pos")

    def __init__(self, data: Iterable[T], pos: int = 0):
        # tuple() of a tuple is the same object, so clones share the data
        self._data: Tuple[T, ...] = tuple(data)
        self._pos = pos

    @property
    def position(self) -> int:
        return self._pos

    def __next__(self) -> T:
        if self._pos >= len(self._data):
            raise StopIteration
        item = self._data[self._pos]
        self._pos += 1
        return item

    def __length_hint__(self) -> int:
        return max(len(self._data) - self._pos, 0)

    def clone(self) -> "SequenceCursor[T]":
        return SequenceCursor(self._data, self._pos)

    def restart(self) -> "SequenceCursor[T]":
        return SequenceCursor(self._data, 0)

    def __repr__(self) -> str:
        return f"SequenceCursor(pos={self._pos}, len={len(self._data)})"


class TableCursor(Cursor[Tuple[Any, ...]]):
    """
    Index-based cursor into a shared PyArrow table.

    Yields each row as a tuple of Python values, in column order. The table
    is never copied; clones hold the same table and their own row index.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a cursor.
    ::: This is a data-source.
    ::: This is stateful.
    """

    __slots__ = ("_table", "_columns", "_pos")

    def __init__(self, table: pa.Table, columns: Optional[Sequence[str]] = None, pos: int = 0):
        if columns is not None:
            missing = [name for name in columns if name not in table.column_names]
            if missing:
                raise UnknownColumnError(
                    f"Table has no column(s) {missing}; available: {table.column_names}"
                )
            table = table.select(list(columns))
        self._table = table
        self._columns = table.columns
        self._pos = pos

    @classmethod
    def _at(cls, table: pa.Table, pos: int) -> "TableCursor":
        cursor = cls.__new__(cls)
        cursor._table = table
        cursor._columns = table.columns
        cursor._pos = pos
        return cursor

    @property
    def table(self) -> pa.Table:
        return self._table

    @property
    def column_names(self) -> List[str]:
        return self._table.column_names

    @property
    def position(self) -> int:
        return self._pos

    def __next__(self) -> Tuple[Any, ...]:
        if self._pos >= self._table.num_rows:
            raise StopIteration
        row = tuple(column[self._pos].as_py() for column in self._columns)
        self._pos += 1
        return row

    def __length_hint__(self) -> int:
        return max(self._table.num_rows - self._pos, 0)

    def clone(self) -> "TableCursor":
        return TableCursor._at(self._table, self._pos)

    def restart(self) -> "TableCursor":
        return TableCursor._at(self._table, 0)

    def __repr__(self) -> str:
        return f"TableCursor(columns={self.column_names}, pos={self._pos}, rows={self._table.num_rows})"


# =============================================================================
# Adaptors
# =============================================================================

class MapCursor(Cursor[U], Generic[T, U]):
    """Lazily maps a function over another cursor.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a cursor.
    ::: This is stateful.
    """

    __slots__ = ("_inner", "_fn")

    def __init__(self, inner: Cursor[T], fn: Callable[[T], U]):
        self._inner = inner
        self._fn = fn

    def __next__(self) -> U:
        return self._fn(next(self._inner))

    def clone(self) -> "MapCursor[T, U]":
        return MapCursor(self._inner.clone(), self._fn)

    def restart(self) -> "MapCursor[T, U]":
        return MapCursor(self._inner.restart(), self._fn)


class FilterCursor(Cursor[T]):
    """Lazily filters another cursor by a predicate.

    ::: This is-in-layer Domain-Specific-Language-Layer.
    ::: This is a cursor.
    ::: This is stateful.
    """

    __slots__ = ("_inner", "_pred")

    def __init__(self, inner: Cursor[T], pred: Callable[[T], bool]):
        self._inner = inner
        self._pred = pred

    def __next__(self) -> T:
        while True:
            item = next(self._inner)
            if self._pred(item):
                return item

    def clone(self) -> "FilterCursor[T]":
        return FilterCursor(self._inner.clone(), self._pred)

    def restart(self) -> "FilterCursor[T]":
        return FilterCursor(self._inner.restart(), self._pred)


# =============================================================================
# Construction
# =============================================================================

def restartable(source: Union[Cursor[T], pa.Table, Iterable[T]]) -> Cursor[Any]:
    """
    Get a restartable cursor positioned at the start of ``source``.

    - a Cursor is restarted (its data is shared, not copied)
    - a pyarrow.Table becomes a TableCursor over its rows
    - a tuple, list or range becomes a SequenceCursor
    - any other iterable is consumed once and materialized into a tuple

    Raises:
        NotRestartableError: if ``source`` is not iterable
    """
    if isinstance(source, Cursor):
        return source.restart()
    if isinstance(source, pa.Table):
        return TableCursor(source)
    if isinstance(source, (tuple, list, range)):
        return SequenceCursor(source)

    try:
        items = iter(source)
    except TypeError:
        raise NotRestartableError(
            f"Cannot build a restartable cursor from {type(source).__name__}"
        ) from None

    logger.debug("materializing %s into a restartable cursor", type(source).__name__)
    return SequenceCursor(items)


__all__ = [
    "Cursor",
    "SequenceCursor",
    "TableCursor",
    "MapCursor",
    "FilterCursor",
    "restartable",
]
