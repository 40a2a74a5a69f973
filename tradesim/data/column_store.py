"""
Bounded column-oriented table.

Stores rows as synchronized columns (one list per column name) with a maximum
row capacity. Appending past the capacity evicts the oldest rows in bulk so
that every column keeps the same length and never exceeds the capacity.

Mutations are reported on a listener channel as StoreEvent values. Positional
writes outside the table are reported as ERROR events instead of raising.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional

import pandas as pd

from ..shared.defaults import INDICATOR_CAPACITY


logger = logging.getLogger(__name__)


class StoreEventKind(Enum):
    """Kind of change reported by a BoundedColumnStore."""
    COLUMN_ADDED = "column_added"
    COLUMN_DROPPED = "column_dropped"
    ROWS_ADDED = "rows_added"
    ROWS_REMOVED = "rows_removed"
    VALUE_CHANGED = "value_changed"
    CLEARED = "cleared"
    ERROR = "error"


@dataclass
class StoreEvent:
    """A change notification; payload depends on the kind."""
    kind: StoreEventKind
    payload: Any = None


Listener = Callable[[StoreEvent], None]


class BoundedColumnStore:
    """
    Column-oriented table with a fixed row capacity.

    Rows are addressed by position only. Missing values are stored as None
    (the "absent" marker).
    """

    def __init__(self, *columns: str, capacity: int = INDICATOR_CAPACITY):
        """
        Initialize the store.

        Args:
            *columns: Initial column names
            capacity: Maximum number of rows kept (oldest rows evicted first)
        """
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 0:
            raise ValueError(f"Capacity must be a non-negative integer, got {capacity!r}")
        self.capacity = capacity
        self.evicted = 0  # Rows dropped from the front by the capacity rule
        self._columns: Dict[str, List[Any]] = {}
        self._length = 0
        self._listeners: List[Listener] = []
        self.add_column(*columns)

    # ------------------------------------------------------------------
    # Listener channel
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register a callable receiving every StoreEvent."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: StoreEventKind, payload: Any = None) -> None:
        event = StoreEvent(kind, payload)
        for listener in list(self._listeners):
            listener(event)

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def add_column(self, *names: str) -> None:
        """Create columns backfilled with None; existing names are left alone."""
        for name in names:
            if not isinstance(name, (str, int)) or isinstance(name, bool):
                continue
            if name in self._columns:
                continue
            self._columns[name] = [None] * self._length
            self._emit(StoreEventKind.COLUMN_ADDED, name)

    def drop_column(self, *names: str) -> None:
        for name in names:
            if name in self._columns:
                del self._columns[name]
                self._emit(StoreEventKind.COLUMN_DROPPED, name)
        if not self._columns:
            self._length = 0

    def column(self, name: str) -> List[Any]:
        """Copy of one column's values (oldest first)."""
        if name not in self._columns:
            raise KeyError(f"Column '{name}' not found. Available: {self.columns}")
        return list(self._columns[name])

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        for i in range(self._length):
            yield self.row_at(i)

    def append_rows(self, *rows: Mapping[str, Any]) -> int:
        """
        Append rows, evicting from the front if capacity is exceeded.

        Keys not yet present become new columns; columns missing from a row
        receive None. Non-mapping rows are ignored.

        Returns:
            Number of rows appended
        """
        added = []
        for row in rows:
            if not isinstance(row, Mapping):
                continue
            self.add_column(*row.keys())
            for name, values in self._columns.items():
                values.append(row.get(name))
            self._length += 1
            added.append(dict(row))
        if added:
            self._emit(StoreEventKind.ROWS_ADDED, added)
        self._enforce_capacity()
        return len(added)

    def splice_rows(
        self,
        start: int,
        delete_count: Optional[int] = None,
        *rows: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        """
        Replace a contiguous range of rows.

        Args:
            start: First row to replace; negative or non-integer values make this a no-op
            delete_count: Rows to remove (None = through the end)
            *rows: Rows inserted at start

        Returns:
            The removed rows
        """
        if not isinstance(start, int) or isinstance(start, bool) or start < 0:
            return []
        start = min(start, self._length)
        if delete_count is None or not isinstance(delete_count, int) or delete_count < 0:
            delete_count = self._length - start if delete_count is None else 0
        delete_count = min(delete_count, self._length - start)

        inserted = [dict(row) for row in rows if isinstance(row, Mapping)]
        for row in inserted:
            self.add_column(*row.keys())

        removed = [self.row_at(start + i) for i in range(delete_count)]
        for name, values in self._columns.items():
            values[start:start + delete_count] = [row.get(name) for row in inserted]
        self._length += len(inserted) - delete_count

        if removed:
            self._emit(StoreEventKind.ROWS_REMOVED, removed)
        if inserted:
            self._emit(StoreEventKind.ROWS_ADDED, inserted)
        self._enforce_capacity()
        return removed

    def pop(self) -> Optional[Dict[str, Any]]:
        """Remove and return the last row (None when empty)."""
        if self._length == 0:
            return None
        removed = {name: values.pop() for name, values in self._columns.items()}
        self._length -= 1
        self._emit(StoreEventKind.ROWS_REMOVED, [removed])
        self._check_invariant()
        return removed

    def clear(self) -> None:
        for name in self._columns:
            self._columns[name] = []
        self._length = 0
        self.evicted = 0
        self._emit(StoreEventKind.CLEARED)

    def row_at(self, index: int) -> Dict[str, Any]:
        """
        Snapshot of all columns at a position.

        Negative indices count from the end.

        Raises:
            IndexError: If the index is outside the table
        """
        if index < 0:
            index += self._length
        if index < 0 or index >= self._length:
            raise IndexError(f"Row {index} out of range for {self._length} rows")
        return {name: values[index] for name, values in self._columns.items()}

    def first(self, n: int = 0) -> Dict[str, Any]:
        """The n'th row from the start."""
        return self.row_at(n)

    def last(self, n: int = 0) -> Dict[str, Any]:
        """The n'th row from the end, i.e. row (length - 1 - n)."""
        return self.row_at(self._length - 1 - n)

    def set_value_at(self, index: int, column: str, value: Any) -> bool:
        """
        Overwrite one cell.

        Unknown columns are created first. An index outside the table is
        reported as an ERROR event and leaves the store unchanged.

        Returns:
            True if the value was written
        """
        if not isinstance(column, (str, int)) or isinstance(column, bool):
            return False
        if column not in self._columns:
            self.add_column(column)
        if not isinstance(index, int) or index < 0 or index >= self._length:
            logger.debug(f"set_value_at: index {index} out of bounds ({self._length} rows)")
            self._emit(StoreEventKind.ERROR, IndexError(f"Index {index} out of bounds"))
            return False
        old = self._columns[column][index]
        self._columns[column][index] = value
        self._emit(StoreEventKind.VALUE_CHANGED, (index, column, old, value))
        return True

    # ------------------------------------------------------------------
    # Capacity
    # ------------------------------------------------------------------

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity; invalid values are ignored."""
        if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 0:
            return
        self.capacity = capacity
        self._enforce_capacity()

    def _enforce_capacity(self) -> None:
        overflow = self._length - self.capacity
        if overflow > 0:
            removed = [self.row_at(i) for i in range(overflow)]
            for values in self._columns.values():
                del values[:overflow]
            self._length = self.capacity
            self.evicted += overflow
            self._emit(StoreEventKind.ROWS_REMOVED, removed)
        self._check_invariant()

    def _check_invariant(self) -> None:
        for name, values in self._columns.items():
            if len(values) != self._length:
                raise RuntimeError(
                    f"Column '{name}' has {len(values)} rows, expected {self._length}"
                )
        if self._length > self.capacity:
            raise RuntimeError(f"Store holds {self._length} rows, capacity {self.capacity}")

    # ------------------------------------------------------------------
    # Row helpers
    # ------------------------------------------------------------------

    def map(self, callback: Callable[[Dict[str, Any], int], Any]) -> List[Any]:
        return [callback(row, i) for i, row in enumerate(self)]

    def filter(self, callback: Callable[[Dict[str, Any], int], bool]) -> 'BoundedColumnStore':
        """New store (same columns and capacity) holding the matching rows."""
        result = BoundedColumnStore(*self.columns, capacity=self.capacity)
        result.append_rows(*(row for i, row in enumerate(self) if callback(row, i)))
        return result

    def find(self, callback: Callable[[Dict[str, Any], int], bool]) -> Optional[Dict[str, Any]]:
        for i, row in enumerate(self):
            if callback(row, i):
                return row
        return None

    def contains_row(self, row: Mapping[str, Any]) -> bool:
        """True if some row equals `row` on every column."""
        return any(
            all(existing[name] == row.get(name) for name in self._columns)
            for existing in self
        )

    def clone(self) -> 'BoundedColumnStore':
        """Independent copy with the same columns, rows and capacity (no listeners)."""
        copy = BoundedColumnStore(*self.columns, capacity=self.capacity)
        copy._columns = {name: list(values) for name, values in self._columns.items()}
        copy._length = self._length
        copy.evicted = self.evicted
        return copy

    def to_frame(self) -> pd.DataFrame:
        """Columns as a DataFrame, one frame row per stored row."""
        return pd.DataFrame({name: list(values) for name, values in self._columns.items()})
