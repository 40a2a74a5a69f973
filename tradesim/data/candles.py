"""
Capacity-bounded candle window for one traded pair.

Wraps a BoundedColumnStore holding the canonical candle columns and exposes
candle-shaped access (Candle rows, source-field series, derived views).
"""
from typing import Iterator, List, Optional

import pandas as pd

from .column_store import BoundedColumnStore
from ..shared.defaults import CANDLE_CAPACITY
from ..shared.types import CANDLE_FIELDS, SOURCE_FIELDS, Candle


class CandleStore:
    """Append-only window of the most recent candles."""

    def __init__(self, capacity: int = CANDLE_CAPACITY):
        self._store = BoundedColumnStore(*CANDLE_FIELDS, capacity=capacity)

    @property
    def capacity(self) -> int:
        return self._store.capacity

    @property
    def store(self) -> BoundedColumnStore:
        """Underlying column store (for listeners and column access)."""
        return self._store

    @property
    def offset(self) -> int:
        """Absolute index of the oldest retained candle (= candles evicted so far)."""
        return self._store.evicted

    @property
    def total(self) -> int:
        """Candles appended since the last clear, evicted ones included."""
        return self._store.evicted + len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[Candle]:
        for row in self._store:
            yield Candle.from_mapping(row)

    def append(self, *candles: Candle) -> int:
        return self._store.append_rows(*(c.as_dict() for c in candles))

    def set_capacity(self, capacity: int) -> None:
        self._store.set_capacity(capacity)

    def clear(self) -> None:
        self._store.clear()

    def row_at(self, index: int) -> Candle:
        return Candle.from_mapping(self._store.row_at(index))

    def first(self, n: int = 0) -> Candle:
        return self.row_at(n)

    def last(self, n: int = 0) -> Candle:
        """The n'th most recent candle (0 = latest)."""
        return self.row_at(len(self) - 1 - n)

    def candles(self) -> List[Candle]:
        return list(self)

    def values(self, source: str = 'close', count: Optional[int] = None) -> List[float]:
        """
        Values of a source field for the trailing `count` candles.

        Args:
            source: One of SOURCE_FIELDS (derived views such as hl2 included)
            count: Number of most recent candles (None = whole window)

        Returns:
            List of values, oldest first; empty for unsupported sources or count <= 0
        """
        if source not in SOURCE_FIELDS:
            return []
        n = len(self) if count is None else max(0, min(count, len(self)))
        if n == 0:
            return []
        if source in CANDLE_FIELDS:
            return self._store.column(source)[len(self) - n:]
        return [self.row_at(i).value(source) for i in range(len(self) - n, len(self))]

    def to_frame(self) -> pd.DataFrame:
        """Candles as a DataFrame indexed by UTC datetime."""
        df = self._store.to_frame()
        if df.empty:
            return df
        df.index = pd.to_datetime(df['timestamp'], unit='ms', utc=True)
        df.index.name = 'date'
        return df
