"""
Base indicator interface.

All indicators follow this pattern:
1. Advance a small recurrence state by one input element (step)
2. Append the resulting output row to a capacity-bounded column store
3. Track how many input elements were consumed (cursor) so that feeding a
   growing input only processes the unseen suffix
"""
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from ..data.column_store import BoundedColumnStore
from ..shared.defaults import DEFAULT_SOURCE, INDICATOR_CAPACITY
from ..shared.types import Candle


logger = logging.getLogger(__name__)

# Field name, or callable (indicator, trade_data) -> input element
Source = Union[str, Callable[..., Any]]


class InputKind(Enum):
    """Kind of element an indicator consumes."""
    SCALAR = "scalar"
    CANDLE = "candle"


def as_candle(element: Any) -> Optional[Candle]:
    """Coerce a candle-like element; None if it is not one."""
    if isinstance(element, Candle):
        return element
    if isinstance(element, Mapping):
        return Candle.from_mapping(element)
    return None


class Indicator(ABC):
    """
    Base class for all indicators.

    Subclasses declare their output `columns` and implement `step` (one
    element in, one output row out) and `_reset_state`.
    """

    input_kind: InputKind = InputKind.SCALAR
    columns: Tuple[str, ...] = ('value',)
    primary: str = 'value'

    def __init__(
        self,
        id: str = '',
        name: str = '',
        period: int = 1,
        capacity: int = INDICATOR_CAPACITY,
        source: Source = DEFAULT_SOURCE,
    ):
        """
        Args:
            id: Identifier of the indicator instance
            name: Display name (defaults to the class name)
            period: Recurrence period
            capacity: Maximum number of output rows kept
            source: Candle field (see SOURCE_FIELDS) or callable producing the input element
        """
        if not isinstance(period, int) or isinstance(period, bool) or period < 1:
            raise ValueError(f"Period must be a positive integer, got {period!r}")
        self.id = id
        self.name = name or type(self).__name__
        self.period = period
        self.source = source
        self.cursor = 0
        self._store = BoundedColumnStore(*self.columns, capacity=capacity)
        self._reset_state()

    @property
    def capacity(self) -> int:
        return self._store.capacity

    @abstractmethod
    def _reset_state(self) -> None:
        """Reset the recurrence state to "no input seen"."""
        pass

    @abstractmethod
    def step(self, element: Any) -> Dict[str, Any]:
        """
        Advance the recurrence by one input element.

        Args:
            element: Scalar value or candle, depending on input_kind

        Returns:
            Output row (one value per column; NaN/None when not yet available)
        """
        pass

    def update(self, elements: Sequence[Any], offset: int = 0) -> int:
        """
        Process the elements not seen yet.

        `elements[k]` is treated as input number `offset + k`; only inputs
        with number >= cursor are processed, so calling again with a grown
        input is idempotent for the already-processed prefix.

        Args:
            elements: Accumulated input (or a window of it)
            offset: Absolute input number of elements[0]

        Returns:
            Number of elements processed
        """
        if elements is None:
            return 0
        if offset > self.cursor:
            logger.warning(
                f"{self.name}: inputs {self.cursor}..{offset - 1} were never seen, skipping ahead"
            )
            self.cursor = offset
        pending = list(elements)[self.cursor - offset:]
        if not pending:
            return 0
        rows = [self.step(element) for element in pending]
        self.cursor += len(pending)
        self._store.append_rows(*rows)
        return len(rows)

    def push(self, *elements: Any) -> int:
        """Process new elements unconditionally."""
        return self.update(elements, offset=self.cursor)

    def reset(self) -> None:
        """Drop all outputs and state."""
        self.cursor = 0
        self._store.clear()
        self._reset_state()

    def set_capacity(self, capacity: int) -> None:
        self._store.set_capacity(capacity)

    def params(self) -> Dict[str, Any]:
        """Constructor arguments reproducing this indicator's configuration."""
        return {
            'id': self.id,
            'name': self.name,
            'period': self.period,
            'capacity': self.capacity,
            'source': self.source,
        }

    def clone(self) -> 'Indicator':
        """Independent copy with identical configuration and empty state."""
        return type(self)(**self.params())

    def __len__(self) -> int:
        return len(self._store)

    def output(self, column: Optional[str] = None) -> List[Any]:
        """Values of one output column, oldest first."""
        return self._store.column(column or self.primary)

    def outputs(self) -> Dict[str, List[Any]]:
        return {name: self._store.column(name) for name in self._store.columns}

    def latest(self, column: Optional[str] = None) -> Any:
        """Most recent value of a column, None before the first update."""
        if len(self._store) == 0:
            return None
        return self._store.last()[column or self.primary]

    def to_frame(self) -> pd.DataFrame:
        return self._store.to_frame()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, period={self.period}, cursor={self.cursor})"
