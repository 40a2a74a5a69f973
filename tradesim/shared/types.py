"""
Shared types for the replay engine.

This module consolidates the Candle dataclass, the supported indicator source
fields and the OrderSide enum that are used across the data, indicator,
execution and replay modules.
"""
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Mapping

import numpy as np


# Fields an indicator may read from a candle (the last four are derived views)
SOURCE_FIELDS = (
    'timestamp', 'open', 'high', 'low', 'close', 'volume',
    'hl2', 'hlc3', 'ohlc4', 'hlcc4',
)

CANDLE_FIELDS = SOURCE_FIELDS[:6]


def is_number(value: Any) -> bool:
    """True for finite real numbers (bools, NaN and infinities excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    if isinstance(value, (float, np.floating)):
        return math.isfinite(value)
    return False


def to_float(value: Any) -> float:
    """Convert a numeric value to float, NaN when it is not a finite number."""
    return float(value) if is_number(value) else float('nan')


class OrderSide(Enum):
    """Side of an order issued by a strategy."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Candle:
    """One OHLCV bar; immutable once produced."""
    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float = float('nan')

    @property
    def hl2(self) -> float:
        return (self.high + self.low) / 2

    @property
    def hlc3(self) -> float:
        return (self.high + self.low + self.close) / 3

    @property
    def ohlc4(self) -> float:
        return (self.open + self.high + self.low + self.close) / 4

    @property
    def hlcc4(self) -> float:
        return (self.high + self.low + self.close * 2) / 4

    def value(self, source: str = 'close') -> float:
        """
        Read a source field or derived view.

        Args:
            source: One of SOURCE_FIELDS

        Returns:
            The value, or NaN for unsupported sources
        """
        if source not in SOURCE_FIELDS:
            return float('nan')
        value = getattr(self, source)
        return float('nan') if value is None else value

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> 'Candle':
        """Build a candle from a canonical row (missing prices become NaN)."""
        return cls(
            timestamp=row.get('timestamp'),
            open=to_float(row.get('open')),
            high=to_float(row.get('high')),
            low=to_float(row.get('low')),
            close=to_float(row.get('close')),
            volume=to_float(row.get('volume')),
        )
