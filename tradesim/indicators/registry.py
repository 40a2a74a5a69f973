"""
Indicator registry.

Maps the short indicator codes used in scenario configs (MA, EMA, MACD, RSI,
ATR, ST) to their classes.
"""
from typing import Any, Dict, Type

from .base import Indicator
from .moving_average import ExponentialMovingAverage, MovingAverage
from .momentum import MovingAverageConvergenceDivergence, RelativeStrengthIndex
from .volatility import AverageTrueRange, SuperTrend


INDICATORS: Dict[str, Type[Indicator]] = {
    'MA': MovingAverage,
    'EMA': ExponentialMovingAverage,
    'MACD': MovingAverageConvergenceDivergence,
    'RSI': RelativeStrengthIndex,
    'ATR': AverageTrueRange,
    'ST': SuperTrend,
}


def create_indicator(kind: str, **params: Any) -> Indicator:
    """
    Instantiate an indicator by code.

    Args:
        kind: Indicator code (case-insensitive), e.g. "EMA" or "st"
        **params: Constructor arguments (period, capacity, source, ...)

    Raises:
        ValueError: If the code is unknown
    """
    cls = INDICATORS.get(str(kind).upper())
    if cls is None:
        raise ValueError(f"Unknown indicator type '{kind}'. Available: {list(INDICATORS)}")
    return cls(**params)
