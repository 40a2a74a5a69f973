"""
Indicator calculation module.

Provides incremental technical indicators:
- Moving averages (MA, EMA)
- Momentum (MACD, RSI)
- Volatility (ATR, SuperTrend)

All indicators follow the Indicator interface: update() consumes only the
inputs beyond the cursor, clone() returns a fresh copy with the same
configuration.
"""
from .base import Indicator, InputKind, as_candle
from .moving_average import MovingAverage, ExponentialMovingAverage, EmaRecurrence, mean_of, ema_step
from .momentum import MovingAverageConvergenceDivergence, RelativeStrengthIndex
from .volatility import AverageTrueRange, SuperTrend
from .registry import INDICATORS, create_indicator

__all__ = [
    'Indicator',
    'InputKind',
    'as_candle',
    'MovingAverage',
    'ExponentialMovingAverage',
    'EmaRecurrence',
    'mean_of',
    'ema_step',
    'MovingAverageConvergenceDivergence',
    'RelativeStrengthIndex',
    'AverageTrueRange',
    'SuperTrend',
    'INDICATORS',
    'create_indicator',
]
