"""
Moving averages: simple (MA) and exponential (EMA).

Also provides the EMA recurrence used by MACD.
"""
from collections import deque
from typing import Any, Dict, Iterable

import numpy as np

from .base import Indicator
from ..shared.defaults import EMA_PERIOD, MA_PERIOD
from ..shared.types import is_number


NAN = float('nan')


def mean_of(values: Iterable[Any]) -> float:
    """Arithmetic mean; NaN if empty or any value is not a finite number."""
    values = list(values)
    if not values or not all(is_number(v) for v in values):
        return NAN
    return float(np.mean(values))


def ema_step(current: Any, previous: Any, period: int) -> float:
    """Next EMA value: (current - previous) * alpha + previous, alpha = 2 / (period + 1)."""
    if not is_number(current) or not is_number(previous):
        return NAN
    alpha = 2 / (period + 1)
    return (current - previous) * alpha + previous


class EmaRecurrence:
    """
    EMA seeded with the simple mean of its first `period` inputs.

    Inputs arriving before `start` are ignored, which lets MACD seed its
    signal line from the first defined MACD values.
    """

    def __init__(self, period: int, start: int = 0):
        self.period = period
        self.start = start
        self.reset()

    def reset(self) -> None:
        self.index = 0
        self.value = NAN
        self._seed = []

    def step(self, current: Any) -> float:
        i = self.index - self.start
        self.index += 1
        if i < 0:
            return NAN
        if i < self.period - 1:
            self._seed.append(current)
            self.value = NAN
        elif i == self.period - 1:
            self._seed.append(current)
            self.value = mean_of(self._seed)
            self._seed = []
        else:
            self.value = ema_step(current, self.value, self.period)
        return self.value


class MovingAverage(Indicator):
    """Simple moving average over the trailing `period` inputs."""

    def __init__(self, period: int = MA_PERIOD, **kwargs):
        super().__init__(period=period, **kwargs)

    def _reset_state(self) -> None:
        self._window = deque(maxlen=self.period)
        self._seen = 0

    def step(self, element: Any) -> Dict[str, Any]:
        self._window.append(element)
        self._seen += 1
        if self._seen < self.period:
            return {'value': NAN}
        return {'value': mean_of(self._window)}


class ExponentialMovingAverage(Indicator):
    """Exponential moving average, seeded with the MA of the first `period` inputs."""

    def __init__(self, period: int = EMA_PERIOD, **kwargs):
        super().__init__(period=period, **kwargs)

    def _reset_state(self) -> None:
        self._ema = EmaRecurrence(self.period)

    def step(self, element: Any) -> Dict[str, Any]:
        return {'value': self._ema.step(element)}


# Export all indicator classes
__all__ = [
    'MovingAverage',
    'ExponentialMovingAverage',
    'EmaRecurrence',
    'mean_of',
    'ema_step',
]
