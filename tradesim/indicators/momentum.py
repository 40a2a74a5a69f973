"""
Momentum indicators: MACD and RSI.
"""
from collections import deque
from typing import Any, Dict

from .base import Indicator
from .moving_average import EmaRecurrence, NAN
from ..shared.defaults import MACD_LONG, MACD_SHORT, MACD_SIGNAL, RSI_PERIOD
from ..shared.types import is_number


def _valid_period(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


class MovingAverageConvergenceDivergence(Indicator):
    """
    MACD (Moving Average Convergence Divergence).

    Runs a short and a long EMA of the input in parallel:
    - line = short EMA - long EMA
    - signal = EMA of line, seeded once line has `signal_period` values
      (first defined at index long_period + signal_period - 2)
    - histogram = line - signal
    """

    columns = ('line', 'short', 'long', 'signal', 'histogram')
    primary = 'line'

    def __init__(
        self,
        short_period: int = MACD_SHORT,
        long_period: int = MACD_LONG,
        signal_period: int = MACD_SIGNAL,
        **kwargs
    ):
        """
        Args:
            short_period: Fast EMA period (non-positive values fall back to 12)
            long_period: Slow EMA period (non-positive values fall back to 26)
            signal_period: Signal EMA period (non-positive values fall back to 9)
        """
        self.short_period = _valid_period(short_period, MACD_SHORT)
        self.long_period = _valid_period(long_period, MACD_LONG)
        self.signal_period = _valid_period(signal_period, MACD_SIGNAL)
        kwargs.pop('period', None)
        super().__init__(period=self.long_period, **kwargs)

    def _reset_state(self) -> None:
        self._short = EmaRecurrence(self.short_period)
        self._long = EmaRecurrence(self.long_period)
        self._signal = EmaRecurrence(self.signal_period, start=self.long_period - 1)

    def step(self, element: Any) -> Dict[str, Any]:
        short = self._short.step(element)
        long = self._long.step(element)
        line = short - long if is_number(short) and is_number(long) else NAN
        signal = self._signal.step(line)
        histogram = line - signal if is_number(line) and is_number(signal) else NAN
        return {
            'line': line,
            'short': short,
            'long': long,
            'signal': signal,
            'histogram': histogram,
        }

    def params(self) -> Dict[str, Any]:
        params = super().params()
        params.pop('period')
        params.update(
            short_period=self.short_period,
            long_period=self.long_period,
            signal_period=self.signal_period,
        )
        return params


class RelativeStrengthIndex(Indicator):
    """
    RSI over a rolling window of gains and losses.

    gain/loss come from consecutive differences of the input; once `period`
    samples exist, the averages are the simple mean of the trailing `period`
    samples. RSI = 100 when the average loss is zero.
    """

    columns = ('rsi', 'gain', 'loss')
    primary = 'rsi'

    def __init__(self, period: int = RSI_PERIOD, **kwargs):
        super().__init__(period=period, **kwargs)

    def _reset_state(self) -> None:
        self._previous = None
        self._gains = deque(maxlen=self.period)
        self._losses = deque(maxlen=self.period)

    def step(self, element: Any) -> Dict[str, Any]:
        previous, self._previous = self._previous, element
        if not is_number(element) or not is_number(previous):
            return {'rsi': NAN, 'gain': NAN, 'loss': NAN}

        change = element - previous
        gain = max(change, 0.0)
        loss = max(-change, 0.0)
        self._gains.append(gain)
        self._losses.append(loss)

        rsi = NAN
        if len(self._gains) >= self.period:
            avg_gain = sum(self._gains) / self.period
            avg_loss = sum(self._losses) / self.period
            rsi = 100.0 if avg_loss == 0 else 100 - 100 / (1 + avg_gain / avg_loss)
        return {'rsi': rsi, 'gain': gain, 'loss': loss}


__all__ = ['MovingAverageConvergenceDivergence', 'RelativeStrengthIndex']
