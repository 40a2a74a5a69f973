"""
Volatility indicators: ATR and SuperTrend.

SuperTrend owns an ATR recurrence and delegates to it rather than extending
it, so both keep independent state.
"""
from typing import Any, Dict, List

from .base import Indicator, InputKind, as_candle
from .moving_average import NAN, mean_of
from ..shared.defaults import ATR_PERIOD, SUPERTREND_MULTIPLIER, SUPERTREND_PERIOD
from ..shared.types import is_number


class AverageTrueRange(Indicator):
    """
    Average True Range with Wilder smoothing.

    TR = max(high - low, |high - prev_close|, |low - prev_close|), where the
    first bar uses its own hl2 as prev_close. ATR is undefined until `period`
    true ranges exist, equals their mean at that point, then
    ATR = (ATR_prev * (period - 1) + TR) / period.
    """

    input_kind = InputKind.CANDLE
    columns = ('atr', 'range')
    primary = 'atr'

    def __init__(self, period: int = ATR_PERIOD, **kwargs):
        super().__init__(period=period, **kwargs)

    def _reset_state(self) -> None:
        self._prev_close = None
        self._samples = 0
        self._first_ranges: List[float] = []
        self._atr = NAN

    def step(self, element: Any) -> Dict[str, Any]:
        candle = as_candle(element)
        if candle is None or not is_number(candle.high) or not is_number(candle.low):
            return {'atr': NAN, 'range': NAN}

        high, low = candle.high, candle.low
        hl2 = (high + low) / 2
        close = candle.close if is_number(candle.close) else hl2
        prev_close = hl2 if self._prev_close is None else self._prev_close

        true_range = max(high - low, abs(high - prev_close), abs(low - prev_close))
        self._samples += 1
        if self._samples < self.period:
            self._first_ranges.append(true_range)
            self._atr = NAN
        elif self._samples == self.period:
            self._first_ranges.append(true_range)
            self._atr = mean_of(self._first_ranges)
            self._first_ranges = []
        else:
            self._atr = (self._atr * (self.period - 1) + true_range) / self.period

        self._prev_close = close
        return {'atr': self._atr, 'range': true_range}


class SuperTrend(Indicator):
    """
    SuperTrend bands and trend direction built on ATR.

    upper = hl2 + multiplier * ATR, lower = hl2 - multiplier * ATR.
    Trend starts at +1, flips to +1 when close > previous upper band and to
    -1 when close < previous lower band. While the trend persists, the upper
    band (trend +1) only moves down and the lower band (trend -1) only moves
    up; on a flip the raw band is published again.
    """

    input_kind = InputKind.CANDLE
    columns = ('trend', 'upper', 'lower', 'atr', 'range')
    primary = 'trend'

    def __init__(
        self,
        period: int = SUPERTREND_PERIOD,
        multiplier: float = SUPERTREND_MULTIPLIER,
        **kwargs
    ):
        self.multiplier = multiplier if is_number(multiplier) and multiplier > 0 else SUPERTREND_MULTIPLIER
        super().__init__(period=period, **kwargs)

    def _reset_state(self) -> None:
        self._atr = AverageTrueRange(period=self.period)
        self._prev_upper = None
        self._prev_lower = None
        self._prev_trend = None

    def step(self, element: Any) -> Dict[str, Any]:
        atr_row = self._atr.step(element)
        atr = atr_row['atr']
        candle = as_candle(element)
        if candle is None or not is_number(atr):
            return {'trend': None, 'upper': NAN, 'lower': NAN, **atr_row}

        hl2 = (candle.high + candle.low) / 2
        close = candle.close if is_number(candle.close) else hl2
        upper = hl2 + self.multiplier * atr
        lower = hl2 - self.multiplier * atr

        if self._prev_trend is None:
            trend = 1
        elif close > self._prev_upper:
            trend = 1
        elif close < self._prev_lower:
            trend = -1
        else:
            trend = self._prev_trend

        persisted = trend == self._prev_trend
        if persisted and trend == 1:
            upper = min(upper, self._prev_upper)
        if persisted and trend == -1:
            lower = max(lower, self._prev_lower)

        self._prev_upper, self._prev_lower, self._prev_trend = upper, lower, trend
        return {'trend': trend, 'upper': upper, 'lower': lower, **atr_row}

    def params(self) -> Dict[str, Any]:
        params = super().params()
        params['multiplier'] = self.multiplier
        return params


__all__ = ['AverageTrueRange', 'SuperTrend']
