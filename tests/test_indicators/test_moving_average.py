"""
Tests for MA and EMA.
"""
import math

import pytest

from tradesim.indicators.moving_average import (
    EmaRecurrence,
    ExponentialMovingAverage,
    MovingAverage,
    ema_step,
    mean_of,
)


def same(actual, expected):
    """Element-wise equality treating NaN == NaN."""
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        if isinstance(e, float) and math.isnan(e):
            assert math.isnan(a)
        else:
            assert a == pytest.approx(e)


NAN = float('nan')


class TestHelpers:
    """mean_of / ema_step."""

    def test_mean_of(self):
        assert mean_of([1, 2, 3]) == 2.0
        assert math.isnan(mean_of([]))
        assert math.isnan(mean_of([1, NAN]))
        assert math.isnan(mean_of([1, None]))

    def test_ema_step(self):
        assert ema_step(4, 2, 3) == 3.0
        assert math.isnan(ema_step(NAN, 2, 3))

    def test_ema_recurrence_start(self):
        """Inputs before `start` do not count toward the seed."""
        ema = EmaRecurrence(2, start=1)
        out = [ema.step(v) for v in [100, 1, 3, 5]]
        same(out, [NAN, NAN, 2.0, (5 - 2) * 2 / 3 + 2])


class TestMovingAverage:
    """Simple moving average."""

    def test_values(self):
        ma = MovingAverage(period=3)
        ma.update([1, 2, 3, 4, 5])
        same(ma.output(), [NAN, NAN, 2.0, 3.0, 4.0])

    def test_invalid_input_in_window(self):
        ma = MovingAverage(period=2)
        ma.update([1, NAN, 3, 5])
        same(ma.output(), [NAN, NAN, NAN, 4.0])

    def test_default_period(self):
        assert MovingAverage().period == 20

    def test_period_one_is_identity(self):
        ma = MovingAverage(period=1)
        ma.update([3, 1, 2])
        assert ma.output() == [3.0, 1.0, 2.0]


class TestExponentialMovingAverage:
    """EMA seeded with the simple mean."""

    def test_values(self):
        ema = ExponentialMovingAverage(period=3)
        ema.update([2, 4, 6, 8, 12])
        same(ema.output(), [NAN, NAN, 4.0, 6.0, 9.0])

    def test_stays_undefined_after_invalid_input(self):
        ema = ExponentialMovingAverage(period=2)
        ema.update([1, 3, NAN, 5])
        same(ema.output(), [NAN, 2.0, NAN, NAN])

    def test_incremental_matches_batch(self):
        """Feeding a growing input equals feeding it all at once."""
        data = [5, 3, 8, 1, 9, 4, 7]
        batch = ExponentialMovingAverage(period=3)
        batch.update(data)

        incremental = ExponentialMovingAverage(period=3)
        for n in range(1, len(data) + 1):
            incremental.update(data[:n])

        same(incremental.output(), batch.output())
