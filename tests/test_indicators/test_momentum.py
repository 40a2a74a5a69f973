"""
Tests for MACD and RSI.
"""
import math

import pytest

from tradesim.indicators.momentum import MovingAverageConvergenceDivergence, RelativeStrengthIndex


NAN = float('nan')


def same(actual, expected):
    """Element-wise equality treating NaN == NaN."""
    assert len(actual) == len(expected)
    for a, e in zip(actual, expected):
        if isinstance(e, float) and math.isnan(e):
            assert math.isnan(a)
        else:
            assert a == pytest.approx(e)


class TestMACD:
    """MACD line, signal and histogram."""

    @pytest.fixture
    def macd(self):
        m = MovingAverageConvergenceDivergence(short_period=2, long_period=3, signal_period=2)
        m.update([1, 2, 3, 4, 5, 6])
        return m

    def test_ema_legs(self, macd):
        same(macd.output('short'), [NAN, 1.5, 2.5, 3.5, 4.5, 5.5])
        same(macd.output('long'), [NAN, NAN, 2.0, 3.0, 4.0, 5.0])

    def test_line_defined_from_long_period(self, macd):
        same(macd.output('line'), [NAN, NAN, 0.5, 0.5, 0.5, 0.5])

    def test_signal_first_defined_at_long_plus_signal_minus_two(self, macd):
        same(macd.output('signal'), [NAN, NAN, NAN, 0.5, 0.5, 0.5])
        same(macd.output('histogram'), [NAN, NAN, NAN, 0.0, 0.0, 0.0])

    def test_primary_is_line(self, macd):
        assert macd.latest() == pytest.approx(0.5)

    def test_invalid_periods_fall_back_to_defaults(self):
        m = MovingAverageConvergenceDivergence(short_period=0, long_period=-1, signal_period='x')
        assert (m.short_period, m.long_period, m.signal_period) == (12, 26, 9)
        assert m.period == 26

    def test_clone_keeps_periods(self, macd):
        copy = macd.clone()
        assert (copy.short_period, copy.long_period, copy.signal_period) == (2, 3, 2)
        assert len(copy) == 0


class TestRSI:
    """RSI over trailing gains and losses."""

    def test_values(self):
        rsi = RelativeStrengthIndex(period=2)
        rsi.update([1, 2, 3, 2, 4])
        same(rsi.output(), [NAN, NAN, 100.0, 50.0, 100 - 100 / 3])

    def test_gain_and_loss_columns(self):
        rsi = RelativeStrengthIndex(period=2)
        rsi.update([1, 2, 3, 2, 4])
        same(rsi.output('gain'), [NAN, 1.0, 1.0, 0.0, 2.0])
        same(rsi.output('loss'), [NAN, 0.0, 0.0, 1.0, 0.0])

    def test_no_losses_is_100(self):
        rsi = RelativeStrengthIndex(period=3)
        rsi.update([1, 2, 3, 4, 5])
        assert rsi.latest() == 100.0

    def test_only_losses_is_0(self):
        rsi = RelativeStrengthIndex(period=2)
        rsi.update([5, 4, 3])
        assert rsi.latest() == pytest.approx(0.0)

    def test_bounded(self):
        rsi = RelativeStrengthIndex(period=3)
        rsi.update([10, 12, 11, 15, 9, 9, 14, 13, 20, 1])
        for value in rsi.output():
            if not math.isnan(value):
                assert 0.0 <= value <= 100.0

    def test_default_period(self):
        assert RelativeStrengthIndex().period == 17


class TestNonNumericInput:
    """A non-numeric input leaves every derived column undefined."""

    def test_macd_all_columns_undefined_after_gap(self):
        macd = MovingAverageConvergenceDivergence(short_period=2, long_period=3, signal_period=2)
        macd.update([1, 2, 3, 4, None, 6, 7])

        same(macd.output('line'), [NAN, NAN, 0.5, 0.5, NAN, NAN, NAN])
        for column in ('short', 'long', 'signal', 'histogram'):
            assert all(math.isnan(v) for v in macd.output(column)[4:]), column

    def test_rsi_gap_mid_stream(self):
        rsi = RelativeStrengthIndex(period=2)
        rsi.update([1, 2, 3, None, 4, 3, 5])

        same(rsi.output(), [NAN, NAN, 100.0, NAN, NAN, 50.0, 100 - 100 / 3])
        same(rsi.output('gain'), [NAN, 1.0, 1.0, NAN, NAN, 0.0, 2.0])
        same(rsi.output('loss'), [NAN, 0.0, 0.0, NAN, NAN, 1.0, 0.0])
