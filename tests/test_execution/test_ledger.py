"""
Tests for the two-asset ledger.
"""
import pytest

from tradesim.execution.ledger import Ledger, buy_price, sell_price
from tradesim.shared.types import Candle, OrderSide


@pytest.fixture
def candle():
    """Buy price 105, sell price 95."""
    return Candle(timestamp=1_000, open=100.0, high=110.0, low=90.0, close=100.0)


@pytest.fixture
def ledger():
    return Ledger({'usdt': 1000.0})


class TestPrices:
    """Execution prices."""

    def test_buy_and_sell_price(self, candle):
        assert buy_price(candle) == 105.0
        assert sell_price(candle) == 95.0


class TestBuy:
    """Buying symbol1 with symbol2."""

    def test_buy_moves_balances(self, ledger, candle):
        assert ledger.buy('BTC', 'USDT', 210.0, candle) is True
        assert ledger.balance('USDT') == pytest.approx(790.0)
        assert ledger.balance('BTC') == pytest.approx(2.0)

    def test_buy_records_trade(self, ledger, candle):
        ledger.buy('btc', 'usdt', 210.0, candle)
        trade = ledger.trades[-1]
        assert trade.side is OrderSide.BUY
        assert (trade.symbol1, trade.symbol2) == ('BTC', 'USDT')
        assert trade.quantity == pytest.approx(2.0)
        assert trade.price == 105.0
        assert trade.timestamp == 1_000

    def test_insufficient_funds_rejected(self, ledger, candle):
        assert ledger.buy('BTC', 'USDT', 1000.01, candle) is False
        assert ledger.balance('USDT') == 1000.0
        assert ledger.balance('BTC') == 0.0
        assert ledger.rejected == 1
        assert ledger.trades == []

    @pytest.mark.parametrize("amount", [0, -5, float('nan'), None])
    def test_non_positive_amount_rejected(self, ledger, candle, amount):
        assert ledger.buy('BTC', 'USDT', amount, candle) is False
        assert ledger.snapshot() == {'USDT': 1000.0}

    def test_exact_balance_allowed(self, ledger, candle):
        assert ledger.buy('BTC', 'USDT', 1000.0, candle) is True
        assert ledger.balance('USDT') == 0.0


class TestSell:
    """Selling symbol1 for symbol2."""

    def test_sell_moves_balances(self, candle):
        ledger = Ledger({'BTC': 2.0, 'USDT': 0.0})
        assert ledger.sell('BTC', 'USDT', 95.0, candle) is True
        assert ledger.balance('BTC') == pytest.approx(1.0)
        assert ledger.balance('USDT') == pytest.approx(95.0)

    def test_sell_more_than_held_rejected(self, candle):
        ledger = Ledger({'BTC': 1.0})
        assert ledger.sell('BTC', 'USDT', 96.0, candle) is False
        assert ledger.balance('BTC') == 1.0
        assert ledger.balance('USDT') == 0.0

    def test_sell_without_holdings_rejected(self, ledger, candle):
        assert ledger.sell('ETH', 'USDT', 1.0, candle) is False
        assert ledger.balance('USDT') == 1000.0


class TestFees:
    """Fees are informational unless apply_fee is set."""

    def test_fee_not_applied_by_default(self, candle):
        ledger = Ledger({'USDT': 1000.0}, fee=0.01)
        ledger.buy('BTC', 'USDT', 210.0, candle)
        assert ledger.balance('BTC') == pytest.approx(2.0)
        assert ledger.trades[-1].fee == 0.0

    def test_fee_reduces_received_side_on_buy(self, candle):
        ledger = Ledger({'USDT': 1000.0}, fee=0.01, apply_fee=True)
        ledger.buy('BTC', 'USDT', 210.0, candle)
        assert ledger.balance('BTC') == pytest.approx(1.98)
        assert ledger.balance('USDT') == pytest.approx(790.0)
        assert ledger.trades[-1].fee == pytest.approx(0.02)

    def test_fee_reduces_received_side_on_sell(self, candle):
        ledger = Ledger({'BTC': 2.0}, fee=0.01, apply_fee=True)
        ledger.sell('BTC', 'USDT', 95.0, candle)
        assert ledger.balance('USDT') == pytest.approx(94.05)
        assert ledger.balance('BTC') == pytest.approx(1.0)


class TestExecuteAndWallet:
    """Order dispatch and wallet view."""

    @pytest.mark.parametrize("side", ['buy', 'BUY', OrderSide.BUY])
    def test_execute_buy(self, ledger, candle, side):
        assert ledger.execute(side, 'BTC', 'USDT', 105.0, candle) is True
        assert ledger.balance('BTC') == pytest.approx(1.0)

    def test_execute_unknown_side(self, ledger, candle):
        assert ledger.execute('hold', 'BTC', 'USDT', 105.0, candle) is False
        assert ledger.rejected == 1

    def test_wallet_is_read_only_live_view(self, ledger, candle):
        wallet = ledger.wallet
        with pytest.raises(TypeError):
            wallet['USDT'] = 5.0
        ledger.buy('BTC', 'USDT', 105.0, candle)
        assert wallet['BTC'] == pytest.approx(1.0)

    def test_symbols_upper_cased(self):
        ledger = Ledger({'eth': 3})
        assert ledger.balance('ETH') == 3.0
        assert ledger.balance('eth') == 3.0
