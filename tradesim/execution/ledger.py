"""
Two-asset trade ledger with wallet-based guards.

Keeps a per-symbol balance map that:
- Is only mutated through buy/sell
- Rejects orders with a non-positive size or insufficient funds (silently)
- Converts notional amounts to quantities at the candle's execution price
"""
import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from .ledger_types import Trade
from ..shared.defaults import APPLY_FEE, TRADE_FEE
from ..shared.types import Candle, OrderSide, is_number


logger = logging.getLogger(__name__)


def buy_price(candle: Candle) -> float:
    """Execution price for buys: (high + close) / 2."""
    return (candle.high + candle.close) / 2


def sell_price(candle: Candle) -> float:
    """Execution price for sells: (low + close) / 2."""
    return (candle.low + candle.close) / 2


class Ledger:
    """
    Per-symbol balances with guarded buy/sell execution.

    The fee is informational unless `apply_fee` is set; when set, the
    received side of every trade is reduced by `fee` (a fraction).
    """

    def __init__(
        self,
        wallet: Optional[Mapping[str, float]] = None,
        fee: float = TRADE_FEE,
        apply_fee: bool = APPLY_FEE,
    ):
        """
        Args:
            wallet: Initial balances (symbols are upper-cased)
            fee: Fee fraction, e.g. 0.001 = 0.1%
            apply_fee: Deduct the fee from trades
        """
        self._wallet: Dict[str, float] = {}
        self.fee = fee
        self.apply_fee = apply_fee
        self.trades: List[Trade] = []
        self.rejected = 0
        if wallet:
            self.set_wallet(wallet)

    @property
    def wallet(self) -> Mapping[str, float]:
        """Read-only live view of the balances."""
        return MappingProxyType(self._wallet)

    def set_wallet(self, balances: Mapping[str, float]) -> None:
        for symbol, amount in balances.items():
            self._wallet[str(symbol).upper()] = float(amount)

    def balance(self, symbol: str) -> float:
        return self._wallet.get(symbol.upper(), 0.0)

    def snapshot(self) -> Dict[str, float]:
        return dict(self._wallet)

    def _touch(self, *symbols: str) -> None:
        for symbol in symbols:
            self._wallet.setdefault(symbol, 0.0)

    def _fee_for(self, received: float) -> float:
        return received * self.fee if self.apply_fee else 0.0

    def _reject(self, reason: str) -> bool:
        self.rejected += 1
        logger.debug(f"Order rejected: {reason}")
        return False

    def buy(self, symbol1: str, symbol2: str, amount: float, candle: Candle) -> bool:
        """
        Spend `amount` of symbol2 on symbol1 at (high + close) / 2.

        Returns:
            True if executed; False if rejected (no balance changes)
        """
        if not is_number(amount) or amount <= 0:
            return self._reject(f"buy {symbol1}/{symbol2}: non-positive amount {amount!r}")
        symbol1, symbol2 = symbol1.upper(), symbol2.upper()
        self._touch(symbol1, symbol2)

        price = buy_price(candle)
        if not is_number(price) or price <= 0:
            return self._reject(f"buy {symbol1}/{symbol2}: no valid price")
        if self._wallet[symbol2] < amount:
            return self._reject(
                f"buy {symbol1}/{symbol2}: {amount} exceeds {symbol2} balance {self._wallet[symbol2]}"
            )

        quantity = amount / price
        fee = self._fee_for(quantity)
        self._wallet[symbol2] -= amount
        self._wallet[symbol1] += quantity - fee
        trade = Trade(OrderSide.BUY, symbol1, symbol2, amount, quantity, price, fee, candle.timestamp)
        self.trades.append(trade)
        logger.debug(f"Bought {quantity:.8g} {symbol1} for {amount:.8g} {symbol2} @ {price:.8g}")
        return True

    def sell(self, symbol1: str, symbol2: str, amount: float, candle: Candle) -> bool:
        """
        Sell enough symbol1 to receive `amount` of symbol2 at (low + close) / 2.

        Returns:
            True if executed; False if rejected (no balance changes)
        """
        if not is_number(amount) or amount <= 0:
            return self._reject(f"sell {symbol1}/{symbol2}: non-positive amount {amount!r}")
        symbol1, symbol2 = symbol1.upper(), symbol2.upper()
        self._touch(symbol1, symbol2)

        price = sell_price(candle)
        if not is_number(price) or price <= 0:
            return self._reject(f"sell {symbol1}/{symbol2}: no valid price")
        quantity = amount / price
        if self._wallet[symbol1] < quantity:
            return self._reject(
                f"sell {symbol1}/{symbol2}: needs {quantity} {symbol1}, balance {self._wallet[symbol1]}"
            )

        fee = self._fee_for(amount)
        self._wallet[symbol1] -= quantity
        self._wallet[symbol2] += amount - fee
        trade = Trade(OrderSide.SELL, symbol1, symbol2, amount, quantity, price, fee, candle.timestamp)
        self.trades.append(trade)
        logger.debug(f"Sold {quantity:.8g} {symbol1} for {amount:.8g} {symbol2} @ {price:.8g}")
        return True

    def execute(
        self,
        side: Union[OrderSide, str],
        symbol1: str,
        symbol2: str,
        amount: float,
        candle: Candle,
    ) -> bool:
        """Dispatch an order by side ("buy"/"sell"); unknown sides are rejected."""
        try:
            side = OrderSide(side.lower() if isinstance(side, str) else side)
        except ValueError:
            return self._reject(f"unknown side {side!r}")
        if side is OrderSide.BUY:
            return self.buy(symbol1, symbol2, amount, candle)
        return self.sell(symbol1, symbol2, amount, candle)
