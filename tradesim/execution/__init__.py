"""
Trade execution module.

Provides the two-asset Ledger strategies mutate through buy/sell orders and
the Trade records it keeps.
"""
from .ledger import Ledger, buy_price, sell_price
from .ledger_types import Trade

__all__ = ['Ledger', 'Trade', 'buy_price', 'sell_price']
