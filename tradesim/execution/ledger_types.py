"""
Ledger types: executed trade records.

Kept apart from ledger.py so strategies and reports can import them without
pulling in the Ledger itself.
"""
from dataclasses import dataclass
from typing import Optional

from ..shared.types import OrderSide


@dataclass(frozen=True)
class Trade:
    """One executed order."""
    side: OrderSide
    symbol1: str  # Asset bought or sold
    symbol2: str  # Asset paid or received
    amount: float  # Notional in symbol2
    quantity: float  # Units of symbol1
    price: float  # Execution price (symbol2 per symbol1)
    fee: float = 0.0  # Deducted from the received side (symbol1 on buy, symbol2 on sell)
    timestamp: Optional[int] = None  # Candle timestamp at execution
