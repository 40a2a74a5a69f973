"""
Shared types and defaults for the replay engine.

This module provides:
- Candle dataclass and the supported source fields
- OrderSide enum
- Centralized default values for all indicator and ledger parameters
"""
from .types import Candle, OrderSide, SOURCE_FIELDS, is_number, to_float
from .defaults import (
    CANDLE_CAPACITY, INDICATOR_CAPACITY,
    MA_PERIOD, EMA_PERIOD,
    MACD_SHORT, MACD_LONG, MACD_SIGNAL,
    RSI_PERIOD, ATR_PERIOD,
    SUPERTREND_PERIOD, SUPERTREND_MULTIPLIER,
    DEFAULT_SOURCE, REPLAY_INTERVAL,
    TRADE_FEE, APPLY_FEE,
)

__all__ = [
    'Candle',
    'OrderSide',
    'SOURCE_FIELDS',
    'is_number',
    'to_float',
    'CANDLE_CAPACITY', 'INDICATOR_CAPACITY',
    'MA_PERIOD', 'EMA_PERIOD',
    'MACD_SHORT', 'MACD_LONG', 'MACD_SIGNAL',
    'RSI_PERIOD', 'ATR_PERIOD',
    'SUPERTREND_PERIOD', 'SUPERTREND_MULTIPLIER',
    'DEFAULT_SOURCE', 'REPLAY_INTERVAL',
    'TRADE_FEE', 'APPLY_FEE',
]
