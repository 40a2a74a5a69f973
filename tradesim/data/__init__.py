"""
Data storage and loading module.

Provides the bounded column store, the per-pair candle window, candle
normalization and the market-data sources used by the replay loop.
"""
from .column_store import BoundedColumnStore, StoreEvent, StoreEventKind
from .candles import CandleStore
from .normalizer import normalize_candles, detect_scheme, SCHEMES
from .sources import CsvDataSource, YahooDataSource, parse_symbol_pair, frame_to_records

__all__ = [
    'BoundedColumnStore',
    'StoreEvent',
    'StoreEventKind',
    'CandleStore',
    'normalize_candles',
    'detect_scheme',
    'SCHEMES',
    'CsvDataSource',
    'YahooDataSource',
    'parse_symbol_pair',
    'frame_to_records',
]
