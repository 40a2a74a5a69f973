"""
Market-data sources for the replay loop.

A data source is any callable `fetch(symbol1, symbol2, limit)` returning (or
resolving to) a list of raw candle records in one of the naming schemes the
normalizer accepts. Two implementations are provided:
- CsvDataSource: OHLCV CSV files, one per pair
- YahooDataSource: Yahoo Finance downloads via yfinance
"""
import asyncio
import logging
import re
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd
import yfinance as yf

# Suppress yfinance's pandas deprecation warnings
warnings.filterwarnings('ignore', message='.*Timestamp.utcnow.*')


logger = logging.getLogger(__name__)

_PAIR_PATTERN = re.compile(r'([a-zA-Z0-9]+)[\W\s_]+([a-zA-Z0-9]+)')
_DATE_COLUMNS = ('date', 'datetime', 'time')


def parse_symbol_pair(text: str = '') -> Optional[Tuple[str, str]]:
    """
    Split a human-entered pair such as "btc/usdt" or "ETH-USDT".

    Returns:
        (SYMBOL1, SYMBOL2) in upper case, or None if the text is not a pair
    """
    if not isinstance(text, str):
        return None
    match = _PAIR_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).upper(), match.group(2).upper()


def frame_to_records(df: pd.DataFrame, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Convert an OHLCV DataFrame into word-keyed raw records.

    Column names are lower-cased; a date/datetime/time column (or a
    DatetimeIndex) provides the timestamp when no timestamp column exists.

    Args:
        df: OHLCV data
        limit: Keep only the most recent `limit` rows (None or <= 0 = all)

    Returns:
        List of dicts with timestamp/open/high/low/close/volume keys
    """
    if df is None or df.empty:
        return []
    df = df.copy()
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)
    if isinstance(df.index, pd.DatetimeIndex):
        df = df.reset_index()
    df.columns = [str(c).strip().lower() for c in df.columns]

    if 'timestamp' not in df.columns:
        for candidate in _DATE_COLUMNS:
            if candidate in df.columns:
                df['timestamp'] = pd.to_datetime(df[candidate], utc=True)
                break

    if limit is not None and limit > 0:
        df = df.tail(limit)
    return df.to_dict('records')


class CsvDataSource:
    """
    Loads pair history from CSV files.

    The path template may reference {symbol1} and {symbol2}, e.g.
    "data/{symbol1}_{symbol2}.csv".
    """

    def __init__(self, path_template: Union[str, Path]):
        self.path_template = str(path_template)

    def path_for(self, symbol1: str, symbol2: str) -> Path:
        return Path(self.path_template.format(symbol1=symbol1, symbol2=symbol2))

    def load(self, symbol1: str, symbol2: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Read the CSV for a pair.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = self.path_for(symbol1, symbol2)
        if not path.exists():
            raise FileNotFoundError(f"Data file not found for {symbol1}/{symbol2}: {path}")
        records = frame_to_records(pd.read_csv(path), limit=limit)
        logger.debug(f"Loaded {len(records)} rows for {symbol1}/{symbol2} from {path}")
        return records

    async def __call__(self, symbol1: str, symbol2: str, limit: int) -> List[Dict[str, Any]]:
        return self.load(symbol1, symbol2, limit)


class YahooDataSource:
    """
    Downloads pair history from Yahoo Finance.

    The download is blocking, so it runs in a worker thread to let the
    per-pair fetches overlap.
    """

    def __init__(
        self,
        interval: str = "1d",
        period: str = "max",
        ticker_format: str = "{symbol1}-{symbol2}",
    ):
        """
        Args:
            interval: Bar size understood by yfinance (e.g. "1d", "1h")
            period: History span understood by yfinance (e.g. "1y", "max")
            ticker_format: Yahoo ticker for a pair, e.g. "{symbol1}-{symbol2}" -> BTC-USD
        """
        self.interval = interval
        self.period = period
        self.ticker_format = ticker_format

    def ticker_for(self, symbol1: str, symbol2: str) -> str:
        return self.ticker_format.format(symbol1=symbol1, symbol2=symbol2)

    def load(self, symbol1: str, symbol2: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        ticker = self.ticker_for(symbol1, symbol2)
        df = yf.download(ticker, period=self.period, interval=self.interval, progress=False)
        if df is None or df.empty:
            logger.warning(f"No data returned for {ticker}")
            return []
        records = frame_to_records(df, limit=limit)
        logger.debug(f"Downloaded {len(records)} rows for {ticker}")
        return records

    async def __call__(self, symbol1: str, symbol2: str, limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.load, symbol1, symbol2, limit)
