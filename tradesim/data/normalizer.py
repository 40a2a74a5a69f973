"""
Candle normalization from heterogeneous market-data records.

Exchanges and loaders name OHLCV fields differently: positional arrays,
single letters (o/h/l/c), full words (open/high/...) and case variants. The
naming scheme is detected once, from the first record, and applied to the
whole batch. A batch that cannot be normalized yields an empty list.
"""
import logging
import math
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..shared.types import Candle


logger = logging.getLogger(__name__)


# Key used for (timestamp, open, high, low, close, volume), in priority order
SCHEMES: Tuple[Tuple[str, Tuple[Any, ...]], ...] = (
    ('positional', (0, 1, 2, 3, 4, 5)),
    ('letter', ('t', 'o', 'h', 'l', 'c', 'v')),
    ('word', ('timestamp', 'open', 'high', 'low', 'close', 'volume')),
    ('upper_letter', ('T', 'O', 'H', 'L', 'C', 'V')),
    ('upper_word', ('TIMESTAMP', 'OPEN', 'HIGH', 'LOW', 'CLOSE', 'VOLUME')),
    ('title_word', ('Timestamp', 'Open', 'High', 'Low', 'Close', 'Volume')),
)


def _lookup(record: Any, key: Any) -> Any:
    """Read a key from a mapping or an index from a sequence; None if absent."""
    if isinstance(record, dict) or hasattr(record, 'keys'):
        if key in record:
            return record[key]
        if isinstance(key, int) and str(key) in record:
            return record[str(key)]
        return None
    if isinstance(key, int) and isinstance(record, (list, tuple, np.ndarray)):
        return record[key] if key < len(record) else None
    return None


def parse_float(value: Any) -> float:
    """Float-parse a field; NaN when it cannot be parsed."""
    if value is None or isinstance(value, bool):
        return float('nan')
    try:
        return float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return float('nan')


def parse_timestamp(value: Any) -> Optional[int]:
    """Integer-parse a timestamp; datetimes become epoch milliseconds."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (datetime, pd.Timestamp, np.datetime64)):
        ts = pd.Timestamp(value)
        if pd.isna(ts):
            return None
        if ts.tzinfo is None:
            ts = ts.tz_localize('UTC')
        return int(ts.value // 1_000_000)
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    number = parse_float(value)
    if math.isfinite(number):
        return int(number)
    return None


def detect_scheme(record: Any) -> Optional[str]:
    """
    Name of the first scheme whose "open" field parses as a finite number.

    Args:
        record: One raw record

    Returns:
        Scheme name, or None if no scheme matches
    """
    for name, keys in SCHEMES:
        if math.isfinite(parse_float(_lookup(record, keys[1]))):
            return name
    return None


def normalize_candles(records: Sequence[Any]) -> List[Candle]:
    """
    Convert raw records into canonical candles.

    The scheme detected from the first record is applied to every record;
    later records are not re-detected. Records whose timestamp cannot be
    parsed are dropped.

    Args:
        records: Raw records (mappings or positional sequences)

    Returns:
        Candles in input order; empty if the input is empty or no scheme matches
    """
    if records is None or len(records) == 0:
        return []

    scheme = detect_scheme(records[0])
    if scheme is None:
        logger.debug("No candle naming scheme matches the first record")
        return []
    keys = dict(SCHEMES)[scheme]

    candles = []
    for record in records:
        timestamp = parse_timestamp(_lookup(record, keys[0]))
        if timestamp is None:
            logger.debug(f"Dropping record without a parseable timestamp: {record!r}")
            continue
        o, h, l, c, v = (parse_float(_lookup(record, k)) for k in keys[1:])
        candles.append(Candle(timestamp=timestamp, open=o, high=h, low=l, close=c, volume=v))
    return candles
