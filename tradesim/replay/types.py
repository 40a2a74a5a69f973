"""
Replay types: loop state, per-pair timelines and the replay result.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from ..data.candles import CandleStore
from ..execution.ledger_types import Trade
from ..indicators.base import Indicator
from ..shared.types import Candle


class ReplayState(Enum):
    """Lifecycle of a replay."""
    IDLE = "idle"
    FETCHING = "fetching"
    REPLAYING = "replaying"
    DONE = "done"


@dataclass
class TradeData:
    """What a strategy sees for one pair: the candle window and its indicators."""
    price: CandleStore
    indicators: Dict[str, Indicator] = field(default_factory=dict)

    def latest(self, key: str, column: Optional[str] = None) -> Any:
        """Most recent value of an indicator column (None if unknown or empty)."""
        indicator = self.indicators.get(key)
        return None if indicator is None else indicator.latest(column)

    def snapshot(self) -> Dict[str, Any]:
        """Latest primary value of every indicator."""
        return {key: indicator.latest() for key, indicator in self.indicators.items()}


@dataclass
class PairTimeline:
    """Replay state of one traded pair."""
    symbol1: str
    symbol2: str
    data: TradeData
    history: Dict[int, Candle] = field(default_factory=dict)  # Fetched candles by timestamp
    ticks: int = 0  # Ticks in which this pair had a candle

    @property
    def key(self) -> str:
        return f"{self.symbol1}/{self.symbol2}"

    def reset(self, candles: Sequence[Candle], indicators: Dict[str, Indicator], capacity: int) -> None:
        """Discard previous replay history and install fresh indicators."""
        self.data.price.clear()
        self.data.price.set_capacity(capacity)
        self.data.indicators = indicators
        self.history = {}
        for candle in candles:
            self.history.setdefault(candle.timestamp, candle)
        self.ticks = 0


@dataclass
class ReplayResult:
    """Summary of a finished replay."""
    ticks: int
    pair_ticks: Dict[str, int]
    trades: List[Trade]
    initial_wallet: Dict[str, float]
    final_wallet: Dict[str, float]
    rejected_orders: int = 0

    @property
    def total_trades(self) -> int:
        return len(self.trades)
