"""
Tick-by-tick replay of pair histories through indicators and strategies.

A TradeScenario:
1. Fetches every registered pair's candle history concurrently
2. Merges all timestamps into one sorted master timeline
3. For each timestamp, appends the pair's candle, updates its indicators and
   calls every strategy, routing their orders to the shared Ledger

Pairs, indicators and strategies are processed in registration order.
"""
import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .types import PairTimeline, ReplayResult, ReplayState, TradeData
from ..data.candles import CandleStore
from ..data.normalizer import normalize_candles
from ..data.sources import parse_symbol_pair
from ..execution.ledger import Ledger
from ..indicators.base import Indicator, InputKind
from ..shared.defaults import APPLY_FEE, CANDLE_CAPACITY, REPLAY_INTERVAL, TRADE_FEE
from ..shared.types import Candle, OrderSide


logger = logging.getLogger(__name__)

DataSource = Callable[[str, str, int], Union[Sequence[Any], Awaitable[Sequence[Any]]]]
OrderFn = Callable[[Union[OrderSide, str], float], None]
Strategy = Callable[[Tuple[str, str], TradeData, Mapping[str, float], OrderFn], None]


class ReplayConfigurationError(RuntimeError):
    """Raised when a replay is started without the collaborators it needs."""
    pass


class TradeScenario:
    """
    Replays historical candles for several pairs against one wallet.

    Builder methods return self so a scenario can be set up in one chain:

        scenario = (
            TradeScenario(limit=100)
            .add_symbol("BTC/USDT")
            .set_wallet({"USDT": 1000})
            .set_data_source(fetch)
            .add_indicator("ema", ExponentialMovingAverage(period=9))
            .add_strategy(my_strategy)
        )
        result = scenario.start()
    """

    def __init__(
        self,
        limit: int = CANDLE_CAPACITY,
        fee: float = TRADE_FEE,
        apply_fee: bool = APPLY_FEE,
        interval: float = REPLAY_INTERVAL,
    ):
        """
        Args:
            limit: Window capacity for candle stores and indicators (also the fetch limit)
            fee: Trade fee fraction
            apply_fee: Deduct the fee from trades (otherwise informational)
            interval: Seconds to wait between ticks
        """
        self.set_limit(limit)
        self.interval = interval
        self.ledger = Ledger(fee=fee, apply_fee=apply_fee)
        self.data_source: Optional[DataSource] = None
        self.pairs: Dict[str, PairTimeline] = {}
        self.indicators: Dict[str, Indicator] = {}
        self.strategies: List[Strategy] = []
        self.state = ReplayState.IDLE
        self.timeline: List[int] = []
        self.tick = 0

    @property
    def wallet(self) -> Mapping[str, float]:
        return self.ledger.wallet

    # ------------------------------------------------------------------
    # Builder API
    # ------------------------------------------------------------------

    def set_limit(self, limit: int = CANDLE_CAPACITY) -> 'TradeScenario':
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise ValueError(f"Limit must be a positive integer, got {limit!r}")
        self.limit = limit
        return self

    def add_symbol(self, *pairs: str) -> 'TradeScenario':
        """Register pairs such as "BTC/USDT" or "eth-usdt"; unparseable text is skipped."""
        for text in pairs:
            parsed = parse_symbol_pair(text)
            if parsed is None:
                logger.warning(f"Ignoring unrecognized pair '{text}'")
                continue
            symbol1, symbol2 = parsed
            timeline = PairTimeline(symbol1, symbol2, TradeData(CandleStore(self.limit)))
            self.pairs[timeline.key] = timeline
        return self

    def set_wallet(self, balances: Mapping[str, float]) -> 'TradeScenario':
        self.ledger.set_wallet(balances)
        return self

    def set_data_source(self, fetch: Optional[DataSource]) -> 'TradeScenario':
        self.data_source = fetch if callable(fetch) else None
        return self

    def add_indicator(
        self,
        key: str,
        indicator: Indicator,
        source: Optional[Union[str, Callable[..., Any]]] = None,
    ) -> 'TradeScenario':
        """
        Register an indicator template; each pair gets its own clone per replay.

        Args:
            key: Name under which strategies find the indicator
            indicator: Indicator instance (its configuration is cloned)
            source: Overrides the indicator's source field or callable
        """
        if not isinstance(indicator, Indicator):
            logger.warning(f"Ignoring indicator '{key}': not an Indicator")
            return self
        template = indicator.clone()
        if source is not None:
            template.source = source
        template.set_capacity(self.limit)
        self.indicators[key] = template
        return self

    def add_strategy(self, strategy: Strategy) -> 'TradeScenario':
        if callable(strategy):
            self.strategies.append(strategy)
        return self

    # ------------------------------------------------------------------
    # Replay
    # ------------------------------------------------------------------

    def start(self, interval: Optional[float] = None) -> ReplayResult:
        """Run the replay to completion (blocking)."""
        return asyncio.run(self.run(interval))

    async def run(self, interval: Optional[float] = None) -> ReplayResult:
        """
        Fetch all pairs, then replay the merged timeline.

        Args:
            interval: Seconds between ticks (default: the scenario's interval)

        Returns:
            ReplayResult summary

        Raises:
            ReplayConfigurationError: If no data source or no pair is registered
        """
        if self.data_source is None:
            raise ReplayConfigurationError("Data source not set")
        if not self.pairs:
            raise ReplayConfigurationError("No pairs registered")
        interval = self.interval if interval is None else interval

        initial_wallet = self.ledger.snapshot()
        trades_before = len(self.ledger.trades)
        rejected_before = self.ledger.rejected

        await self._fetch_all()
        self._reset_strategies()
        logger.info(
            f"Replaying {len(self.timeline)} ticks for {len(self.pairs)} pairs "
            f"({', '.join(self.pairs)}), window {self.limit}"
        )

        self.state = ReplayState.REPLAYING
        for self.tick, timestamp in enumerate(self.timeline):
            self._replay_tick(timestamp)
            if interval and interval > 0 and self.tick < len(self.timeline) - 1:
                await asyncio.sleep(interval)
        self.state = ReplayState.DONE

        result = ReplayResult(
            ticks=len(self.timeline),
            pair_ticks={key: pair.ticks for key, pair in self.pairs.items()},
            trades=self.ledger.trades[trades_before:],
            initial_wallet=initial_wallet,
            final_wallet=self.ledger.snapshot(),
            rejected_orders=self.ledger.rejected - rejected_before,
        )
        logger.info(
            f"Replay done: {result.ticks} ticks, {result.total_trades} trades, "
            f"{result.rejected_orders} rejected orders"
        )
        return result

    async def _fetch_pair(self, pair: PairTimeline) -> List[Candle]:
        records = self.data_source(pair.symbol1, pair.symbol2, self.limit)
        if inspect.isawaitable(records):
            records = await records
        candles = normalize_candles(records or [])
        if candles:
            logger.info(f"Fetched {len(candles)} candles for {pair.key}")
        else:
            logger.warning(f"No usable candles for {pair.key}")
        return candles

    async def _fetch_all(self) -> None:
        self.state = ReplayState.FETCHING
        pairs = list(self.pairs.values())
        results = await asyncio.gather(*(self._fetch_pair(pair) for pair in pairs))

        timestamps = set()
        for pair, candles in zip(pairs, results):
            indicators = {}
            for key, template in self.indicators.items():
                indicator = template.clone()
                indicator.set_capacity(self.limit)
                indicators[key] = indicator
            pair.reset(candles, indicators, self.limit)
            timestamps.update(candle.timestamp for candle in candles)
        self.timeline = sorted(timestamps)
        self.tick = 0

    def _reset_strategies(self) -> None:
        """Clear per-replay state of strategies exposing a `reset()` hook."""
        for strategy in self.strategies:
            reset = getattr(strategy, 'reset', None)
            if callable(reset):
                reset()

    def _replay_tick(self, timestamp: int) -> None:
        for pair in self.pairs.values():
            candle = pair.history.get(timestamp)
            if candle is None:
                continue
            pair.ticks += 1
            data = pair.data
            data.price.append(candle)
            for indicator in data.indicators.values():
                self._feed(indicator, data, candle)

            def order(side: Union[OrderSide, str], amount: float, pair=pair, candle=candle) -> None:
                self.ledger.execute(side, pair.symbol1, pair.symbol2, amount, candle)

            for strategy in self.strategies:
                strategy((pair.symbol1, pair.symbol2), data, self.ledger.wallet, order)

    @staticmethod
    def _feed(indicator: Indicator, data: TradeData, candle: Candle) -> None:
        # Exactly one new input per indicator per tick
        source = indicator.source
        if callable(source):
            indicator.push(source(indicator, data))
        elif indicator.input_kind is InputKind.CANDLE:
            indicator.push(candle)
        else:
            indicator.push(candle.value(source))
