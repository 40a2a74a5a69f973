"""
Example strategies.

Each factory returns a strategy callable with the replay signature
`strategy(pair, trade_data, wallet, order)`. Per-pair state lives in the
closure, so one strategy instance can serve every pair of a scenario; the
attached `reset()` clears it and is called by the replay before each run.
"""
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ..execution.ledger import sell_price
from ..replay.types import TradeData
from ..shared.types import is_number


def ema_crossover(fast: str = 'fast', slow: str = 'slow', amount: float = 100.0) -> Callable:
    """
    Buy `amount` of the quote asset's worth when the fast average crosses
    above the slow one, sell the same notional on the opposite cross.

    Args:
        fast: Indicator key of the fast average
        slow: Indicator key of the slow average
        amount: Order notional in the quote asset
    """
    previous: Dict[Tuple[str, str], float] = {}

    def strategy(pair: Tuple[str, str], data: TradeData, wallet: Mapping[str, float], order) -> None:
        fast_value = data.latest(fast)
        slow_value = data.latest(slow)
        if not is_number(fast_value) or not is_number(slow_value):
            return
        diff = fast_value - slow_value
        prev_diff = previous.get(pair)
        previous[pair] = diff
        if prev_diff is None:
            return
        if diff > 0 >= prev_diff:
            order('buy', amount)
        elif diff < 0 <= prev_diff:
            order('sell', amount)

    strategy.reset = previous.clear
    return strategy


def supertrend_follow(key: str = 'supertrend', fraction: float = 0.5) -> Callable:
    """
    Follow SuperTrend flips.

    On a flip to +1, spend `fraction` of the quote balance; on a flip to -1,
    sell `fraction` of the base holdings.

    Args:
        key: Indicator key of the SuperTrend
        fraction: Share of the balance used per order (0-1)
    """
    previous: Dict[Tuple[str, str], Optional[int]] = {}

    def strategy(pair: Tuple[str, str], data: TradeData, wallet: Mapping[str, float], order) -> None:
        symbol1, symbol2 = pair
        trend = data.latest(key)
        prev_trend = previous.get(pair)
        previous[pair] = trend
        if trend is None or prev_trend is None or trend == prev_trend:
            return
        if trend == 1:
            order('buy', wallet.get(symbol2, 0.0) * fraction)
        else:
            holdings = wallet.get(symbol1, 0.0) * fraction
            order('sell', holdings * sell_price(data.price.last()))

    strategy.reset = previous.clear
    return strategy


STRATEGIES: Dict[str, Callable[..., Callable]] = {
    'ema_crossover': ema_crossover,
    'supertrend_follow': supertrend_follow,
}


def create_strategy(kind: str, **params: Any) -> Callable:
    """
    Build a strategy by name.

    Raises:
        ValueError: If the name is unknown
    """
    factory = STRATEGIES.get(str(kind).lower())
    if factory is None:
        raise ValueError(f"Unknown strategy type '{kind}'. Available: {list(STRATEGIES)}")
    return factory(**params)
