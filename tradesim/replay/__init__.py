"""
Replay module.

Provides the TradeScenario replay loop and the types it exposes to
strategies (TradeData) and callers (ReplayResult, ReplayState).
"""
from .scenario import TradeScenario, ReplayConfigurationError, Strategy, DataSource, OrderFn
from .types import ReplayState, TradeData, PairTimeline, ReplayResult

__all__ = [
    'TradeScenario',
    'ReplayConfigurationError',
    'Strategy',
    'DataSource',
    'OrderFn',
    'ReplayState',
    'TradeData',
    'PairTimeline',
    'ReplayResult',
]
