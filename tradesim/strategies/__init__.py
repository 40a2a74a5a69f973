"""
Example strategies for scenario configs.
"""
from .examples import ema_crossover, supertrend_follow, STRATEGIES, create_strategy

__all__ = ['ema_crossover', 'supertrend_follow', 'STRATEGIES', 'create_strategy']
