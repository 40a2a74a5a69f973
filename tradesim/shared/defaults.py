"""
Centralized default values for the replay engine.

This is the SINGLE SOURCE OF TRUTH for window sizes, indicator periods and
ledger settings. All modules should import from here to ensure consistency.
"""

# Window capacities
CANDLE_CAPACITY = 100  # Rows kept per pair in the candle store
INDICATOR_CAPACITY = 200  # Rows kept by an indicator created outside a scenario

# Moving averages
MA_PERIOD = 20
EMA_PERIOD = 20

# MACD (Moving Average Convergence Divergence) defaults
MACD_SHORT = 12  # Standard default
MACD_LONG = 26  # Standard default
MACD_SIGNAL = 9  # Standard default

# RSI (Relative Strength Index)
RSI_PERIOD = 17

# Volatility
ATR_PERIOD = 14
SUPERTREND_PERIOD = 10
SUPERTREND_MULTIPLIER = 3.0

# Indicator input
DEFAULT_SOURCE = "close"

# Replay loop
REPLAY_INTERVAL = 0.0  # Seconds between ticks (pacing only)

# Ledger
TRADE_FEE = 0.0  # Fraction of the received amount; informational unless apply_fee is set
APPLY_FEE = False
