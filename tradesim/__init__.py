"""
Tick-by-tick trading replay.

Provides unified interfaces for:
- Bounded columnar storage of candles and indicator outputs
- Candle normalization from heterogeneous market-data records
- Incremental technical indicators (MA, EMA, MACD, RSI, ATR, SuperTrend)
- A two-asset trade ledger that strategies mutate
- The replay loop tying data, indicators and strategies together
"""
