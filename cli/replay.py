#!/usr/bin/env python3
"""
Replay a trading scenario over historical candles.

Loads a scenario YAML, fetches the history of every configured pair,
replays it tick by tick through the configured indicators and strategies,
and prints the resulting wallet.

Usage:
    python cli/replay.py --config configs/example_scenario.yaml
    python cli/replay.py --config my.yaml --interval 0.5 --verbose
"""
import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tradesim.config.loader import build_scenario, load_config_from_yaml
from tradesim.replay.scenario import ReplayConfigurationError


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Chatty HTTP/download loggers kept at WARNING unless --verbose
QUIET_LOGGERS = ('yfinance', 'urllib3', 'peewee')


def setup_logging(log_path: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """
    Route replay logs to stdout and optionally to a file.

    Args:
        log_path: Log file (None = stdout only); parent directories are created
        verbose: DEBUG for everything, including the download libraries

    Returns:
        The configured root logger
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_path:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
    return root_logger


def main():
    """Run one scenario replay."""
    parser = argparse.ArgumentParser(description="Replay a trading scenario over historical candles")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/example_scenario.yaml",
        help="Path to scenario config file (default: configs/example_scenario.yaml)"
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between ticks (overrides the config)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)"
    )
    args = parser.parse_args()

    setup_logging(Path(args.log_file) if args.log_file else None, args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config_from_yaml(args.config)
        scenario = build_scenario(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.info("=" * 80)
    logger.info(f"Scenario: {config.name}")
    logger.info("=" * 80)
    if config.description:
        logger.info(config.description)
    logger.info(f"Pairs: {', '.join(config.pairs)}")
    logger.info(f"Indicators: {', '.join(config.indicators) or 'none'}")
    logger.info(f"Strategies: {len(config.strategies)}")

    try:
        result = scenario.start(args.interval)
    except ReplayConfigurationError as e:
        logger.error(f"Cannot start replay: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Replay interrupted")
        return 130

    print()
    print(f"Ticks replayed:  {result.ticks}")
    for pair, ticks in result.pair_ticks.items():
        print(f"  {pair:<12} {ticks} candles")
    print(f"Trades executed: {result.total_trades}")
    print(f"Orders rejected: {result.rejected_orders}")
    print()
    print(f"{'Symbol':<10} {'Initial':>16} {'Final':>16}")
    for symbol in sorted(set(result.initial_wallet) | set(result.final_wallet)):
        initial = result.initial_wallet.get(symbol, 0.0)
        final = result.final_wallet.get(symbol, 0.0)
        print(f"{symbol:<10} {initial:>16.8g} {final:>16.8g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
