"""
YAML configuration loader for replay scenarios.

Loads scenario configurations from YAML files, allowing pairs, balances,
indicators and strategies to be changed without code changes.

Example:

    name: btc_supertrend
    pairs: [BTC/USDT]
    balance: {USDT: 1000}
    fee: 0.001
    limit: 100
    interval: 0
    data:
      source: csv
      path: data/{symbol1}_{symbol2}.csv
    indicators:
      supertrend: {type: ST, period: 10, multiplier: 3}
    strategies:
      - {type: supertrend_follow, key: supertrend, fraction: 0.5}
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from ..data.sources import CsvDataSource, YahooDataSource, parse_symbol_pair
from ..indicators.registry import create_indicator
from ..replay.scenario import DataSource, TradeScenario
from ..shared.defaults import APPLY_FEE, CANDLE_CAPACITY, REPLAY_INTERVAL, TRADE_FEE
from ..strategies.examples import create_strategy


@dataclass
class ScenarioConfig:
    """Everything needed to build a TradeScenario."""
    name: str
    description: str = ""
    pairs: List[str] = field(default_factory=list)
    balance: Dict[str, float] = field(default_factory=dict)
    fee: float = TRADE_FEE
    apply_fee: bool = APPLY_FEE
    limit: int = CANDLE_CAPACITY
    interval: float = REPLAY_INTERVAL
    indicators: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    strategies: List[Dict[str, Any]] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)


def _resolve_balance(balance: Any, pairs: List[str]) -> Dict[str, float]:
    """A mapping is used as-is; a number is credited to every pair's quote symbol."""
    if balance is None:
        return {}
    if isinstance(balance, Mapping):
        return {str(k).upper(): float(v) for k, v in balance.items()}
    if isinstance(balance, (int, float)) and not isinstance(balance, bool):
        quotes = {parse_symbol_pair(p)[1] for p in pairs}
        return {symbol: float(balance) for symbol in sorted(quotes)}
    raise ValueError(f"Invalid balance: {balance!r}")


def config_from_dict(
    config_dict: Mapping[str, Any],
    name: str = "scenario",
    base_dir: Optional[Path] = None,
) -> ScenarioConfig:
    """
    Build a ScenarioConfig from a parsed mapping.

    Args:
        config_dict: Parsed configuration
        name: Fallback scenario name
        base_dir: Directory relative data paths are resolved against

    Raises:
        ValueError: If the configuration is malformed
    """
    if not isinstance(config_dict, Mapping):
        raise ValueError(f"Scenario config must be a mapping, got {type(config_dict).__name__}")

    pairs = config_dict.get('pairs') or []
    if isinstance(pairs, str):
        pairs = [pairs]
    for pair in pairs:
        if parse_symbol_pair(pair) is None:
            raise ValueError(f"Invalid pair: {pair!r}")

    limit = config_dict.get('limit', CANDLE_CAPACITY)
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    indicators = config_dict.get('indicators') or {}
    if not isinstance(indicators, Mapping):
        raise ValueError("indicators must be a mapping of key -> settings")
    for key, settings in indicators.items():
        if not isinstance(settings, Mapping) or 'type' not in settings:
            raise ValueError(f"Indicator '{key}' needs a 'type'")

    strategies = config_dict.get('strategies') or []
    for settings in strategies:
        if not isinstance(settings, Mapping) or 'type' not in settings:
            raise ValueError(f"Strategy entry needs a 'type': {settings!r}")

    data = dict(config_dict.get('data') or {})
    if base_dir is not None and data.get('path') and not Path(data['path']).is_absolute():
        data['path'] = str(Path(base_dir) / data['path'])

    return ScenarioConfig(
        name=config_dict.get('name', name),
        description=config_dict.get('description', ''),
        pairs=list(pairs),
        balance=_resolve_balance(config_dict.get('balance'), list(pairs)),
        fee=float(config_dict.get('fee', TRADE_FEE)),
        apply_fee=bool(config_dict.get('apply_fee', APPLY_FEE)),
        limit=limit,
        interval=float(config_dict.get('interval', REPLAY_INTERVAL)),
        indicators={key: dict(settings) for key, settings in indicators.items()},
        strategies=[dict(settings) for settings in strategies],
        data=data,
    )


def load_config_from_yaml(yaml_path: Union[str, Path]) -> ScenarioConfig:
    """
    Load a scenario configuration from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        ScenarioConfig object

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or missing required fields
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, 'r') as f:
        config_dict = yaml.safe_load(f)

    if not config_dict:
        raise ValueError(f"Empty config file: {yaml_path}")

    return config_from_dict(config_dict, name=yaml_path.stem, base_dir=yaml_path.parent)


def build_data_source(data: Mapping[str, Any]) -> Optional[DataSource]:
    """
    Create the data source described by a config's `data` section.

    Returns:
        The data source, or None when the section is empty

    Raises:
        ValueError: For unknown source kinds or a CSV source without a path
    """
    if not data:
        return None
    kind = str(data.get('source', 'csv')).lower()
    if kind == 'csv':
        if not data.get('path'):
            raise ValueError("CSV data source needs a 'path'")
        return CsvDataSource(data['path'])
    if kind == 'yahoo':
        return YahooDataSource(
            interval=data.get('interval', '1d'),
            period=data.get('period', 'max'),
            ticker_format=data.get('ticker_format', '{symbol1}-{symbol2}'),
        )
    raise ValueError(f"Unknown data source '{kind}'. Available: ['csv', 'yahoo']")


def build_scenario(config: ScenarioConfig) -> TradeScenario:
    """Wire a TradeScenario from a configuration."""
    scenario = (
        TradeScenario(
            limit=config.limit,
            fee=config.fee,
            apply_fee=config.apply_fee,
            interval=config.interval,
        )
        .add_symbol(*config.pairs)
        .set_wallet(config.balance)
        .set_data_source(build_data_source(config.data))
    )
    for key, settings in config.indicators.items():
        params = dict(settings)
        kind = params.pop('type')
        params.setdefault('capacity', config.limit)
        scenario.add_indicator(key, create_indicator(kind, id=key, **params))
    for settings in config.strategies:
        params = dict(settings)
        scenario.add_strategy(create_strategy(params.pop('type'), **params))
    return scenario
