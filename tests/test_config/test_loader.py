"""
Tests for scenario configuration loading.
"""
from pathlib import Path

import pytest
import yaml

from tradesim.config.loader import (
    ScenarioConfig,
    build_data_source,
    build_scenario,
    config_from_dict,
    load_config_from_yaml,
)
from tradesim.data.sources import CsvDataSource, YahooDataSource
from tradesim.indicators.volatility import SuperTrend
from tradesim.shared.defaults import CANDLE_CAPACITY


EXAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "example_scenario.yaml"


@pytest.fixture
def config_dict():
    return {
        'name': 'unit',
        'pairs': ['BTC/USDT', 'ETH/USDT'],
        'balance': {'usdt': 500},
        'fee': 0.002,
        'limit': 30,
        'data': {'source': 'csv', 'path': 'data/{symbol1}_{symbol2}.csv'},
        'indicators': {
            'trend': {'type': 'ST', 'period': 5, 'multiplier': 2},
            'fast': {'type': 'EMA', 'period': 3, 'source': 'hl2'},
        },
        'strategies': [{'type': 'supertrend_follow', 'key': 'trend'}],
    }


class TestConfigFromDict:
    """Validation and defaults."""

    def test_fields(self, config_dict):
        config = config_from_dict(config_dict)
        assert isinstance(config, ScenarioConfig)
        assert config.name == 'unit'
        assert config.balance == {'USDT': 500.0}
        assert config.fee == 0.002
        assert config.apply_fee is False
        assert config.limit == 30

    def test_defaults(self):
        config = config_from_dict({'pairs': ['BTC/USDT']}, name='fallback')
        assert config.name == 'fallback'
        assert config.limit == CANDLE_CAPACITY
        assert config.indicators == {}

    def test_numeric_balance_credits_quote_symbols(self):
        config = config_from_dict({'pairs': ['BTC/USDT', 'ETH/USDT', 'ETH/BTC'], 'balance': 100})
        assert config.balance == {'BTC': 100.0, 'USDT': 100.0}

    def test_relative_data_path_resolved_against_base_dir(self, config_dict, tmp_path):
        config = config_from_dict(config_dict, base_dir=tmp_path)
        assert config.data['path'] == str(tmp_path / 'data/{symbol1}_{symbol2}.csv')

    @pytest.mark.parametrize("bad", [
        {'pairs': ['BTCUSDT']},
        {'limit': 0},
        {'indicators': {'x': {'period': 3}}},
        {'strategies': [{'key': 'x'}]},
        {'balance': 'lots'},
    ])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            config_from_dict(bad)

    def test_not_a_mapping(self):
        with pytest.raises(ValueError, match="must be a mapping"):
            config_from_dict(['pairs'])


class TestLoadConfigFromYaml:
    """YAML loading."""

    def test_load(self, tmp_path, config_dict):
        path = tmp_path / 'scenario.yaml'
        path.write_text(yaml.safe_dump(config_dict))
        config = load_config_from_yaml(path)
        assert config.pairs == ['BTC/USDT', 'ETH/USDT']
        assert config.indicators['trend']['type'] == 'ST'

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / 'my_replay.yaml'
        path.write_text("pairs: [BTC/USDT]\n")
        assert load_config_from_yaml(path).name == 'my_replay'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_from_yaml(tmp_path / 'nope.yaml')

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.yaml'
        path.write_text("")
        with pytest.raises(ValueError, match="Empty config"):
            load_config_from_yaml(path)

    def test_example_config_loads(self):
        config = load_config_from_yaml(EXAMPLE_CONFIG)
        assert config.pairs
        assert config.data['source'] == 'yahoo'


class TestBuildScenario:
    """Wiring a TradeScenario."""

    def test_build(self, config_dict):
        scenario = build_scenario(config_from_dict(config_dict))
        assert list(scenario.pairs) == ['BTC/USDT', 'ETH/USDT']
        assert scenario.wallet['USDT'] == 500.0
        assert scenario.limit == 30
        assert scenario.ledger.fee == 0.002
        assert isinstance(scenario.data_source, CsvDataSource)
        assert len(scenario.strategies) == 1

    def test_indicators_configured(self, config_dict):
        scenario = build_scenario(config_from_dict(config_dict))
        trend = scenario.indicators['trend']
        assert isinstance(trend, SuperTrend)
        assert (trend.period, trend.multiplier) == (5, 2)
        assert trend.id == 'trend'
        assert trend.capacity == 30
        assert scenario.indicators['fast'].source == 'hl2'

    def test_yahoo_source(self):
        source = build_data_source({'source': 'yahoo', 'interval': '1h', 'period': '1mo'})
        assert isinstance(source, YahooDataSource)
        assert (source.interval, source.period) == ('1h', '1mo')

    def test_no_data_section(self):
        assert build_data_source({}) is None

    def test_unknown_source(self):
        with pytest.raises(ValueError, match="Unknown data source"):
            build_data_source({'source': 'ftp'})

    def test_csv_needs_path(self):
        with pytest.raises(ValueError):
            build_data_source({'source': 'csv'})

    def test_unknown_indicator_type(self, config_dict):
        config_dict['indicators'] = {'x': {'type': 'VWAP'}}
        with pytest.raises(ValueError):
            build_scenario(config_from_dict(config_dict))
