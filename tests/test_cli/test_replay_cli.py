"""
Tests for the replay CLI.
"""
import logging
import sys

import pandas as pd
import pytest
import yaml

from cli import replay as cli_replay


@pytest.fixture
def scenario_file(tmp_path):
    """A CSV-backed scenario with one pair."""
    dates = pd.date_range('2024-01-01', periods=6, freq='D')
    closes = [10.0, 11.0, 12.0, 11.0, 13.0, 14.0]
    pd.DataFrame({
        'Date': dates,
        'Open': closes,
        'High': [c + 1 for c in closes],
        'Low': [c - 1 for c in closes],
        'Close': closes,
        'Volume': [100] * 6,
    }).to_csv(tmp_path / 'BTC_USDT.csv', index=False)

    path = tmp_path / 'scenario.yaml'
    path.write_text(yaml.safe_dump({
        'name': 'cli_test',
        'pairs': ['BTC/USDT'],
        'balance': 1000,
        'data': {'source': 'csv', 'path': '{symbol1}_{symbol2}.csv'},
        'indicators': {
            'fast': {'type': 'EMA', 'period': 2},
            'slow': {'type': 'EMA', 'period': 3},
        },
        'strategies': [{'type': 'ema_crossover', 'amount': 100}],
    }))
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_main_replays_scenario(monkeypatch, scenario_file, capsys):
    monkeypatch.setattr(sys, 'argv', ['replay', '--config', str(scenario_file)])

    assert cli_replay.main() == 0

    out = capsys.readouterr().out
    assert "Ticks replayed:  6" in out
    assert "BTC/USDT" in out
    assert "USDT" in out


def test_main_missing_config(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(sys, 'argv', ['replay', '--config', str(tmp_path / 'missing.yaml')])

    assert cli_replay.main() == 1
    assert "Config file not found" in capsys.readouterr().err


def test_main_without_data_source(monkeypatch, tmp_path):
    path = tmp_path / 'no_data.yaml'
    path.write_text("pairs: [BTC/USDT]\n")
    monkeypatch.setattr(sys, 'argv', ['replay', '--config', str(path)])

    assert cli_replay.main() == 1


def test_setup_logging_writes_file(tmp_path):
    log_path = tmp_path / 'logs' / 'replay.log'
    cli_replay.setup_logging(log_path, verbose=True)

    logging.getLogger('tradesim.test').debug("hello")

    assert logging.getLogger().level == logging.DEBUG
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "hello" in log_path.read_text()


def test_setup_logging_quiets_download_libraries():
    yf_logger = logging.getLogger('yfinance')
    previous = yf_logger.level
    try:
        root = cli_replay.setup_logging()
        assert root.level == logging.INFO
        assert yf_logger.level == logging.WARNING

        cli_replay.setup_logging(verbose=True)
        assert yf_logger.level == logging.DEBUG
    finally:
        yf_logger.setLevel(previous)
