"""
Scenario configuration module.

Loads replay scenarios from YAML and wires them into TradeScenario objects.
"""
from .loader import (
    ScenarioConfig,
    config_from_dict,
    load_config_from_yaml,
    build_data_source,
    build_scenario,
)

__all__ = [
    'ScenarioConfig',
    'config_from_dict',
    'load_config_from_yaml',
    'build_data_source',
    'build_scenario',
]
