"""
Tests for SimulatorConfig and YAML loading.
"""

import pytest

from dvsim.config import SimulatorConfig, config_from_mapping, load_config
from dvsim.errors import ConfigError


def test_defaults():
    cfg = SimulatorConfig()
    assert cfg.split_horizon is False
    assert cfg.workers == 1
    assert cfg.max_rounds is None
    assert cfg.log_level == "warning"


def test_load_config(tmp_path):
    path = tmp_path / "sim.yml"
    path.write_text("split_horizon: true\nworkers: 3\nmax_rounds: 500\nlog_level: INFO\n")

    cfg = load_config(path)

    assert cfg == SimulatorConfig(split_horizon=True, workers=3, max_rounds=500, log_level="info")


def test_empty_config_file_gives_defaults(tmp_path):
    path = tmp_path / "sim.yml"
    path.write_text("")
    assert load_config(path) == SimulatorConfig()


def test_non_mapping_root_rejected(tmp_path):
    path = tmp_path / "sim.yml"
    path.write_text("- split_horizon\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_invalid_yaml_rejected(tmp_path):
    path = tmp_path / "sim.yml"
    path.write_text("split_horizon: [true\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_unknown_keys_rejected():
    with pytest.raises(ConfigError, match="colour"):
        config_from_mapping({"colour": "blue"})


@pytest.mark.parametrize(
    "data",
    [
        {"workers": 0},
        {"workers": "two"},
        {"max_rounds": 0},
        {"split_horizon": "yes"},
        {"log_level": "loud"},
    ],
)
def test_bad_values_rejected(data):
    with pytest.raises(ConfigError):
        config_from_mapping(data)


def test_override_ignores_none():
    cfg = SimulatorConfig(split_horizon=True, workers=2)
    assert cfg.override(split_horizon=None, workers=4) == SimulatorConfig(split_horizon=True, workers=4)
