"""Tests for startup configuration and the unit state model."""

import json

import pytest

from s21_simulator.config import ConfigError, SimulatorConfig, load_config
from s21_simulator.models.unit import Mode, UnitState
from s21_simulator.simulator import build_parser, config_from_args, main


def test_defaults_validate():
    """Built-in defaults are a valid configuration."""
    SimulatorConfig().validate()


def test_load_config(tmp_path):
    """JSON keys override the defaults."""
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({"port": "/dev/ttyUSB0", "mode": 2, "power": True}))
    config = load_config(path)
    assert config.port == "/dev/ttyUSB0"
    assert config.mode == Mode.COOL
    assert config.power is True
    assert config.model == "135D"


def test_load_config_unknown_key(tmp_path):
    """Unknown keys are rejected."""
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({"humidity": 40}))
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_missing_file(tmp_path):
    """A missing file is a configuration error."""
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.json")


def test_load_config_not_an_object(tmp_path):
    """The file must hold a JSON object."""
    path = tmp_path / "unit.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize(
    "overrides",
    [
        {"model": "135"},
        {"model": "135DX"},
        {"mode": 5},
        {"fan": 7},
        {"target_temp": 22.3},
        {"protocol": 10},
        {"model": 1234},
        {"home": 700},
        {"outside": 640},
        {"home": 1000},
        {"inlet": -1000},
        {"fan_rpm": 1000},
        {"compressor_rpm": -1},
        {"swing": 300},
        {"target_temp": "22.5"},
    ],
)
def test_validate_rejects(overrides):
    """Values the protocol cannot carry are rejected."""
    config = SimulatorConfig()
    config.update(overrides)
    with pytest.raises(ConfigError):
        config.validate()


def test_command_line_overrides_file(tmp_path):
    """Options given on the command line win over the config file."""
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({"port": "/dev/ttyS1", "fan": 2, "home": 200}))
    args = build_parser().parse_args(
        ["--config", str(path), "--fan", "6", "--on", "--temp", "19.5"]
    )
    config = config_from_args(args)
    assert config.port == "/dev/ttyS1"
    assert config.fan == 6
    assert config.home == 200
    assert config.power is True
    assert config.target_temp == 19.5


def test_state_from_config():
    """The unit state takes every field except the port."""
    config = SimulatorConfig(port="/dev/ttyS0", outside=-35, model="ABCD")
    state = UnitState.from_config(config)
    assert state.outside == -35
    assert state.model == "ABCD"
    assert "port" not in state.to_dict()


def test_state_model_length():
    """The model code must be exactly four characters."""
    with pytest.raises(ValueError):
        UnitState(model="12345")


def test_validate_accepts_encodable_extremes():
    """Readings at the edge of every encoding are accepted."""
    config = SimulatorConfig(
        home=635, outside=-640, inlet=-999, fan_rpm=999, compressor_rpm=0, swing=255
    )
    config.validate()


def test_main_rejects_non_string_model(tmp_path):
    """A numeric model code in the config file is a usage error."""
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({"port": "/dev/ttyS0", "model": 1234}))
    with pytest.raises(SystemExit) as excinfo:
        main(["--config", str(path)])
    assert excinfo.value.code == 2


def test_off_overrides_file_power(tmp_path):
    """--off turns the unit off even when the file powers it on."""
    path = tmp_path / "unit.json"
    path.write_text(json.dumps({"port": "/dev/ttyS0", "power": True, "eco": True}))
    args = build_parser().parse_args(["--config", str(path), "--off", "--no-eco"])
    config = config_from_args(args)
    assert config.power is False
    assert config.eco is False
