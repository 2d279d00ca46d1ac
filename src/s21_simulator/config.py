"""Startup configuration of the simulated unit.

Values come from built-in defaults, optionally overridden by a JSON file
and then by command-line options. Example file::

    {"port": "/dev/ttyUSB0", "power": true, "mode": 2, "target_temp": 21.0}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

from .models.unit import MODEL_CODE_LEN, FanSpeed, Mode
from .protocol.values import (
    encode_digit,
    encode_packed_temperature,
    encode_signed_decimal,
    encode_target_temp,
    encode_unsigned_decimal,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Invalid simulator configuration."""


@dataclass
class SimulatorConfig:
    """Channel and initial unit state. Field names match ``UnitState``."""

    port: str | None = None
    power: bool = False
    mode: int = Mode.AUTO
    target_temp: float = 22.5
    fan: int = FanSpeed.SPEED_3
    swing: int = 0
    powerful: bool = False
    eco: bool = False
    home: int = 245
    outside: int = 205
    inlet: int = 185
    fan_rpm: int = 52
    compressor_rpm: int = 42
    protocol: int = 2
    model: str = "135D"

    def validate(self) -> None:
        """Check values the protocol cannot carry.

        Raises:
            ConfigError: On the first invalid field.
        """
        if not isinstance(self.model, str) or len(self.model) != MODEL_CODE_LEN:
            raise ConfigError(
                f"Invalid model code {self.model!r}, "
                f"{MODEL_CODE_LEN} characters required"
            )
        if self.mode not in set(Mode):
            raise ConfigError(
                f"Mode must be one of {[int(m) for m in Mode]}, got {self.mode}"
            )
        if self.fan not in set(FanSpeed):
            raise ConfigError(f"Fan must be 0-6, got {self.fan}")
        if not isinstance(self.swing, int) or not 0 <= self.swing <= 0xFF:
            raise ConfigError(f"Swing must be 0-255, got {self.swing}")

        # Every reply must be encodable, or mandatory queries would NAK
        checks = [
            ("protocol", encode_digit, self.protocol),
            ("target_temp", encode_target_temp, self.target_temp),
            ("home", encode_signed_decimal, self.home),
            ("inlet", encode_signed_decimal, self.inlet),
            ("outside", encode_signed_decimal, self.outside),
            ("home", encode_packed_temperature, self.home),
            ("outside", encode_packed_temperature, self.outside),
            ("fan_rpm", encode_unsigned_decimal, self.fan_rpm),
            ("compressor_rpm", encode_unsigned_decimal, self.compressor_rpm),
        ]
        for name, encode, value in checks:
            try:
                encode(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid {name}: {e}") from e

    def update(self, overrides: dict) -> None:
        """Apply ``overrides``, ignoring ``None`` values."""
        names = {f.name for f in fields(self)}
        unknown = set(overrides) - names
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        for key, value in overrides.items():
            if value is not None:
                setattr(self, key, value)


def load_config(path: Path | str) -> SimulatorConfig:
    """Load a configuration file on top of the defaults.

    Raises:
        ConfigError: If the file cannot be read or holds unknown keys.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")

    config = SimulatorConfig()
    config.update(data)
    logger.debug("Loaded config from %s", path)
    return config
