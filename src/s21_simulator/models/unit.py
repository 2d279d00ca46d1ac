"""Simulated air-conditioner state."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import SimulatorConfig

MODEL_CODE_LEN = 4


class Mode(IntEnum):
    """Operating modes as carried in ``F1``/``D1`` (ASCII digit)."""

    FAN = 0
    HEAT = 1
    COOL = 2
    AUTO = 3
    DRY = 7


class FanSpeed(IntEnum):
    """Fan speed settings. 1-5 are fixed speeds."""

    AUTO = 0
    SPEED_1 = 1
    SPEED_2 = 2
    SPEED_3 = 3
    SPEED_4 = 4
    SPEED_5 = 5
    QUIET = 6


@dataclass
class UnitState:
    """Operating parameters and sensor readings of the simulated unit.

    Temperatures are stored in tenths of a degree, except ``target_temp``
    which is a float on a 0.5 degree grid. ``fan_rpm`` is stored divided
    by 10. Defaults are chosen to be distinct from each other so they are
    easy to spot on the controller side.
    """

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

    def __post_init__(self) -> None:
        if len(self.model) != MODEL_CODE_LEN:
            raise ValueError(
                f"Model code must be {MODEL_CODE_LEN} characters, got {self.model!r}"
            )

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_config(cls, config: SimulatorConfig) -> UnitState:
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in asdict(config).items() if k in names})
