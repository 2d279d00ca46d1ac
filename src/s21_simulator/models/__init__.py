"""Data model of the simulated unit."""

from .unit import FanSpeed, Mode, UnitState
