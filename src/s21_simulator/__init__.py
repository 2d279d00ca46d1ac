"""Daikin S21 air conditioner simulator for controller testing."""

__version__ = "0.1.0"
