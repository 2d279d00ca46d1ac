"""Conversions between unit values and their S21 wire representations.

Most numeric values travel as ASCII. Sensor readings are sent as a signed
decimal string spelled backwards, e.g. 24.5 degrees (245 tenths) becomes
``b"542+"``.
"""

from __future__ import annotations

TARGET_TEMP_BASE = 18.0
TARGET_TEMP_BASE_BYTE = ord("@")
TARGET_TEMP_STEP = 0.5

FAN_AUTO = 0
FAN_QUIET = 6
FAN_AUTO_BYTE = ord("A")
FAN_QUIET_BYTE = ord("B")
FAN_SPEED_BASE_BYTE = ord("3")  # Speed 1

PACKED_TEMP_OFFSET = 0x80


def encode_digit(value: int) -> int:
    """Encode a small integer as a single ASCII digit byte."""
    if not 0 <= value <= 9:
        raise ValueError(f"Digit must be 0-9, got {value}")
    return ord("0") + value


def decode_digit(byte: int) -> int:
    value = byte - ord("0")
    if not 0 <= value <= 9:
        raise ValueError(f"Not an ASCII digit: 0x{byte:02X}")
    return value


def encode_signed_decimal(value: int) -> bytes:
    """Encode pre-scaled ``value`` as a reversed 4-character signed decimal.

    Args:
        value: Integer in -999..999, usually tenths of a degree.
    """
    if not -999 <= value <= 999:
        raise ValueError(f"Signed decimal must be -999..999, got {value}")
    return f"{value:+04d}".encode("ascii")[::-1]


def decode_signed_decimal(data: bytes) -> int:
    return int(data[::-1].decode("ascii"))


def encode_unsigned_decimal(value: int) -> bytes:
    """Encode ``value`` as 3 reversed zero-padded digits (rpm sensors)."""
    if not 0 <= value <= 999:
        raise ValueError(f"Unsigned decimal must be 0-999, got {value}")
    return f"{value:03d}".encode("ascii")[::-1]


def decode_unsigned_decimal(data: bytes) -> int:
    return int(data[::-1].decode("ascii"))


def encode_target_temp(temp: float) -> int:
    """Encode a set point as one byte, 0.5 degree per step from 18.0 at ``'@'``."""
    steps = (temp - TARGET_TEMP_BASE) / TARGET_TEMP_STEP
    if steps != int(steps):
        raise ValueError(f"Target temperature must be on a 0.5 grid, got {temp}")
    byte = TARGET_TEMP_BASE_BYTE + int(steps)
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"Target temperature {temp} is out of range")
    return byte


def decode_target_temp(byte: int) -> float:
    return TARGET_TEMP_BASE + TARGET_TEMP_STEP * (byte - TARGET_TEMP_BASE_BYTE)


def encode_fan(speed: int) -> int:
    """Encode a fan speed: ``'A'`` auto, ``'B'`` quiet, ``'3'``-``'7'`` speeds 1-5."""
    if speed == FAN_AUTO:
        return FAN_AUTO_BYTE
    if speed == FAN_QUIET:
        return FAN_QUIET_BYTE
    if 1 <= speed <= 5:
        return FAN_SPEED_BASE_BYTE + speed - 1
    raise ValueError(f"Fan speed must be 0-6, got {speed}")


def decode_fan(byte: int) -> int:
    if byte == FAN_AUTO_BYTE:
        return FAN_AUTO
    if byte == FAN_QUIET_BYTE:
        return FAN_QUIET
    speed = byte - FAN_SPEED_BASE_BYTE + 1
    if 1 <= speed <= 5:
        return speed
    raise ValueError(f"Unknown fan byte 0x{byte:02X}")


def encode_packed_temperature(tenths: int) -> int:
    """Pack a temperature in tenths into one byte, 0.5 degree per step.

    Division truncates toward zero, matching the unit's firmware.
    """
    byte = int(tenths / 5) + PACKED_TEMP_OFFSET
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"Temperature {tenths / 10:.1f} cannot be packed")
    return byte


def decode_packed_temperature(byte: int) -> int:
    return (byte - PACKED_TEMP_OFFSET) * 5
