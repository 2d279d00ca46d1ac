"""Tests for wire value encodings."""

import pytest

from s21_simulator.protocol.values import (
    decode_digit,
    decode_fan,
    decode_packed_temperature,
    decode_signed_decimal,
    decode_target_temp,
    decode_unsigned_decimal,
    encode_digit,
    encode_fan,
    encode_packed_temperature,
    encode_signed_decimal,
    encode_target_temp,
    encode_unsigned_decimal,
)


def test_signed_decimal_reversed():
    """24.5 degrees is sent as '+245' spelled backwards."""
    assert encode_signed_decimal(245) == b"542+"


def test_signed_decimal_padded():
    """Short values are zero-padded to four characters."""
    assert encode_signed_decimal(5) == b"500+"
    assert encode_signed_decimal(-50) == b"050-"
    assert encode_signed_decimal(0) == b"000+"


def test_signed_decimal_roundtrip():
    """Every supported value decodes back to itself."""
    for value in range(-999, 1000):
        assert decode_signed_decimal(encode_signed_decimal(value)) == value


def test_signed_decimal_real_capture():
    """Decode readings captured from an FTXF20D."""
    assert decode_signed_decimal(b"052+") == 250
    assert decode_signed_decimal(b"521+") == 125


def test_signed_decimal_range():
    """Values needing more than three digits are rejected."""
    with pytest.raises(ValueError):
        encode_signed_decimal(1000)
    with pytest.raises(ValueError):
        encode_signed_decimal(-1000)


def test_unsigned_decimal():
    """RPM values are three reversed digits."""
    assert encode_unsigned_decimal(52) == b"250"
    assert encode_unsigned_decimal(42) == b"240"
    assert decode_unsigned_decimal(b"250") == 52


def test_unsigned_decimal_range():
    """Negative or four-digit values are rejected."""
    with pytest.raises(ValueError):
        encode_unsigned_decimal(-1)
    with pytest.raises(ValueError):
        encode_unsigned_decimal(1000)


def test_target_temp_known_values():
    """18.0 is '@' and each 0.5 degree is one step."""
    assert encode_target_temp(18.0) == ord("@")
    assert encode_target_temp(22.5) == ord("I")
    assert encode_target_temp(20.0) == ord("D")
    assert encode_target_temp(16.0) == ord("<")
    assert decode_target_temp(ord("I")) == 22.5


def test_target_temp_roundtrip():
    """All values on the 0.5 degree grid round-trip exactly."""
    for steps in range(10 * 2, 32 * 2 + 1):
        temp = steps / 2
        assert decode_target_temp(encode_target_temp(temp)) == temp


def test_target_temp_off_grid():
    """Values between grid points are rejected."""
    with pytest.raises(ValueError):
        encode_target_temp(22.3)


def test_target_temp_out_of_range():
    """Values that do not fit in a byte are rejected."""
    with pytest.raises(ValueError):
        encode_target_temp(-20.0)
    with pytest.raises(ValueError):
        encode_target_temp(120.0)


def test_fan_encoding():
    """Auto and quiet are letters, speeds are digits from '3'."""
    assert encode_fan(0) == ord("A")
    assert encode_fan(6) == ord("B")
    assert encode_fan(1) == ord("3")
    assert encode_fan(3) == ord("5")
    assert encode_fan(5) == ord("7")


def test_fan_roundtrip():
    """Every fan setting decodes back to itself."""
    for speed in range(7):
        assert decode_fan(encode_fan(speed)) == speed


def test_fan_invalid():
    """Unknown speeds and bytes raise."""
    with pytest.raises(ValueError):
        encode_fan(7)
    with pytest.raises(ValueError):
        decode_fan(ord("9"))


def test_digit():
    """Digits are offset from '0'."""
    assert encode_digit(3) == ord("3")
    assert decode_digit(ord("7")) == 7
    with pytest.raises(ValueError):
        decode_digit(ord("A"))
    with pytest.raises(ValueError):
        encode_digit(10)


def test_packed_temperature():
    """F9 packs tenths / 5 + 0x80, truncating toward zero."""
    assert encode_packed_temperature(245) == 177
    assert encode_packed_temperature(205) == 169
    assert encode_packed_temperature(-47) == 0x80 - 9
    assert decode_packed_temperature(177) == 245


def test_packed_temperature_range():
    """Temperatures outside one byte are rejected."""
    with pytest.raises(ValueError):
        encode_packed_temperature(700)
