"""Single-byte S21 frame checksum."""

from __future__ import annotations

ETX = 0x03
ENQ = 0x05


def checksum(body: bytes) -> int:
    """Compute the checksum over a frame body.

    The body is everything between the start marker and the checksum byte,
    i.e. the command bytes plus payload. The sum is truncated to a byte; a
    result equal to ETX is sent as ENQ so the end marker stays unambiguous.
    """
    value = sum(body) & 0xFF
    return ENQ if value == ETX else value
