"""Frame builder and validator for the S21 serial protocol.

Frame layout::

    +-----+---------+---------+------------------+----------+-----+
    | STX | Command | Command |     Payload      | Checksum | ETX |
    | 02  | byte 0  | byte 1  | 0-5 bytes        |  1 byte  | 03  |
    +-----+---------+---------+------------------+----------+-----+

- Command: two ASCII bytes, e.g. ``F1``. The identity probe ``M`` has
  only one.
- Checksum: byte sum of command + payload, see :func:`checksum`.
- ACK and NAK are sent as single bytes without any framing.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..utils.checksum import ENQ, ETX, checksum

STX = 0x02
ACK = 0x06
NAK = 0x15

# Offsets from the start of a raw frame
STX_OFFSET = 0
CMD0_OFFSET = 1
CMD1_OFFSET = 2
PAYLOAD_OFFSET = 3

PAYLOAD_LEN = 4        # Typical payload size; a few commands use 3 or 5
FRAMING_LEN = 3        # STX + checksum + ETX
MIN_FRAME_LEN = 4      # STX + one command byte + checksum + ETX
MAX_FRAME_LEN = 256

__all__ = [
    "ACK",
    "ENQ",
    "ETX",
    "NAK",
    "STX",
    "Frame",
    "build_frame",
    "checksum",
    "parse_frame",
    "validate",
]


@dataclass(frozen=True)
class Frame:
    """A validated protocol frame, stripped of markers and checksum."""

    body: bytes

    @property
    def family(self) -> str:
        """First command character, e.g. ``"F"`` for ``F1``."""
        return chr(self.body[0])

    @property
    def sub_command(self) -> str:
        """Second command character, or ``""`` for one-byte commands."""
        return chr(self.body[1]) if len(self.body) > 1 else ""

    @property
    def command(self) -> str:
        return self.family + self.sub_command

    @property
    def payload(self) -> bytes:
        return self.body[2:]

    def __repr__(self) -> str:
        return (
            f"Frame(command={self.command!r}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


def build_frame(command: bytes, payload: bytes = b"") -> bytes:
    """Build a complete frame ready to be written to the channel.

    Args:
        command: One or two command bytes.
        payload: Command-specific payload bytes.
    """
    body = command + payload
    return bytes([STX]) + body + bytes([checksum(body), ETX])


def validate(raw: bytes) -> bool:
    """Check bounds, markers and the trailing checksum byte of a raw frame."""
    if not MIN_FRAME_LEN <= len(raw) <= MAX_FRAME_LEN:
        return False
    if raw[STX_OFFSET] != STX or raw[-1] != ETX:
        return False
    return checksum(raw[CMD0_OFFSET:-2]) == raw[-2]


def parse_frame(raw: bytes) -> Frame | None:
    """Parse a raw frame received from the channel.

    Returns:
        A ``Frame`` if the frame is well formed and the checksum matches,
        or ``None`` otherwise.
    """
    if not validate(raw):
        return None
    return Frame(body=bytes(raw[CMD0_OFFSET:-2]))
