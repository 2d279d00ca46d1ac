"""Frame reader: rebuilds frames from the raw byte stream.

Decisions are made one byte at a time. Anything outside a frame that is
not a start marker is dropped, so the reader resynchronizes on its own
after line noise or a partial frame.
"""

from __future__ import annotations

import logging
from typing import Protocol

from .framing import ETX, MAX_FRAME_LEN, STX

logger = logging.getLogger(__name__)
wire_logger = logging.getLogger("s21_simulator.wire")


class Channel(Protocol):
    """Bidirectional byte stream the engine talks over."""

    def read(self, size: int = 1) -> bytes: ...

    def write(self, data: bytes) -> int | None: ...


class FrameTooLong(ValueError):
    """Raised when no end marker arrives before the buffer is full."""

    def __init__(self, data: bytes) -> None:
        super().__init__(f"No end marker within {len(data)} bytes")
        self.data = data


def hexdump(header: str, data: bytes) -> None:
    """Log raw bytes on the wire logger, e.g. ``Rx: 02 46 31 77 03``."""
    if wire_logger.isEnabledFor(logging.DEBUG):
        wire_logger.debug("%s: %s", header, data.hex(" ").upper())


class FrameReader:
    """Reads complete raw frames from a channel.

    Usage::

        reader = FrameReader(channel)
        raw = reader.read_frame()
    """

    def __init__(self, channel: Channel, max_length: int = MAX_FRAME_LEN) -> None:
        self._channel = channel
        self._max_length = max_length
        self._carry_start = False

    def carry_start_marker(self) -> None:
        """Start the next frame with an STX that was already consumed.

        Some controllers skip the ACK for our response and start their next
        frame right away; the byte read in place of the ACK is that frame's
        start marker.
        """
        self._carry_start = True

    def read_byte(self) -> int:
        """Block until one byte arrives. Empty reads (timeouts) are retried."""
        while True:
            data = self._channel.read(1)
            if data:
                return data[0]

    def read_frame(self) -> bytes:
        """Read one raw frame, from STX to ETX inclusive.

        Raises:
            FrameTooLong: If ``max_length`` bytes arrive without an ETX.
                The partial frame is discarded.
        """
        buf = bytearray()
        if self._carry_start:
            buf.append(STX)
            self._carry_start = False

        while len(buf) < self._max_length:
            byte = self.read_byte()
            if not buf and byte != STX:
                logger.info("Garbage byte received: 0x%02X", byte)
                continue
            buf.append(byte)
            if byte == ETX:
                hexdump("Rx", bytes(buf))
                return bytes(buf)

        hexdump("Rx", bytes(buf))
        raise FrameTooLong(bytes(buf))
