"""ACK/NAK exchange around each transaction."""

from __future__ import annotations

import logging
from enum import Enum

from .commands import Reply, ReplyKind
from .framing import ACK, NAK, STX
from .reader import Channel, FrameReader, hexdump

logger = logging.getLogger(__name__)


class AckOutcome(Enum):
    """How the controller answered our response."""

    ACK = "ack"
    NEXT_FRAME = "next_frame"
    UNEXPECTED = "unexpected"


class HandshakeSequencer:
    """Writes replies to the channel and waits for the controller's ACK."""

    def __init__(self, channel: Channel, reader: FrameReader) -> None:
        self._channel = channel
        self._reader = reader

    def _write(self, data: bytes) -> None:
        hexdump("Tx", data)
        self._channel.write(data)

    def send(self, reply: Reply) -> AckOutcome | None:
        """Send a reply.

        A RESPONSE is always preceded by an ACK for the request frame and
        followed by a wait for the controller's ACK.

        Returns:
            The acknowledgement outcome for RESPONSE replies, else ``None``.
        """
        if reply.kind is ReplyKind.NAK:
            self._write(bytes([NAK]))
            return None

        self._write(bytes([ACK]))
        if reply.kind is ReplyKind.ACK:
            return None

        self._write(reply.frame)
        return self.await_ack()

    def await_ack(self) -> AckOutcome:
        """Block for exactly one byte from the controller. No timeout."""
        byte = self._reader.read_byte()
        hexdump("Rx", bytes([byte]))

        if byte == ACK:
            return AckOutcome.ACK
        if byte == STX:
            # Daichi cloud controllers skip the ACK and start the next frame
            logger.debug("The controller didn't ACK our response, next frame started")
            self._reader.carry_start_marker()
            return AckOutcome.NEXT_FRAME
        logger.warning("Protocol error: expected ACK, got 0x%02X", byte)
        return AckOutcome.UNEXPECTED
