"""Command dispatch: maps incoming frames to handlers and builds replies.

Commands are grouped by their first byte:

- ``D`` sets a value; only an ACK is sent back.
- ``F`` queries control settings; the reply is ``G`` + sub-command.
- ``R`` queries sensors; the reply is ``S`` + sub-command.
- ``M`` is an identity probe without a second command byte.

Many ``F`` replies are fixed bytes copied from real units. Their meaning
is unknown but some controllers retry forever on NAK, so they must be
reproduced exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..models.unit import UnitState
from .framing import PAYLOAD_LEN, Frame, build_frame
from .values import (
    decode_digit,
    decode_fan,
    decode_target_temp,
    encode_digit,
    encode_fan,
    encode_packed_temperature,
    encode_signed_decimal,
    encode_target_temp,
    encode_unsigned_decimal,
)

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Phases of one request/response transaction."""

    IDLE = "idle"
    READING = "reading"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    AWAITING_PEER_ACK = "awaiting_peer_ack"


class ReplyKind(Enum):
    ACK = "ack"
    NAK = "nak"
    RESPONSE = "response"


@dataclass(frozen=True)
class Reply:
    """What to send back for a request. ``frame`` is set for RESPONSE only."""

    kind: ReplyKind
    frame: bytes = b""

    def __repr__(self) -> str:
        if self.kind is ReplyKind.RESPONSE:
            return f"Reply(response={self.frame.hex(' ')})"
        return f"Reply({self.kind.value})"


ACK_REPLY = Reply(ReplyKind.ACK)
NAK_REPLY = Reply(ReplyKind.NAK)

# Fixed 'F' replies, taken from FTXF20D unless noted. BRP069B41 requires
# all of them for protocol version 2 and keeps retrying on NAK.
FIXED_QUERY_REPLIES: dict[str, bytes] = {
    # F2 and F4 come from CTXM60RVMA/CTXM35RVMA. With the FTXF20D values
    # (34 3A 00 80 and 30 00 A0 30) BRP069B41 reports error 252.
    "2": bytes([0x3D, 0x3B, 0x00, 0x80]),
    "4": bytes([0x30, 0x00, 0x80, 0x30]),
    "B": bytes([0x30, 0x33, 0x36, 0x30]),  # 0630
    "G": bytes([0x30, 0x34, 0x30, 0x30]),  # 0040
    "K": bytes([0x71, 0x73, 0x35, 0x31]),  # 15sq
    "M": bytes([0x33, 0x42, 0x30, 0x30]),  # 00B3
    "N": bytes([0x30, 0x30, 0x30, 0x30]),  # 0000
    "P": bytes([0x37, 0x33, 0x30, 0x30]),  # 0037
    "Q": bytes([0x45, 0x33, 0x30, 0x30]),  # 003E
    "R": bytes([0x30, 0x30, 0x30, 0x30]),  # 0000
    "S": bytes([0x30, 0x30, 0x30, 0x30]),  # 0000
    "T": bytes([0x31, 0x30, 0x30, 0x30]),  # 0001
    # Not sent by BRP069B41; found by scanning FTXF20D up to FZ.
    "V": bytes([0x33, 0x37, 0x83, 0x30]),
}

# Unidentified sensors queried by BRP069B41. Distinct values make them easy
# to spot if they show up somewhere on the controller side.
UNKNOWN_SENSOR_VALUES: dict[str, int] = {
    "N": 235,
    "X": 215,
}

IDENTITY_REPLY_BODY = b"FFFF"


# ─── QUERY HANDLERS ('F') ────────────────────────────────────────────

def _query_status(state: UnitState) -> bytes:
    logger.debug(
        " -> power %d mode %d temp %.1f fan %d",
        state.power, state.mode, state.target_temp, state.fan,
    )
    return bytes([
        encode_digit(int(state.power)),
        encode_digit(state.mode),
        encode_target_temp(state.target_temp),
        encode_fan(state.fan),
    ])


def _query_powerful_f3(state: UnitState) -> bytes:
    logger.debug(" -> powerful ('F3') %d", state.powerful)
    # Leading bytes copied from FTXF20D
    return bytes([0x30, 0xFE, 0xFE, 2 if state.powerful else 0])


def _query_swing(state: UnitState) -> bytes:
    logger.debug(" -> swing %d", state.swing)
    return bytes([state.swing, 0, 0, 0])


def _query_powerful_f6(state: UnitState) -> bytes:
    logger.debug(" -> powerful ('F6') %d", state.powerful)
    return bytes([2 if state.powerful else 0, 0, 0, 0])


def _query_eco(state: UnitState) -> bytes:
    logger.debug(" -> eco %d", state.eco)
    return bytes([0, ord("2") if state.eco else ord("0"), 0, 0])


def _query_protocol(state: UnitState) -> bytes:
    # FTXF20D answers '0020', read backwards like everything else. With
    # version 0 or 1 BRP069B41 goes straight to 'M' and comes online.
    logger.debug(" -> protocol version = %d", state.protocol)
    return bytes([ord("0"), encode_digit(state.protocol), ord("0"), ord("0")])


def _query_packed_temps(state: UnitState) -> bytes:
    # FTXF20D sends 0xFF for outside; FF 30 tail copied from it as well
    payload = bytes([
        encode_packed_temperature(state.home),
        encode_packed_temperature(state.outside),
        0xFF,
        0x30,
    ])
    logger.debug(
        " -> home = 0x%02X (%.1f) outside = 0x%02X (%.1f)",
        payload[0], state.home / 10, payload[1], state.outside / 10,
    )
    return payload


def _query_model(state: UnitState) -> bytes:
    # Sent only once after the controller boots; a changed model needs a
    # controller restart to show up.
    logger.debug(" -> model = %s", state.model)
    return state.model.encode("ascii")[::-1]


QUERY_HANDLERS: dict[str, Callable[[UnitState], bytes]] = {
    "1": _query_status,
    "3": _query_powerful_f3,
    "5": _query_swing,
    "6": _query_powerful_f6,
    "7": _query_eco,
    "8": _query_protocol,
    "9": _query_packed_temps,
    "C": _query_model,
}


# ─── SENSOR HANDLERS ('R') ───────────────────────────────────────────

def _temperature(name: str, read: Callable[[UnitState], int]):
    def handler(state: UnitState) -> bytes:
        value = read(state)
        logger.debug(" -> %s = %+d", name, value)
        return encode_signed_decimal(value)
    return handler


def _rpm(name: str, read: Callable[[UnitState], int]):
    def handler(state: UnitState) -> bytes:
        value = read(state)
        logger.debug(" -> %s = %03d", name, value)
        # Non-standard 3-byte payload
        return encode_unsigned_decimal(value)
    return handler


SENSOR_HANDLERS: dict[str, Callable[[UnitState], bytes]] = {
    "H": _temperature("home", lambda s: s.home),
    "I": _temperature("inlet", lambda s: s.inlet),
    "a": _temperature("outside", lambda s: s.outside),
    "L": _rpm("fan rpm", lambda s: s.fan_rpm),
    "d": _rpm("compressor rpm", lambda s: s.compressor_rpm),
    "N": _temperature("unknown ('RN')", lambda s: UNKNOWN_SENSOR_VALUES["N"]),
    "X": _temperature("unknown ('RX')", lambda s: UNKNOWN_SENSOR_VALUES["X"]),
}


# ─── SET HANDLERS ('D') ──────────────────────────────────────────────

def _set_status(state: UnitState, payload: bytes) -> None:
    power = decode_digit(payload[0])
    mode = decode_digit(payload[1])
    temp = decode_target_temp(payload[2])
    fan = decode_fan(payload[3])

    state.power = bool(power)
    state.mode = mode
    state.target_temp = temp
    state.fan = fan
    logger.info(" Set power %d mode %d temp %.1f fan %d", power, mode, temp, fan)


def _set_swing(state: UnitState, payload: bytes) -> None:
    # Byte 1 is '?' for on and '0' for off; bytes 2-3 are always '0'
    state.swing = decode_digit(payload[0])
    logger.info(" Set swing %d spare bytes %s", state.swing, payload[1:].hex(" "))


def _set_powerful(state: UnitState, payload: bytes) -> None:
    # Daichi controllers send 'D6 0000' for eco both on and off, so eco
    # cannot be told apart from "powerful off" here.
    state.powerful = payload[0] == ord("2")
    logger.info(
        " Set powerful %d spare bytes %s", state.powerful, payload[1:].hex(" ")
    )


SET_HANDLERS: dict[str, Callable[[UnitState, bytes], None]] = {
    "1": _set_status,
    "5": _set_swing,
    "6": _set_powerful,
}


class Dispatcher:
    """Runs command handlers against one unit's state.

    The dispatcher does no I/O; it returns a :class:`Reply` describing what
    should be written back to the controller.
    """

    def __init__(self, state: UnitState) -> None:
        self.state = state

    def dispatch(self, frame: Frame) -> Reply:
        logger.debug("Got command: %s", frame.command)
        family = frame.family
        if family == "D":
            self._apply_set(frame)
            return ACK_REPLY
        if family == "F":
            return self._respond(frame, QUERY_HANDLERS, FIXED_QUERY_REPLIES)
        if family == "R":
            return self._respond(frame, SENSOR_HANDLERS)
        if family == "M":
            logger.debug(" -> identity probe ('M')")
            return Reply(ReplyKind.RESPONSE, build_frame(b"M", IDENTITY_REPLY_BODY))
        return self._nak(frame)

    def _apply_set(self, frame: Frame) -> None:
        handler = SET_HANDLERS.get(frame.sub_command)
        if handler is None:
            logger.info(" Set unknown: %s", frame.body.hex(" "))
            return
        if len(frame.payload) < PAYLOAD_LEN:
            logger.warning(
                " Set %s with short payload ignored: %s",
                frame.command, frame.payload.hex(" "),
            )
            return
        try:
            handler(self.state, frame.payload)
        except ValueError as e:
            logger.warning(" Set %s ignored: %s", frame.command, e)

    def _respond(
        self,
        frame: Frame,
        handlers: dict[str, Callable[[UnitState], bytes]],
        fixed: dict[str, bytes] | None = None,
    ) -> Reply:
        sub = frame.sub_command
        if sub in handlers:
            try:
                payload = handlers[sub](self.state)
            except ValueError as e:
                logger.warning(" -> cannot encode %s: %s", frame.command, e)
                return self._nak(frame)
        elif fixed and sub in fixed:
            payload = fixed[sub]
            logger.debug(" -> unknown (%r) = %s", frame.command, payload.hex(" "))
        else:
            return self._nak(frame)
        command = bytes([frame.body[0] + 1, frame.body[1]])
        return Reply(ReplyKind.RESPONSE, build_frame(command, payload))

    @staticmethod
    def _nak(frame: Frame) -> Reply:
        logger.info(" -> Unknown command %s, sending NAK", frame.command)
        return NAK_REPLY
