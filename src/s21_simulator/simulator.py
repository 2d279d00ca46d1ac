"""Simulator entry point: serves the S21 protocol on a serial port.

Each transaction is handled to completion before the next byte is read:
frame, validate, dispatch, reply, wait for the controller's ACK.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import ConfigError, SimulatorConfig, load_config
from .models.unit import UnitState
from .protocol.commands import Dispatcher, EngineState, Reply, ReplyKind
from .protocol.framing import parse_frame
from .protocol.handshake import HandshakeSequencer
from .protocol.reader import Channel, FrameReader, FrameTooLong
from .transport.serial_connection import ChannelError, SerialConnection

logger = logging.getLogger(__name__)

EXIT_CHANNEL_FAILURE = 255


class Simulator:
    """One protocol engine bound to one channel and one unit state.

    Serving several channels needs one ``Simulator`` each; state is never
    shared between them.
    """

    def __init__(self, channel: Channel, state: UnitState) -> None:
        self.state = state
        self.engine_state = EngineState.IDLE
        self._reader = FrameReader(channel)
        self._dispatcher = Dispatcher(state)
        self._sequencer = HandshakeSequencer(channel, self._reader)

    def serve_once(self) -> Reply | None:
        """Handle a single transaction.

        Returns:
            The reply that was sent, or ``None`` if the frame was dropped.

        Raises:
            ChannelError: If the channel fails.
        """
        self.engine_state = EngineState.READING
        try:
            raw = self._reader.read_frame()
        except FrameTooLong as e:
            logger.warning("Frame too long, discarded: %s", e)
            self.engine_state = EngineState.IDLE
            return None

        frame = parse_frame(raw)
        if frame is None:
            # Dropped without NAK, as FTXF20D does
            logger.info("Bad frame or checksum: %s", raw.hex(" "))
            self.engine_state = EngineState.IDLE
            return None
        self.engine_state = EngineState.VALIDATED

        reply = self._dispatcher.dispatch(frame)
        self.engine_state = EngineState.DISPATCHED

        if reply.kind is ReplyKind.RESPONSE:
            self.engine_state = EngineState.AWAITING_PEER_ACK
        self._sequencer.send(reply)
        self.engine_state = EngineState.IDLE
        return reply

    def run(self) -> None:
        """Serve transactions until the channel fails."""
        while True:
            self.serve_once()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s21-simulator",
        description="Daikin air conditioner simulator for S21 protocol testing",
    )
    parser.add_argument("-p", "--port", help="Serial port, e.g. /dev/ttyUSB0")
    parser.add_argument("-v", "--debug", action="store_true",
                        help="Log commands and responses")
    parser.add_argument("-V", "--dump", action="store_true",
                        help="Hex dump all traffic")
    parser.add_argument("--config", help="JSON file with the initial unit state")
    power = parser.add_mutually_exclusive_group()
    power.add_argument("--on", dest="power", action="store_const", const=True,
                       help="Power on")
    power.add_argument("--off", dest="power", action="store_const", const=False,
                       help="Power off")
    parser.add_argument("--mode", type=int, help="0=F,1=H,2=C,3=A,7=D")
    parser.add_argument("--fan", type=int,
                        help="0 = auto, 1-5 = set speed, 6 = quiet")
    parser.add_argument("--temp", dest="target_temp", type=float,
                        help="Set point, C")
    parser.add_argument("--swing", type=int, help="Swing direction")
    parser.add_argument("--powerful", action=argparse.BooleanOptionalAction,
                        help="Powerful mode")
    parser.add_argument("--eco", action=argparse.BooleanOptionalAction,
                        help="Eco mode")
    parser.add_argument("--home", type=int,
                        help="Home temperature, multiplied by 10")
    parser.add_argument("--outside", type=int,
                        help="Outside temperature, multiplied by 10")
    parser.add_argument("--inlet", type=int,
                        help="Inlet temperature, multiplied by 10")
    parser.add_argument("--fanrpm", dest="fan_rpm", type=int,
                        help="Fan rpm, divided by 10")
    parser.add_argument("--comprpm", dest="compressor_rpm", type=int,
                        help="Compressor rpm")
    parser.add_argument("--protocol", type=int,
                        help="Reported protocol version")
    parser.add_argument("--model", help="Reported model code, 4 characters")
    return parser


STATE_OPTIONS = (
    "port", "power", "mode", "fan", "target_temp", "swing", "powerful", "eco",
    "home", "outside", "inlet", "fan_rpm", "compressor_rpm", "protocol", "model",
)


def config_from_args(args: argparse.Namespace) -> SimulatorConfig:
    """Merge defaults, the optional config file and command-line options."""
    config = load_config(args.config) if args.config else SimulatorConfig()
    config.update({name: getattr(args, name) for name in STATE_OPTIONS})
    config.validate()
    return config


def configure_logging(debug: bool, dump: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("s21_simulator.wire").setLevel(
        logging.DEBUG if dump else logging.WARNING
    )


def main(argv: list[str] | None = None) -> int:
    """Run the simulator until the serial channel fails."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug, args.dump)

    try:
        config = config_from_args(args)
    except ConfigError as e:
        parser.error(str(e))
    if not config.port:
        parser.error("a serial port is required (--port or \"port\" in --config)")

    state = UnitState.from_config(config)
    logger.debug("Initial state: %s", state.to_dict())

    try:
        with SerialConnection(config.port) as conn:
            Simulator(conn, state).run()
    except ChannelError as e:
        logger.error("%s", e)
        return EXIT_CHANNEL_FAILURE
    return 0


if __name__ == "__main__":
    sys.exit(main())
