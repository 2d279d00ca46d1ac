"""Serial port connection to the controller under test.

S21 runs at 2400 baud, 8 data bits, even parity and two stop bits. Reads
block until data arrives; the protocol engine has no timeouts of its own.
"""

from __future__ import annotations

import logging
import time

import serial

logger = logging.getLogger(__name__)

DEFAULT_BAUDRATE = 2400
SETTLE_DELAY_S = 0.1


class ChannelError(ConnectionError):
    """The byte stream failed. The simulator cannot continue without it."""


class SerialConnection:
    """Manages the serial port the simulated unit listens on.

    Usage::

        with SerialConnection("/dev/ttyUSB0") as conn:
            conn.write(b"\\x06")
            data = conn.read(1)
    """

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        timeout: float | None = None,
    ) -> None:
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._serial: serial.Serial | None = None

    @property
    def port(self) -> str:
        return self._port

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        """Open and configure the port, then flush anything already queued.

        Raises:
            ChannelError: If the port cannot be opened.
        """
        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_EVEN,
                stopbits=serial.STOPBITS_TWO,
                timeout=self._timeout,
            )
            time.sleep(SETTLE_DELAY_S)
            self._serial.reset_input_buffer()
            self._serial.reset_output_buffer()
        except (serial.SerialException, OSError) as e:
            self._serial = None
            raise ChannelError(f"Cannot open {self._port}: {e}") from e

        logger.info("Listening on %s at %d baud", self._port, self._baudrate)

    def close(self) -> None:
        if self._serial is None:
            return
        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing %s: %s", self._port, e)
        finally:
            self._serial = None
            logger.info("Closed %s", self._port)

    def read(self, size: int = 1) -> bytes:
        """Read up to ``size`` bytes. Returns ``b""`` only if a timeout is set.

        Raises:
            ChannelError: If not connected or the read fails.
        """
        if not self.connected:
            raise ChannelError("Serial port is not open")
        try:
            return self._serial.read(size)
        except (serial.SerialException, OSError) as e:
            raise ChannelError(f"Error reading from serial port: {e}") from e

    def write(self, data: bytes) -> int:
        """Write all of ``data``. A short write is treated as a failure."""
        if not self.connected:
            raise ChannelError("Serial port is not open")
        try:
            written = self._serial.write(data)
        except (serial.SerialException, OSError) as e:
            raise ChannelError(f"Serial write failed: {e}") from e
        if written != len(data):
            raise ChannelError(
                f"Serial write failed; {written} bytes instead of {len(data)}"
            )
        return written

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
