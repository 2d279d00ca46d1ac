"""Shared fixtures: a scripted in-memory channel."""

import pytest

from s21_simulator.transport.serial_connection import ChannelError


class FakeChannel:
    """Feeds scripted input bytes and records everything written.

    Reading past the end of the script raises ``ChannelError``, which is
    how a closed port surfaces to the engine.
    """

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytearray(data)
        self.writes: list[bytes] = []

    def feed(self, data: bytes) -> None:
        self._data.extend(data)

    def read(self, size: int = 1) -> bytes:
        if not self._data:
            raise ChannelError("channel closed")
        chunk = bytes(self._data[:size])
        del self._data[:size]
        return chunk

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data)

    @property
    def written(self) -> bytes:
        return b"".join(self.writes)

    @property
    def remaining(self) -> bytes:
        return bytes(self._data)


@pytest.fixture
def channel():
    return FakeChannel()
