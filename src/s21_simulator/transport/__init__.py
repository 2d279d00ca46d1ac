"""Byte-stream transports."""

from .serial_connection import ChannelError, SerialConnection
