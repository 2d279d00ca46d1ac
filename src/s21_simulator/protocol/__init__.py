"""Protocol layer: framing, checksum, value encodings, dispatch and handshake."""

from .framing import Frame, build_frame, parse_frame, validate
from .reader import FrameReader, FrameTooLong
from .commands import Dispatcher, EngineState, Reply, ReplyKind
from .handshake import AckOutcome, HandshakeSequencer
