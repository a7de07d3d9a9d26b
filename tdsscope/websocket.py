"""Server side of the WebSocket protocol: handshake, framing and a connection."""

from __future__ import annotations

import collections
import enum
import socket
import threading
from dataclasses import dataclass

from tdsscope.encoding import b64encode, sha1_digest
from tdsscope.http import HttpRequest

WS_GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"
_RECV_SIZE = 4096


class WebSocketError(ValueError):
    """Raised when a request cannot be upgraded to a WebSocket."""


class ConnectionClosed(ConnectionError):
    """Raised when the peer has closed the WebSocket connection."""


class WsState(enum.Enum):
    HANDSHAKE = "handshake"
    OPEN = "open"
    CLOSED = "closed"


class Opcode(enum.IntEnum):
    CONTINUATION = 0x0
    TEXT = 0x1
    BINARY = 0x2
    CLOSE = 0x8
    PING = 0x9
    PONG = 0xA


@dataclass(frozen=True)
class Frame:
    opcode: int
    payload: bytes


def accept_key(key: str) -> str:
    """Sec-WebSocket-Accept value for a client's Sec-WebSocket-Key."""
    return b64encode(sha1_digest(key + WS_GUID))


def encode_frame(opcode: int, payload: bytes | str = b"") -> bytes:
    """Build a single unmasked frame with FIN set."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    payload = bytes(payload)
    length = len(payload)
    header = bytearray([0x80 | (int(opcode) & 0x0F)])
    if length < 126:
        header.append(length)
    elif length < 65536:
        header.append(126)
        header += length.to_bytes(2, "big")
    else:
        header.append(127)
        header += length.to_bytes(8, "big")
    return bytes(header) + payload


class FrameParser:
    """Incremental frame decoder; unmasks client frames as needed."""

    def __init__(self) -> None:
        self._buf = bytearray()
        self.closed = False

    def feed(self, data: bytes) -> list[Frame]:
        """Add received bytes and return the complete frames now available.

        Parsing stops after a close frame; later bytes are kept but ignored.
        """
        self._buf.extend(data)
        frames: list[Frame] = []
        while not self.closed and len(self._buf) >= 2:
            buf = self._buf
            opcode = buf[0] & 0x0F
            masked = bool(buf[1] & 0x80)
            length = buf[1] & 0x7F
            offset = 2
            if length == 126:
                if len(buf) < 4:
                    break
                length = int.from_bytes(buf[2:4], "big")
                offset = 4
            elif length == 127:
                if len(buf) < 10:
                    break
                length = int.from_bytes(buf[2:10], "big")
                offset = 10

            mask = b""
            if masked:
                if len(buf) < offset + 4:
                    break
                mask = bytes(buf[offset : offset + 4])
                offset += 4

            if len(buf) < offset + length:
                break

            payload = bytes(buf[offset : offset + length])
            if masked:
                payload = bytes(b ^ mask[i % 4] for i, b in enumerate(payload))
            del self._buf[: offset + length]

            frames.append(Frame(opcode, payload))
            if opcode == Opcode.CLOSE:
                self.closed = True
        return frames


class WebSocketConnection:
    """One upgraded client connection; sends are safe from several threads."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock: socket.socket | None = sock
        self.state = WsState.HANDSHAKE
        self._parser = FrameParser()
        self._pending: collections.deque[bytes] = collections.deque()
        self._send_lock = threading.Lock()

    @property
    def socket(self) -> socket.socket | None:
        return self._sock

    def __enter__(self) -> WebSocketConnection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def upgrade(self, request: HttpRequest) -> None:
        """Answer the upgrade request with 101 Switching Protocols and open the connection."""
        if not request.is_websocket_upgrade or not request.ws_key:
            raise WebSocketError("request is not a WebSocket upgrade")
        if self._sock is None:
            raise ConnectionClosed("socket already closed")
        response = (
            "HTTP/1.1 101 Switching Protocols\r\n"
            "Upgrade: websocket\r\n"
            "Connection: Upgrade\r\n"
            f"Sec-WebSocket-Accept: {accept_key(request.ws_key)}\r\n"
            "\r\n"
        )
        self._sock.sendall(response.encode("latin-1"))
        self.state = WsState.OPEN

    def _send(self, opcode: Opcode, payload: bytes) -> None:
        with self._send_lock:
            if self.state is not WsState.OPEN or self._sock is None:
                raise ConnectionClosed("connection is not open")
            self._sock.sendall(encode_frame(opcode, payload))

    def send_text(self, payload: str) -> None:
        self._send(Opcode.TEXT, payload.encode("utf-8"))

    def send_binary(self, data: bytes) -> None:
        self._send(Opcode.BINARY, bytes(data))

    def receive(self) -> bytes:
        """Return the next text or binary payload, or b"" when nothing arrived in time.

        Raises ConnectionClosed when the peer closes or the socket fails.
        """
        if self._pending:
            return self._pending.popleft()
        if self.state is not WsState.OPEN or self._sock is None:
            raise ConnectionClosed("connection is not open")
        try:
            data = self._sock.recv(_RECV_SIZE)
        except (BlockingIOError, TimeoutError):
            return b""
        except OSError as exc:
            self.state = WsState.CLOSED
            raise ConnectionClosed(str(exc)) from exc
        if not data:
            self.state = WsState.CLOSED
            raise ConnectionClosed("peer closed the connection")

        for frame in self._parser.feed(data):
            if frame.opcode in (Opcode.TEXT, Opcode.BINARY):
                self._pending.append(frame.payload)
        if self._parser.closed:
            self.state = WsState.CLOSED
            self._pending.clear()
            raise ConnectionClosed("close frame received")
        return self._pending.popleft() if self._pending else b""

    def close(self) -> None:
        """Send a close frame if still open, then close the socket."""
        with self._send_lock:
            if self.state is WsState.OPEN and self._sock is not None:
                try:
                    self._sock.send(encode_frame(Opcode.CLOSE))
                except OSError:
                    pass
            self.state = WsState.CLOSED
            if self._sock is not None:
                self._sock.close()
                self._sock = None