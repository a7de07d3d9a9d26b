import socket

import pytest

from tdsscope.http import HttpMethod, HttpRequest
from tdsscope.websocket import (
    ConnectionClosed,
    Frame,
    FrameParser,
    Opcode,
    WebSocketConnection,
    WebSocketError,
    WsState,
    accept_key,
    encode_frame,
)


def _masked_frame(opcode, payload, mask=b"\x01\x02\x03\x04"):
    assert len(payload) < 126
    body = bytes(b ^ mask[i % 4] for i, b in enumerate(payload))
    return bytes([0x80 | opcode, 0x80 | len(payload)]) + mask + body


def _upgrade_request(key="dGhlIHNhbXBsZSBub25jZQ=="):
    return HttpRequest(
        method=HttpMethod.GET, path="/ws", is_websocket_upgrade=True, ws_key=key
    )


def _recv_exactly(sock, n):
    data = b""
    while len(data) < n:
        chunk = sock.recv(n - len(data))
        assert chunk
        data += chunk
    return data


@pytest.fixture
def pair():
    server, client = socket.socketpair()
    client.settimeout(2.0)
    yield server, client
    client.close()
    server.close()


def test_accept_key_rfc_example():
    assert accept_key("dGhlIHNhbXBsZSBub25jZQ==") == "s3pPLMBiTxaQ9kYGzzhZRbK+xOo="


def test_encode_frame_short():
    frame = encode_frame(Opcode.TEXT, b"hi")
    assert frame == b"\x81\x02hi"


def test_encode_frame_extended_lengths():
    medium = encode_frame(Opcode.BINARY, b"x" * 126)
    assert medium[:2] == b"\x82\x7e"
    assert int.from_bytes(medium[2:4], "big") == 126
    assert len(medium) == 4 + 126

    large = encode_frame(Opcode.BINARY, b"y" * 65536)
    assert large[1] == 127
    assert int.from_bytes(large[2:10], "big") == 65536
    assert len(large) == 10 + 65536


def test_parser_round_trip_unmasked():
    parser = FrameParser()
    frames = parser.feed(encode_frame(Opcode.TEXT, "hello") + encode_frame(Opcode.BINARY, b"\x00\x01"))
    assert frames == [Frame(Opcode.TEXT, b"hello"), Frame(Opcode.BINARY, b"\x00\x01")]


def test_parser_unmasks_and_handles_partial_data():
    parser = FrameParser()
    raw = _masked_frame(Opcode.TEXT, b'{"cmd":"run"}')
    assert parser.feed(raw[:5]) == []
    assert parser.feed(raw[5:]) == [Frame(Opcode.TEXT, b'{"cmd":"run"}')]


def test_parser_extended_length_round_trip():
    payload = bytes(range(256)) * 3
    parser = FrameParser()
    assert parser.feed(encode_frame(Opcode.BINARY, payload)) == [Frame(Opcode.BINARY, payload)]


def test_parser_stops_after_close():
    parser = FrameParser()
    frames = parser.feed(encode_frame(Opcode.CLOSE) + encode_frame(Opcode.TEXT, "late"))
    assert frames == [Frame(Opcode.CLOSE, b"")]
    assert parser.closed is True


def test_upgrade_sends_switching_protocols(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    assert conn.state is WsState.OPEN
    reply = client.recv(4096).decode("latin-1")
    assert reply.startswith("HTTP/1.1 101 Switching Protocols\r\n")
    assert "Sec-WebSocket-Accept: s3pPLMBiTxaQ9kYGzzhZRbK+xOo=\r\n" in reply
    assert reply.endswith("\r\n\r\n")


def test_upgrade_rejects_plain_request(pair):
    server, _ = pair
    conn = WebSocketConnection(server)
    with pytest.raises(WebSocketError):
        conn.upgrade(HttpRequest(method=HttpMethod.GET, path="/"))
    assert conn.state is WsState.HANDSHAKE


def test_send_before_upgrade_raises(pair):
    server, _ = pair
    conn = WebSocketConnection(server)
    with pytest.raises(ConnectionClosed):
        conn.send_text("nope")


def test_send_text_and_binary_frames(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    client.recv(4096)
    conn.send_text("abc")
    conn.send_binary(b"\x01\x02")
    data = _recv_exactly(client, 5 + 4)
    assert FrameParser().feed(data) == [Frame(Opcode.TEXT, b"abc"), Frame(Opcode.BINARY, b"\x01\x02")]


def test_receive_masked_client_frames(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    client.recv(4096)
    client.sendall(_masked_frame(Opcode.TEXT, b"one") + _masked_frame(Opcode.TEXT, b"two"))
    assert conn.receive() == b"one"
    assert conn.receive() == b"two"


def test_receive_timeout_returns_empty(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    client.recv(4096)
    server.settimeout(0.05)
    assert conn.receive() == b""
    assert conn.state is WsState.OPEN


def test_receive_close_frame_closes(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    client.recv(4096)
    client.sendall(_masked_frame(Opcode.CLOSE, b""))
    with pytest.raises(ConnectionClosed):
        conn.receive()
    assert conn.state is WsState.CLOSED


def test_receive_peer_shutdown_closes(pair):
    server, client = pair
    conn = WebSocketConnection(server)
    conn.upgrade(_upgrade_request())
    client.recv(4096)
    client.shutdown(socket.SHUT_WR)
    with pytest.raises(ConnectionClosed):
        conn.receive()
    assert conn.state is WsState.CLOSED


def test_close_sends_close_frame(pair):
    server, client = pair
    with WebSocketConnection(server) as conn:
        conn.upgrade(_upgrade_request())
        client.recv(4096)
    assert conn.state is WsState.CLOSED
    assert conn.socket is None
    assert _recv_exactly(client, 2) == b"\x88\x00"