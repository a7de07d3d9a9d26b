"""Minimal incremental HTTP/1.1 request parser and response builder."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field

_HEADER_END = b"\r\n\r\n"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class HttpParseError(ValueError):
    """Raised when a request head cannot be parsed."""


class HttpMethod(enum.Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    UNKNOWN = "UNKNOWN"


def parse_method(name: str) -> HttpMethod:
    """Map a request-line method token to an HttpMethod (case sensitive)."""
    if name == HttpMethod.UNKNOWN.value:
        return HttpMethod.UNKNOWN
    try:
        return HttpMethod(name)
    except ValueError:
        return HttpMethod.UNKNOWN


@dataclass
class HttpRequest:
    method: HttpMethod = HttpMethod.UNKNOWN
    path: str = ""
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    is_websocket_upgrade: bool = False
    ws_key: str = ""

    def is_valid(self) -> bool:
        return self.method is not HttpMethod.UNKNOWN and bool(self.path)


@dataclass
class HttpResponse:
    status_code: int = 200
    status_text: str = "OK"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def set_content_type(self, content_type: str) -> None:
        self.headers["Content-Type"] = content_type

    def set_body(self, body: str | bytes, content_type: str = "text/plain") -> None:
        self.body = body.encode("utf-8") if isinstance(body, str) else bytes(body)
        self.set_content_type(content_type)
        self.headers["Content-Length"] = str(len(self.body))

    def serialize(self) -> bytes:
        """Return the response as wire bytes; headers are emitted sorted by name."""
        lines = [f"HTTP/1.1 {self.status_code} {self.status_text}\r\n"]
        lines.extend(f"{key}: {value}\r\n" for key, value in sorted(self.headers.items()))
        lines.append("\r\n")
        return "".join(lines).encode("latin-1") + self.body


def _content_length(value: str | None) -> int:
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    if not match:
        return 0
    return max(int(match.group(1)), 0)


def _parse_head(block: str) -> HttpRequest:
    lines = block.split("\r\n")
    request_line = lines[0]

    sp1 = request_line.find(" ")
    if sp1 < 0:
        raise HttpParseError("malformed request line")
    sp2 = request_line.find(" ", sp1 + 1)
    if sp2 < 0:
        raise HttpParseError("malformed request line")

    method = parse_method(request_line[:sp1])
    if method is HttpMethod.UNKNOWN:
        raise HttpParseError(f"unsupported method {request_line[:sp1]!r}")

    full_path = request_line[sp1 + 1 : sp2]
    path, sep, query = full_path.partition("?")
    if ".." in path:
        raise HttpParseError("path traversal rejected")

    request = HttpRequest(method=method, path=path, query=query if sep else "")
    for line in lines[1:]:
        key, colon, value = line.partition(":")
        if not colon:
            continue
        request.headers[key.lower()] = value.lstrip(" ")

    if request.headers.get("upgrade", "").lower() == "websocket":
        request.is_websocket_upgrade = True
        request.ws_key = request.headers.get("sec-websocket-key", "")
    return request


class HttpRequestParser:
    """Accumulates bytes until a complete request (head and body) is available."""

    def __init__(self) -> None:
        self._buf = bytearray()
        self._ready = False
        self._current = HttpRequest()

    def feed(self, data: bytes) -> bool:
        """Add data; return True once a complete request has been parsed.

        Raises HttpParseError when the request head is malformed.
        """
        if not data:
            return False
        self._buf.extend(data)

        header_end = self._buf.find(_HEADER_END)
        if header_end < 0:
            return False

        request = _parse_head(bytes(self._buf[:header_end]).decode("latin-1"))
        body_start = header_end + len(_HEADER_END)
        length = _content_length(request.headers.get("content-length"))
        if len(self._buf) < body_start + length:
            return False

        request.body = bytes(self._buf[body_start : body_start + length])
        del self._buf[: body_start + length]
        self._current = request
        self._ready = True
        return True

    def has_request(self) -> bool:
        return self._ready

    def take_request(self) -> HttpRequest:
        """Hand over the parsed request; raises LookupError if none is ready."""
        if not self._ready:
            raise LookupError("no complete request available")
        request = self._current
        self._current = HttpRequest()
        self._ready = False
        return request

    def reset(self) -> None:
        self._buf.clear()
        self._ready = False
        self._current = HttpRequest()