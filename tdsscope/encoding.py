"""Base64 and SHA-1 helpers used by the WebSocket handshake."""

from __future__ import annotations

import base64
import hashlib

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_REVERSE = {ch: index for index, ch in enumerate(_ALPHABET)}


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def b64encode(data: bytes | bytearray | memoryview | str) -> str:
    """Encode bytes (or UTF-8 text) as padded standard Base64."""
    return base64.b64encode(_as_bytes(data)).decode("ascii")


def b64decode(text: str | bytes) -> bytes:
    """Decode Base64 leniently.

    Decoding stops at the first '=' and characters outside the alphabet are
    skipped. Trailing bits that do not complete a byte are dropped.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")

    out = bytearray()
    accumulator = 0
    bits = 0
    for ch in text:
        if ch == "=":
            break
        value = _REVERSE.get(ch)
        if value is None:
            continue
        accumulator = ((accumulator << 6) | value) & 0xFFFFFF
        bits += 6
        if bits >= 8:
            bits -= 8
            out.append((accumulator >> bits) & 0xFF)
    return bytes(out)


def sha1_digest(data: bytes | bytearray | memoryview | str) -> bytes:
    """Return the 20-byte SHA-1 digest of bytes (or UTF-8 text)."""
    return hashlib.sha1(_as_bytes(data)).digest()