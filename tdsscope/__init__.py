"""Waveform measurements, plot layout, GPIB helpers and HTTP/WebSocket building blocks for a TDS 520A viewer."""

__version__ = "1.0.0"

__all__ = [
    "encoding",
    "gpib",
    "http",
    "layout",
    "measurements",
    "view",
    "websocket",
]