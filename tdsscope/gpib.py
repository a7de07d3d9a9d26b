"""GPIB (NI-488.2) data types, error decoding and IEEE 488.2 block parsing."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

# ibsta status bit signalling that the last call failed.
ERR = 0x8000

FIRST_ADDR = 1
LAST_ADDR = 30

_LEADING_LONG = re.compile(rb"\s*([+-]?\d+)")

_ERROR_TEXT: dict[int, str] = {
    0: "System error (EDVR)",
    1: "Not CIC (ECIC)",
    2: "No Listeners (ENOL)",
    3: "Addressing error (EADR)",
    4: "Invalid argument (EARG)",
    5: "Not System Controller (ESAC)",
    6: "I/O timeout (EABO)",
    7: "Non-existent board (ENEB)",
    8: "DMA error (EDMA)",
    10: "I/O in progress (EOIP)",
    11: "No capability (ECAP)",
    12: "File system error (EFSO)",
    14: "Bus error (EBUS)",
    15: "Status byte lost (ESTB)",
    16: "SRQ stuck ON (ESRQ)",
    20: "Table problem (ETAB)",
}


class Timeout(enum.IntEnum):
    """NI-488.2 timeout codes."""

    TNONE = 0
    T10us = 1
    T30us = 2
    T100us = 3
    T300us = 4
    T1ms = 5
    T3ms = 6
    T10ms = 7
    T30ms = 8
    T100ms = 9
    T300ms = 10
    T1s = 11
    T3s = 12
    T10s = 13
    T30s = 14
    T100s = 15
    T300s = 16
    T1000s = 17


def error_code_to_string(code: int) -> str:
    """Describe an iberr code."""
    return _ERROR_TEXT.get(code, f"Unknown GPIB error ({code})")


class GpibError(Exception):
    """A failed GPIB operation, carrying the driver status at the time."""

    def __init__(self, message: str, ibsta: int = 0, iberr: int = 0, ibcntl: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.ibsta = ibsta
        self.iberr = iberr
        self.ibcntl = ibcntl

    @classmethod
    def from_status(cls, context: str, ibsta: int, iberr: int, ibcntl: int = 0) -> GpibError:
        """Build an error from driver status words, prefixed with the failing call."""
        return cls(f"{context}: {error_code_to_string(iberr)}", ibsta, iberr, ibcntl)

    @property
    def is_error(self) -> bool:
        return bool(self.ibsta & ERR)


@dataclass
class GpibDeviceInfo:
    board_index: int = 0
    primary_addr: int = 1
    secondary_addr: int = 0
    send_eoi: int = 1
    eot_mode: int = 0
    eos_byte: int = 0x0A
    timeout_code: Timeout = Timeout.T3s

    @property
    def eos_config(self) -> int:
        """EOS configuration word as passed to ibdev."""
        return (self.eot_mode << 8) | self.eos_byte


@dataclass(frozen=True)
class FoundDevice:
    board_index: int
    primary_addr: int
    idn: str


def parse_binary_block(data: bytes) -> bytes:
    """Extract the payload of an IEEE 488.2 definite-length block ('#<n><len><data>').

    The payload is truncated to what was actually received. Raises GpibError
    when the header is malformed or declares no data.
    """
    data = bytes(data)
    if len(data) < 2 or data[0] != ord("#"):
        raise GpibError("Binary block does not start with '#'")

    n_digits = data[1] - ord("0")
    if n_digits <= 0 or n_digits > 9 or len(data) < 2 + n_digits:
        raise GpibError("Invalid binary block digit count")

    match = _LEADING_LONG.match(data[2 : 2 + n_digits])
    data_len = int(match.group(1)) if match else 0
    if data_len <= 0:
        raise GpibError("Binary block data length is zero")

    start = 2 + n_digits
    return data[start : start + data_len]


def is_tektronix_idn(idn: str) -> bool:
    """True when an *IDN? response looks like a Tektronix oscilloscope."""
    upper = idn.upper()
    return "TEKTRONIX" in upper or "TDS" in upper


def scan_addresses(start_addr: int = FIRST_ADDR) -> range:
    """Primary addresses probed during a scan; out-of-range starts fall back to 1."""
    first = start_addr if FIRST_ADDR <= start_addr <= LAST_ADDR else FIRST_ADDR
    return range(first, LAST_ADDR + 1)