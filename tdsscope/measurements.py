"""Waveform data types, measurements and control-panel formatting helpers."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass, field

PLACEHOLDER = "---"

# Acquisition rate steps in acquisitions per second; 0 means unlimited.
RATE_STEPS: tuple[int, ...] = (1, 2, 5, 10, 20, 50, 100, 200, 0)
_FINITE_STEPS = RATE_STEPS[:-1]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ScopeChannel(enum.IntEnum):
    CH1 = 1
    CH2 = 2
    CH3 = 3
    CH4 = 4


@dataclass(frozen=True)
class Sample:
    time: float
    voltage: float


@dataclass
class DecodedWaveform:
    samples: list[Sample] = field(default_factory=list)
    y_min: float = 0.0
    y_max: float = 0.0
    x_min: float = 0.0
    x_max: float = 0.0
    volts_per_div: float = 0.0
    sec_per_div: float = 0.0
    sequence_number: int = 0
    channel: ScopeChannel = ScopeChannel.CH1


def format_timediv(seconds: float) -> str:
    """Format a horizontal scale in seconds per division."""
    if seconds <= 0.0:
        return PLACEHOLDER
    if seconds < 1e-6:
        return f"{seconds * 1e9:.1f} ns/div"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.2f} \u00b5s/div"
    if seconds < 1.0:
        return f"{seconds * 1e3:.2f} ms/div"
    return f"{seconds:.2f} s/div"


def format_voltdiv(volts: float) -> str:
    """Format a vertical scale in volts per division."""
    if volts <= 0.0:
        return PLACEHOLDER
    if volts < 1.0:
        return f"{volts * 1000.0:.1f} mV/div"
    return f"{volts:.2f} V/div"


def format_frequency(freq: float) -> str:
    """Format a frequency in Hz, kHz or MHz; non-positive values show a placeholder."""
    if freq <= 0.0:
        return PLACEHOLDER
    if freq >= 1e6:
        return f"{freq / 1e6:.3f} MHz"
    if freq >= 1e3:
        return f"{freq / 1e3:.3f} kHz"
    return f"{freq:.1f} Hz"


def estimate_frequency(wave: DecodedWaveform) -> float:
    """Estimate frequency from positive-going zero crossings; 0.0 when it cannot."""
    samples = wave.samples
    if len(samples) < 4:
        return 0.0
    crossings = sum(
        1
        for prev, cur in zip(samples, samples[1:])
        if prev.voltage <= 0.0 and cur.voltage > 0.0
    )
    if crossings < 2:
        return 0.0
    total_time = samples[-1].time - samples[0].time
    if total_time <= 0.0:
        return 0.0
    return crossings / total_time


def rms(wave: DecodedWaveform) -> float:
    """Root-mean-square voltage of the waveform; raises ValueError when empty."""
    if not wave.samples:
        raise ValueError("waveform has no samples")
    total = math.fsum(s.voltage * s.voltage for s in wave.samples)
    return math.sqrt(total / len(wave.samples))


def next_rate_up(current: int) -> int:
    """Next higher acquisition rate step; from unlimited (0) it wraps to the lowest."""
    for step in _FINITE_STEPS:
        if step > current or current == 0:
            return step
    return 0


def next_rate_down(current: int) -> int:
    """Next lower acquisition rate step; from unlimited (0) it goes to the highest."""
    if current == 0:
        return _FINITE_STEPS[-1]
    for step in reversed(_FINITE_STEPS):
        if step < current:
            return step
    return _FINITE_STEPS[0]


def parse_rate(text: str) -> int:
    """Parse a rate typed by the user: leading integer, negative or invalid gives 0."""
    match = _LEADING_INT.match(text)
    if not match:
        return 0
    return max(int(match.group(1)), 0)