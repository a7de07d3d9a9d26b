"""Plot-area geometry, graticule positions and axis labels for the waveform display."""

from __future__ import annotations

from dataclasses import dataclass

from tdsscope.measurements import DecodedWaveform
from tdsscope.view import ViewTransform

MARGIN_LEFT = 60
MARGIN_BOTTOM = 30
MARGIN_TOP = 32
MARGIN_RIGHT = 24


@dataclass(frozen=True)
class PlotArea:
    """Rectangle inside the drawing surface that holds the graticule."""

    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h


def _trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _check_divisions(divisions: int) -> None:
    if divisions <= 0:
        raise ValueError(f"divisions must be positive, got {divisions}")


def plot_area(width: int, height: int) -> PlotArea:
    """Plot area inset from a surface of the given size, leaving room for labels."""
    return PlotArea(
        MARGIN_LEFT,
        MARGIN_TOP,
        width - MARGIN_LEFT - MARGIN_RIGHT,
        height - MARGIN_TOP - MARGIN_BOTTOM,
    )


def grid_x_positions(area: PlotArea, divisions: int) -> list[int]:
    """X pixel positions of the vertical grid lines, left to right."""
    _check_divisions(divisions)
    return [area.x + _trunc_div(area.w * i, divisions) for i in range(divisions + 1)]


def grid_y_positions(area: PlotArea, divisions: int) -> list[int]:
    """Y pixel positions of the horizontal grid lines, top to bottom."""
    _check_divisions(divisions)
    return [area.y + _trunc_div(area.h * i, divisions) for i in range(divisions + 1)]


def format_voltage_label(volts: float) -> str:
    """Label for a voltage grid line: millivolts below 1 V, volts otherwise."""
    if abs(volts) < 1.0:
        return f"{volts * 1000.0:.0f}mV"
    return f"{volts:.2f}V"


def format_time_label(seconds: float) -> str:
    """Label for a time grid line in ns, \u00b5s, ms or s."""
    magnitude = abs(seconds)
    if magnitude < 1e-6:
        return f"{seconds * 1e9:.0f}ns"
    if magnitude < 1e-3:
        return f"{seconds * 1e6:.1f}\u00b5s"
    if magnitude < 1.0:
        return f"{seconds * 1e3:.1f}ms"
    return f"{seconds:.2f}s"


def voltage_labels(v_center: float, volts_per_div: float, divisions: int) -> list[str]:
    """Labels for the horizontal grid lines, top to bottom; empty without a scale."""
    _check_divisions(divisions)
    if volts_per_div <= 0.0:
        return []
    half = divisions * 0.5
    return [
        format_voltage_label(v_center + (half - i) * volts_per_div)
        for i in range(divisions + 1)
    ]


def time_labels(t_center: float, sec_per_div: float, divisions: int) -> list[str]:
    """Labels for the vertical grid lines, left to right; empty without a scale."""
    _check_divisions(divisions)
    if sec_per_div <= 0.0:
        return []
    half = divisions * 0.5
    return [
        format_time_label(t_center + (i - half) * sec_per_div)
        for i in range(divisions + 1)
    ]


def trigger_line_y(view: ViewTransform, area: PlotArea, level: float) -> int | None:
    """Pixel row of the trigger level line, or None when it falls outside the plot."""
    y = area.y + view.world_to_screen_y(level)
    if y < area.y or y > area.bottom:
        return None
    return y


def waveform_points(
    wave: DecodedWaveform, view: ViewTransform, area: PlotArea
) -> list[tuple[int, int]]:
    """Screen points of the waveform polyline, offset into the plot area."""
    return [
        (
            area.x + view.world_to_screen_x(sample.time),
            area.y + view.world_to_screen_y(sample.voltage),
        )
        for sample in wave.samples
    ]