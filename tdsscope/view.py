"""View transform between world (seconds, volts) and screen pixels."""

from __future__ import annotations

from dataclasses import dataclass, field

ZOOM_STEP = 1.2

Color = tuple[int, int, int]


@dataclass
class ViewTransform:
    x_center: float = 0.0
    y_center: float = 0.0
    x_scale: float = 1.0
    y_scale: float = 100.0
    screen_w: int = 800
    screen_h: int = 600

    def world_to_screen_x(self, t: float) -> int:
        return int((t - self.x_center) * self.x_scale + self.screen_w * 0.5)

    def world_to_screen_y(self, v: float) -> int:
        return int(self.screen_h * 0.5 - (v - self.y_center) * self.y_scale)

    def world_to_screen(self, t: float, v: float) -> tuple[int, int]:
        return self.world_to_screen_x(t), self.world_to_screen_y(v)

    def screen_to_world_x(self, px: int) -> float:
        return self.x_center + (px - self.screen_w * 0.5) / self.x_scale

    def screen_to_world_y(self, py: int) -> float:
        return self.y_center + (self.screen_h * 0.5 - py) / self.y_scale

    def set_from_scope(
        self,
        t_center: float,
        sec_per_div: float,
        volts_per_div: float,
        h_div: int,
        v_div: int,
        width: int,
        height: int,
    ) -> None:
        """Fit the view to the scope's graticule, with 0 V at the vertical centre."""
        self.screen_w = width
        self.screen_h = height
        self.x_center = t_center
        self.y_center = 0.0
        t_span = sec_per_div * h_div
        v_span = volts_per_div * v_div
        if t_span > 0:
            self.x_scale = width / t_span
        if v_span > 0:
            self.y_scale = height / v_span

    def fit_to_waveform(
        self,
        t_min: float,
        t_max: float,
        v_min: float,
        v_max: float,
        width: int,
        height: int,
    ) -> None:
        """Fit the view to a data range, using 90% of the width and 80% of the height."""
        self.screen_w = width
        self.screen_h = height
        self.x_center = (t_min + t_max) * 0.5
        self.y_center = (v_min + v_max) * 0.5
        t_span = t_max - t_min
        v_span = v_max - v_min
        if t_span > 0:
            self.x_scale = width * 0.9 / t_span
        if v_span > 0:
            self.y_scale = height * 0.8 / v_span

    def zoom(self, wheel_delta: int) -> None:
        """Zoom the time axis in for a positive wheel delta, out otherwise."""
        factor = ZOOM_STEP if wheel_delta > 0 else 1.0 / ZOOM_STEP
        self.x_scale *= factor

    def pan(self, start_x_center: float, start_y_center: float, dx: int, dy: int) -> None:
        """Move the view so content follows a drag of (dx, dy) pixels from the start centre."""
        if self.x_scale > 0 and self.y_scale > 0:
            self.x_center = start_x_center - dx / self.x_scale
            self.y_center = start_y_center + dy / self.y_scale


@dataclass
class RenderContext:
    view: ViewTransform = field(default_factory=ViewTransform)

    bg_color: Color = (0, 0, 0)
    grid_color: Color = (40, 80, 40)
    wave_color: Color = (0, 255, 0)
    trig_color: Color = (255, 255, 0)
    label_color: Color = (200, 200, 200)
    border_color: Color = (80, 100, 80)

    h_divisions: int = 10
    v_divisions: int = 8

    sec_per_div: float = 0.0
    volts_per_div: float = 0.0
    trigger_level: float = 0.0

    fps: float = 0.0
    acq_rate: int = 0

    cursors_enabled: bool = False
    cursor1_time: float = 0.0
    cursor2_time: float = 0.0
    cursor1_volt: float = 0.0
    cursor2_volt: float = 0.0