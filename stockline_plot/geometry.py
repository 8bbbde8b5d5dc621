from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import numpy as np

from stockline_plot.adapter import ChartAdapter
from stockline_plot.paths import Path
from stockline_plot.scales import ContentRect, CoordinateScaler


FillPolicy = Literal["none", "up", "down", "toward_zero"]
FILL_POLICIES: tuple[str, ...] = ("none", "up", "down", "toward_zero")

MIN_DRAWABLE_POINTS = 2


def fill_edge(policy: str, scaler: CoordinateScaler, top: float, bottom: float) -> float | None:
    """Y pixel the fill region closes against, or None when nothing is filled."""
    if policy == "none":
        return None
    if policy == "up":
        return float(top)
    if policy == "down":
        return float(bottom)
    if policy == "toward_zero":
        zero = scaler.y(0.0)
        return min(zero, float(bottom))
    raise ValueError(f"Unknown fill policy: {policy!r}")


@dataclass(frozen=True)
class MarkerStyle:
    last_point_enabled: bool = False
    scrub_enabled: bool = False
    marker_radius: float = 8.0
    ripple_radius: float = 16.0


@dataclass
class RenderGeometry:
    line: Path = field(default_factory=Path)
    fill: Path = field(default_factory=Path)
    baseline: Path = field(default_factory=Path)
    last_point_marker: Path = field(default_factory=Path)
    last_point_ripple: Path = field(default_factory=Path)
    scrub_point_marker: Path = field(default_factory=Path)
    scrub_point_ripple: Path = field(default_factory=Path)
    scrub_line: Path = field(default_factory=Path)
    x_points: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    y_points: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    has_data: bool = False

    def paths(self) -> dict[str, Path]:
        return {
            "line": self.line,
            "fill": self.fill,
            "baseline": self.baseline,
            "last_point_marker": self.last_point_marker,
            "last_point_ripple": self.last_point_ripple,
            "scrub_point_marker": self.scrub_point_marker,
            "scrub_point_ripple": self.scrub_point_ripple,
            "scrub_line": self.scrub_line,
        }

    def is_empty(self) -> bool:
        return all(path.is_empty() for path in self.paths().values())


class PathBuilder:
    """Owns and rebuilds every drawable path of a line chart.

    The builder is the only writer of its `RenderGeometry`; paths are reset and
    refilled in place so a host can keep references across frames.
    """

    def __init__(self, markers: MarkerStyle | None = None) -> None:
        self.markers = markers or MarkerStyle()
        self.geometry = RenderGeometry()
        self.rebuild_count = 0

    def rebuild(
        self,
        adapter: ChartAdapter | None,
        scaler: CoordinateScaler | None,
        fill_policy: str,
        *,
        content_rect: ContentRect,
        surface_width: float,
    ) -> RenderGeometry:
        self.rebuild_count += 1
        if adapter is None or scaler is None or adapter.count() < MIN_DRAWABLE_POINTS:
            self.clear()
            return self.geometry

        geo = self.geometry
        count = adapter.count()
        raw_x = np.fromiter((adapter.x(i) for i in range(count)), dtype=np.float64, count=count)
        raw_y = np.fromiter((adapter.y(i) for i in range(count)), dtype=np.float64, count=count)
        xs, ys = scaler.map_points(raw_x, raw_y)
        geo.x_points = xs
        geo.y_points = ys

        geo.line.reset()
        geo.line.add_polyline(xs, ys)

        geo.fill.reset()
        edge = fill_edge(fill_policy, scaler, content_rect.top, content_rect.bottom)
        if edge is not None:
            geo.fill.add_path(geo.line)
            geo.fill.line_to(float(xs[-1]), edge)
            geo.fill.line_to(float(xs[0]), edge)
            geo.fill.close()

        geo.baseline.reset()
        if adapter.has_baseline():
            scaled = scaler.y(adapter.baseline())
            geo.baseline.move_to(0.0, scaled)
            geo.baseline.line_to(float(surface_width), scaled)

        geo.has_data = True
        self.clear_scrub()
        self.update_pointer_location(None)
        return geo

    def update_pointer_location(self, position: tuple[float, float] | None) -> None:
        """Move the markers to `position`, or back to the final sample when None."""
        geo = self.geometry
        if not geo.has_data:
            return

        if position is None:
            x, y = float(geo.x_points[-1]), float(geo.y_points[-1])
        else:
            x, y = position

        if self.markers.last_point_enabled:
            _set_marker(geo.last_point_marker, geo.last_point_ripple, x, y, self.markers)

        if self.markers.scrub_enabled:
            if position is None:
                geo.scrub_point_marker.reset()
                geo.scrub_point_ripple.reset()
            else:
                _set_marker(geo.scrub_point_marker, geo.scrub_point_ripple, x, y, self.markers)

    def set_scrub_line(self, x: float, content_rect: ContentRect, line_width: float) -> float:
        """Place the vertical scrub indicator, clamped inside the content rectangle."""
        bounded = clamp_scrub_x(x, content_rect, line_width)
        line = self.geometry.scrub_line
        line.reset()
        line.move_to(bounded, content_rect.top)
        line.line_to(bounded, content_rect.bottom)
        return bounded

    def clear_scrub(self) -> None:
        geo = self.geometry
        geo.scrub_line.reset()
        geo.scrub_point_marker.reset()
        geo.scrub_point_ripple.reset()

    def clear(self) -> None:
        geo = self.geometry
        for path in geo.paths().values():
            path.reset()
        geo.x_points = np.zeros(0, dtype=np.float64)
        geo.y_points = np.zeros(0, dtype=np.float64)
        geo.has_data = False


def clamp_scrub_x(x: float, content_rect: ContentRect, line_width: float) -> float:
    offset = line_width / 2
    left_bound = content_rect.left + offset
    if x < left_bound:
        return left_bound
    right_bound = content_rect.right - offset
    if x > right_bound:
        return right_bound
    return x


def _set_marker(marker: Path, ripple: Path, x: float, y: float, style: MarkerStyle) -> None:
    marker.reset()
    ripple.reset()
    ripple.add_circle(x, y, style.ripple_radius)
    marker.add_circle(x, y, style.marker_radius)
