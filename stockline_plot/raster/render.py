from __future__ import annotations

import numpy as np

from stockline_plot.axis import PriceAxisGeometry
from stockline_plot.config import ChartConfig, with_opacity
from stockline_plot.geometry import RenderGeometry
from stockline_plot.paths import Path, round_corners
from stockline_plot.raster.canvas import RGBA, blend_mask, new_canvas, row_mask
from stockline_plot.raster.draw_fill import fill_polygon_gradient
from stockline_plot.raster.draw_lines import draw_polyline
from stockline_plot.raster.draw_markers import draw_disc
from stockline_plot.raster.draw_text import draw_text


FILL_OPACITY = 0.6
RIPPLE_OPACITY = 0.4
SCRUB_LINE_OPACITY = 0.8
GRID_OPACITY = 0.4


def render_chart(
    width: int,
    height: int,
    geometry: RenderGeometry,
    config: ChartConfig,
    *,
    price_axis: PriceAxisGeometry | None = None,
    density: float = 1.0,
) -> np.ndarray:
    """Rasterize chart geometry into an RGBA frame of shape (height, width, 4)."""
    frame = new_canvas(width, height, config.background_color)

    if price_axis is not None and config.has_price_axis:
        _draw_price_axis(frame, price_axis, config, config.price_axis_font_size_px * density)

    _stroke(frame, geometry.baseline, config.baseline_color, 1)

    for points, closed in geometry.fill.subpaths():
        if closed:
            fill_polygon_gradient(
                frame,
                points,
                with_opacity(config.fill_top_color, FILL_OPACITY),
                with_opacity(config.fill_bottom_color, FILL_OPACITY),
            )

    line_width = max(1, int(round(config.line_width)))
    for points, _ in geometry.line.subpaths():
        smooth = round_corners(points, config.corner_radius)
        draw_polyline(frame, smooth[:, 0], smooth[:, 1], config.line_color, width=line_width)

    if config.last_point_marker_enabled:
        color = config.effective_last_point_marker_color
        _fill_circles(frame, geometry.last_point_ripple, with_opacity(color, RIPPLE_OPACITY))
        _fill_circles(frame, geometry.last_point_marker, color)

    if config.scrub_enabled:
        color = config.effective_scrub_point_marker_color
        _fill_circles(frame, geometry.scrub_point_ripple, with_opacity(color, RIPPLE_OPACITY))
        _fill_circles(frame, geometry.scrub_point_marker, color)

    scrub_width = max(1, int(round(config.effective_scrub_line_width)))
    _stroke(frame, geometry.scrub_line, with_opacity(config.scrub_line_color, SCRUB_LINE_OPACITY), scrub_width)
    return frame


def _stroke(frame: np.ndarray, path: Path, color: RGBA, width: int) -> None:
    for points, closed in path.subpaths():
        if closed:
            points = np.vstack([points, points[:1]])
        draw_polyline(frame, points[:, 0], points[:, 1], color, width=width)


def _fill_circles(frame: np.ndarray, path: Path, color: RGBA) -> None:
    for cx, cy, radius in path.circles():
        draw_disc(frame, cx, cy, radius, color)


def _draw_price_axis(frame: np.ndarray, axis: PriceAxisGeometry, config: ChartConfig, font_size_px: float) -> None:
    divider = config.price_axis_divider_color
    grid = with_opacity(divider, GRID_OPACITY)
    for points, _ in axis.grid.subpaths():
        blend_mask(frame, row_mask(frame.shape[:2], int(points[0, 0]), int(points[-1, 0]), int(round(points[0, 1]))), grid)
    _stroke(frame, axis.divider, divider, 1)
    _stroke(frame, axis.ticks, divider, 1)
    for label in axis.labels:
        draw_text(
            frame,
            int(round(label.x)),
            int(round(label.y)),
            label.text,
            config.price_axis_text_color,
            font_size_px=font_size_px,
        )
