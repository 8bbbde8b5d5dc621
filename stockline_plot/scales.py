from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from stockline_plot.adapter import ChartAdapter


@dataclass(frozen=True)
class DataLimits:
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin


@dataclass(frozen=True)
class ContentRect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top


def compute_limits(x: np.ndarray, y: np.ndarray, baseline: float | None = None) -> DataLimits:
    xmin = float(np.min(x))
    xmax = float(np.max(x))
    ymin = float(np.min(y))
    ymax = float(np.max(y))
    if baseline is not None:
        ymin = min(ymin, float(baseline))
        ymax = max(ymax, float(baseline))
    return DataLimits(xmin=xmin, xmax=xmax, ymin=ymin, ymax=ymax)


def inset_degenerate(limits: DataLimits) -> DataLimits:
    # A flat series has no extent; widen by one unit each side to centre it.
    dx = 1.0 if limits.width == 0 else 0.0
    dy = 1.0 if limits.height == 0 else 0.0
    if dx == 0.0 and dy == 0.0:
        return limits
    return DataLimits(
        xmin=limits.xmin - dx,
        xmax=limits.xmax + dx,
        ymin=limits.ymin - dy,
        ymax=limits.ymax + dy,
    )


@dataclass(frozen=True)
class CoordinateScaler:
    """Affine map from data space into a content rectangle, Y flipped for drawing."""

    width: float
    height: float
    size: int
    x_scale: float
    y_scale: float
    x_translation: float
    y_translation: float
    left_padding: float
    top_padding: float
    right_padding: float

    @classmethod
    def from_adapter(
        cls,
        adapter: ChartAdapter,
        rect: ContentRect,
        stroke_width: float,
        filled: bool,
    ) -> CoordinateScaler:
        return cls.from_limits(adapter.data_bounds(), rect, stroke_width, filled, size=adapter.count())

    @classmethod
    def from_limits(
        cls,
        limits: DataLimits,
        rect: ContentRect,
        stroke_width: float,
        filled: bool,
        *,
        size: int = 0,
    ) -> CoordinateScaler:
        # An open stroke bleeds half its width past each edge of the rectangle.
        offset = 0.0 if filled else float(stroke_width)
        width = rect.width - offset
        height = rect.height - offset

        bounds = inset_degenerate(limits)
        x_scale = width / (bounds.xmax - bounds.xmin)
        x_translation = rect.left - bounds.xmin * x_scale + offset / 2
        y_scale = height / (bounds.ymax - bounds.ymin)
        y_translation = bounds.ymin * y_scale + rect.top + offset / 2
        return cls(
            width=width,
            height=height,
            size=size,
            x_scale=x_scale,
            y_scale=y_scale,
            x_translation=x_translation,
            y_translation=y_translation,
            left_padding=rect.left,
            top_padding=rect.top,
            right_padding=rect.right,
        )

    def x(self, raw_x: float) -> float:
        return raw_x * self.x_scale + self.x_translation

    def y(self, raw_y: float) -> float:
        return self.height - raw_y * self.y_scale + self.y_translation

    def map_points(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        return xs * self.x_scale + self.x_translation, self.height - ys * self.y_scale + self.y_translation


def price_levels(min_value: float, max_value: float, buckets: int = 6) -> np.ndarray:
    """Interior price-axis levels between `min_value` and `max_value`.

    The first and last buckets are left unlabelled so labels never touch the
    chart edges.
    """
    if buckets < 3:
        raise ValueError("buckets must be >= 3")
    bucket = (max_value - min_value) / buckets
    steps = np.arange(2, buckets, dtype=np.float64)
    return min_value + steps * bucket


def format_price(value: float) -> str:
    if not np.isfinite(value):
        return str(value)
    out = f"{value:,.2f}"
    if out == "-0.00":
        out = "0.00"
    return out
