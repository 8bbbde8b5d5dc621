from __future__ import annotations

import logging
from typing import Callable

import numpy as np

from stockline_plot.adapter import ChartAdapter
from stockline_plot.axis import (
    PRICE_LABEL_TEMPLATE,
    ChartRange,
    PriceAxisGeometry,
    build_price_axis,
    date_format_for_range,
)
from stockline_plot.config import DEFAULT_CONFIG, ChartConfig
from stockline_plot.geometry import (
    FILL_POLICIES,
    MIN_DRAWABLE_POINTS,
    MarkerStyle,
    PathBuilder,
    RenderGeometry,
)
from stockline_plot.nearest import nearest_index
from stockline_plot.raster.draw_text import text_size
from stockline_plot.raster.layers import DirtyState
from stockline_plot.raster.render import render_chart
from stockline_plot.samples import Sample
from stockline_plot.scales import ContentRect, CoordinateScaler


LOGGER = logging.getLogger(__name__)

ScrubListener = Callable[[Sample | None], None]

DATA_SPACING_DP = 4
LAST_POINT_MARKER_SPACING_DP = 8


class LineChart:
    """Scrubbable line chart over a `ChartAdapter`.

    The chart observes its adapter: `on_changed` rescales and rebuilds every path,
    `on_invalidated` drops all geometry. Each rebuild requests exactly one redraw.
    """

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        *,
        config: ChartConfig | None = None,
        padding: tuple[int, int, int, int] = (0, 0, 0, 0),
        density: float = 1.0,
        on_invalidate: Callable[[], None] | None = None,
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError("width/height must be >= 0")
        if density <= 0:
            raise ValueError("density must be > 0")
        self.config = config or DEFAULT_CONFIG
        self.width = int(width)
        self.height = int(height)
        self.density = float(density)
        self._padding = padding
        self._fill_policy = self.config.fill_policy
        self._chart_range = ChartRange.YTD
        self._on_invalidate = on_invalidate
        self.adapter: ChartAdapter | None = None
        self.scaler: CoordinateScaler | None = None
        self.scrub_listener: ScrubListener | None = None
        self.selected_index: int | None = None
        self.dirty = DirtyState()
        self.price_axis = PriceAxisGeometry()
        self._builder = PathBuilder(
            MarkerStyle(
                last_point_enabled=self.config.last_point_marker_enabled,
                scrub_enabled=self.config.scrub_enabled,
                marker_radius=self.config.marker_radius,
                ripple_radius=self.config.ripple_radius,
            )
        )
        if self.config.has_price_axis:
            self._price_label_size = text_size(
                PRICE_LABEL_TEMPLATE, font_size_px=self.config.price_axis_font_size_px * self.density
            )
        else:
            self._price_label_size = (0, 0)

    @property
    def geometry(self) -> RenderGeometry:
        return self._builder.geometry

    @property
    def rebuild_count(self) -> int:
        return self._builder.rebuild_count

    @property
    def fill_policy(self) -> str:
        return self._fill_policy

    @property
    def chart_range(self) -> int:
        return self._chart_range

    @property
    def date_format(self) -> str:
        return date_format_for_range(self._chart_range)

    def spacing(self, dp: int) -> int:
        return int(dp * self.density)

    def data_spacing(self) -> int:
        text_involved = self.config.has_price_axis or self.config.has_date_axis
        return self.spacing(DATA_SPACING_DP) if text_involved else 0

    def padding_end(self) -> int:
        extra = self._price_label_size[0] + self.data_spacing() if self.config.has_price_axis else 0
        return self._padding[2] + extra

    def content_rect(self) -> ContentRect:
        left, top, _, bottom = self._padding
        marker_spacing = self.spacing(LAST_POINT_MARKER_SPACING_DP) if self.config.last_point_marker_enabled else 0
        return ContentRect(
            left=float(left),
            top=float(top + marker_spacing),
            right=float(self.width - (self.padding_end() + marker_spacing)),
            bottom=float(self.height - bottom),
        )

    def set_adapter(self, adapter: ChartAdapter | None) -> None:
        if self.adapter is not None:
            self.adapter.unregister_observer(self)
        self.adapter = adapter
        if self.adapter is not None:
            self.adapter.register_observer(self)
        self.populate()

    def set_size(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("width/height must be >= 0")
        self.width = int(width)
        self.height = int(height)
        self.populate()

    def set_padding(self, left: int, top: int, right: int, bottom: int) -> None:
        self._padding = (left, top, right, bottom)
        self.populate()

    def set_fill_policy(self, policy: str) -> None:
        if policy not in FILL_POLICIES:
            raise ValueError(f"Unknown fill policy: {policy!r}")
        if policy != self._fill_policy:
            self._fill_policy = policy
            self.populate()

    def set_chart_range(self, chart_range: int) -> None:
        date_format_for_range(chart_range)
        self._chart_range = chart_range
        self.invalidate("chart_range")

    def set_scrub_listener(self, listener: ScrubListener | None) -> None:
        self.scrub_listener = listener

    def on_changed(self) -> None:
        self.populate()

    def on_invalidated(self) -> None:
        self.clear_data()

    def populate(self) -> None:
        if self.adapter is None:
            self.clear_data()
            return
        if self.width == 0 or self.height == 0:
            return

        rect = self.content_rect()
        if self.adapter.count() < MIN_DRAWABLE_POINTS:
            self.scaler = None
            self.price_axis.clear()
        else:
            self.scaler = CoordinateScaler.from_adapter(
                self.adapter,
                rect,
                self.config.line_width,
                filled=self._fill_policy != "none",
            )
        self._builder.rebuild(
            self.adapter,
            self.scaler,
            self._fill_policy,
            content_rect=rect,
            surface_width=self.width,
        )
        if self.scaler is not None and self.config.has_price_axis:
            build_price_axis(
                self.price_axis,
                self.adapter,
                self.scaler,
                divider_x=float(self.width - self.padding_end()),
                surface_height=float(self.height),
                spacing=float(self.data_spacing()),
                label_height=float(self._price_label_size[1]),
            )
        self.selected_index = None
        self.invalidate("populate")

    def clear_data(self) -> None:
        self.scaler = None
        self.selected_index = None
        self._builder.clear()
        self.price_axis.clear()
        self.invalidate("clear")

    def invalidate(self, reason: str) -> None:
        self.dirty.mark(reason)
        if self._on_invalidate is not None:
            self._on_invalidate()

    def scaled_x(self, x: float) -> float:
        if self.scaler is None:
            LOGGER.warning("scaled_x() - no scale available yet.")
            return x
        return self.scaler.x(x)

    def scaled_y(self, y: float) -> float:
        if self.scaler is None:
            LOGGER.warning("scaled_y() - no scale available yet.")
            return y
        return self.scaler.y(y)

    def on_scrubbed(self, x: float, y: float) -> None:
        if self.adapter is None or self.adapter.count() == 0:
            return
        geo = self._builder.geometry
        if not geo.has_data:
            return

        bounded = self._builder.set_scrub_line(x, self.content_rect(), self.config.effective_scrub_line_width)
        index = nearest_index(geo.x_points, bounded)
        self.selected_index = index
        if self.scrub_listener is not None:
            self.scrub_listener(self.adapter.item(index))
        self._builder.update_pointer_location((float(geo.x_points[index]), float(geo.y_points[index])))
        self.invalidate("scrub")

    def on_scrub_ended(self) -> None:
        self.selected_index = None
        self._builder.clear_scrub()
        if self.scrub_listener is not None:
            self.scrub_listener(None)
        self._builder.update_pointer_location(None)
        self.invalidate("scrub_ended")

    def render(self) -> np.ndarray:
        if self.width == 0 or self.height == 0:
            raise ValueError("chart has no size to render")
        frame = render_chart(
            self.width,
            self.height,
            self.geometry,
            self.config,
            price_axis=self.price_axis,
            density=self.density,
        )
        self.dirty.clear()
        return frame
