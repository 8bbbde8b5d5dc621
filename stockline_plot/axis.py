from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from stockline_plot.adapter import ChartAdapter
from stockline_plot.paths import Path
from stockline_plot.scales import CoordinateScaler, format_price, price_levels


class ChartRange:
    YTD = -1
    ONE_DAY = 0
    ONE_MONTH = 1
    THREE_MONTHS = 3
    SIX_MONTHS = 6
    ONE_YEAR = 12
    THREE_YEARS = 36
    FIVE_YEARS = 60


CHART_RANGES: frozenset[int] = frozenset(
    {
        ChartRange.YTD,
        ChartRange.ONE_DAY,
        ChartRange.ONE_MONTH,
        ChartRange.THREE_MONTHS,
        ChartRange.SIX_MONTHS,
        ChartRange.ONE_YEAR,
        ChartRange.THREE_YEARS,
        ChartRange.FIVE_YEARS,
    }
)

PRICE_LABEL_TEMPLATE = "##,##0.00"


def date_format_for_range(chart_range: int) -> str:
    if chart_range in (
        ChartRange.ONE_MONTH,
        ChartRange.THREE_MONTHS,
        ChartRange.SIX_MONTHS,
        ChartRange.ONE_YEAR,
    ):
        return "%b-%Y"
    if chart_range in (ChartRange.THREE_YEARS, ChartRange.FIVE_YEARS):
        return "%Y"
    if chart_range == ChartRange.YTD:
        return "%b %d"
    if chart_range == ChartRange.ONE_DAY:
        return "%I:%M %p"
    raise ValueError(f"Unknown chart range: {chart_range}")


@dataclass(frozen=True)
class PriceLabel:
    x: float
    y: float
    text: str


@dataclass
class PriceAxisGeometry:
    divider: Path = field(default_factory=Path)
    grid: Path = field(default_factory=Path)
    ticks: Path = field(default_factory=Path)
    labels: list[PriceLabel] = field(default_factory=list)

    def clear(self) -> None:
        self.divider.reset()
        self.grid.reset()
        self.ticks.reset()
        self.labels.clear()


def build_price_axis(
    out: PriceAxisGeometry,
    adapter: ChartAdapter,
    scaler: CoordinateScaler,
    *,
    divider_x: float,
    surface_height: float,
    spacing: float,
    label_height: float,
) -> PriceAxisGeometry:
    """Right-hand price axis: a full-height divider, grid lines and labelled ticks."""
    out.clear()
    count = adapter.count()
    if count == 0:
        return out

    values = np.fromiter((adapter.item(i).value for i in range(count)), dtype=np.float64, count=count)
    out.divider.move_to(divider_x, 0.0)
    out.divider.line_to(divider_x, surface_height)

    label_x = divider_x + spacing
    for level in price_levels(float(np.min(values)), float(np.max(values))).tolist():
        y = scaler.y(level)
        out.grid.move_to(0.0, y)
        out.grid.line_to(divider_x, y)
        out.ticks.move_to(divider_x, y)
        out.ticks.line_to(divider_x + spacing, y)
        out.labels.append(PriceLabel(x=label_x, y=y - label_height / 2, text=format_price(level)))
    return out
