from stockline_plot.adapter import AdapterObserver, CandleAdapter, ChartAdapter
from stockline_plot.adapters import SeriesAdapter, normalize_series
from stockline_plot.axis import ChartRange, date_format_for_range
from stockline_plot.chart import LineChart
from stockline_plot.config import ChartConfig, load_chart_config, validate_chart_config
from stockline_plot.errors import PlotDataError
from stockline_plot.geometry import FillPolicy, MarkerStyle, PathBuilder, RenderGeometry, fill_edge
from stockline_plot.nearest import nearest_index
from stockline_plot.paths import Path
from stockline_plot.samples import CandleSample, LineSample, Sample
from stockline_plot.scales import ContentRect, CoordinateScaler, DataLimits

__all__ = [
    "AdapterObserver",
    "CandleAdapter",
    "CandleSample",
    "ChartAdapter",
    "ChartConfig",
    "ChartRange",
    "ContentRect",
    "CoordinateScaler",
    "DataLimits",
    "FillPolicy",
    "LineChart",
    "LineSample",
    "MarkerStyle",
    "Path",
    "PathBuilder",
    "PlotDataError",
    "RenderGeometry",
    "Sample",
    "SeriesAdapter",
    "date_format_for_range",
    "fill_edge",
    "load_chart_config",
    "nearest_index",
    "normalize_series",
    "validate_chart_config",
]
