from __future__ import annotations

from typing import Any

from stockline_plot.adapter import ChartAdapter
from stockline_plot.adapters.normalize import normalize_series
from stockline_plot.samples import LineSample
from stockline_plot.scales import DataLimits, compute_limits
from stockline_plot.series import EMPTY_SERIES, SeriesData


class SeriesAdapter(ChartAdapter[LineSample]):
    """Line-sample adapter backed by normalized numpy arrays."""

    def __init__(self, data: SeriesData | None = None) -> None:
        super().__init__()
        self._data = data if data is not None else EMPTY_SERIES

    @classmethod
    def from_values(
        cls,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        timestamps: Any = None,
        baseline: float | None = None,
    ) -> SeriesAdapter:
        return cls(normalize_series(y, x=x, data=data, timestamps=timestamps, baseline=baseline))

    @property
    def data(self) -> SeriesData:
        return self._data

    def set_values(
        self,
        y: Any = None,
        *,
        x: Any = None,
        data: Any = None,
        timestamps: Any = None,
        baseline: float | None = None,
    ) -> None:
        self._data = normalize_series(y, x=x, data=data, timestamps=timestamps, baseline=baseline)
        self.notify_changed()

    def clear(self) -> None:
        self._data = EMPTY_SERIES
        self.notify_invalidated()

    def count(self) -> int:
        return self._data.size

    def item(self, index: int) -> LineSample:
        if index < 0 or index >= self._data.size:
            raise IndexError(f"sample index out of range: {index}")
        ts = None if self._data.timestamps is None else int(self._data.timestamps[index])
        return LineSample(index=index, value=float(self._data.y[index]), timestamp=ts)

    def x(self, index: int) -> float:
        return float(self._data.x[index])

    def y(self, index: int) -> float:
        return float(self._data.y[index])

    def has_baseline(self) -> bool:
        return self._data.baseline is not None

    def baseline(self) -> float:
        return 0.0 if self._data.baseline is None else float(self._data.baseline)

    def data_bounds(self) -> DataLimits:
        if self._data.size == 0:
            return super().data_bounds()
        return compute_limits(self._data.x, self._data.y, baseline=self._data.baseline)
