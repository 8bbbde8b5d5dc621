from __future__ import annotations

import logging
from typing import Generic, Protocol, TypeVar

from stockline_plot.samples import CandleSample, Sample, sample_value_range
from stockline_plot.scales import DataLimits


LOGGER = logging.getLogger(__name__)

T = TypeVar("T", bound=Sample)


class AdapterObserver(Protocol):
    def on_changed(self) -> None:
        ...

    def on_invalidated(self) -> None:
        ...


class ChartAdapter(Generic[T]):
    """Read-only view over a caller-owned series of samples.

    Subclasses provide `count`, `item` and `y`. X defaults to the sample index and
    must be non-decreasing. Observers are told apart from data mutation
    (`notify_changed`) and data loss (`notify_invalidated`).
    """

    def __init__(self) -> None:
        self._observers: list[AdapterObserver] = []

    def count(self) -> int:
        raise NotImplementedError

    def item(self, index: int) -> T:
        raise NotImplementedError

    def x(self, index: int) -> float:
        return float(index)

    def y(self, index: int) -> float:
        raise NotImplementedError

    def has_baseline(self) -> bool:
        return False

    def baseline(self) -> float:
        return 0.0

    def data_bounds(self) -> DataLimits:
        count = self.count()
        has_baseline = self.has_baseline()

        min_y = self.baseline() if has_baseline else float("inf")
        max_y = min_y if has_baseline else float("-inf")
        min_x = float("inf")
        max_x = float("-inf")
        for i in range(count):
            x = self.x(i)
            min_x = min(min_x, x)
            max_x = max(max_x, x)

            low, high = self._y_extent(i)
            min_y = min(min_y, low)
            max_y = max(max_y, high)
        return DataLimits(xmin=min_x, xmax=max_x, ymin=min_y, ymax=max_y)

    def _y_extent(self, index: int) -> tuple[float, float]:
        y = self.y(index)
        return (y, y)

    def register_observer(self, observer: AdapterObserver) -> None:
        if any(existing is observer for existing in self._observers):
            raise ValueError(f"observer already registered: {observer!r}")
        self._observers.append(observer)

    def unregister_observer(self, observer: AdapterObserver) -> None:
        for i, existing in enumerate(self._observers):
            if existing is observer:
                del self._observers[i]
                return
        raise ValueError(f"observer not registered: {observer!r}")

    def observer_count(self) -> int:
        return len(self._observers)

    def notify_changed(self) -> None:
        for observer in list(reversed(self._observers)):
            observer.on_changed()

    def notify_invalidated(self) -> None:
        for observer in list(reversed(self._observers)):
            observer.on_invalidated()


class CandleAdapter(ChartAdapter[CandleSample]):
    """Adapter over candlestick samples. The line follows the close; bounds span high/low."""

    def __init__(self, candles: list[CandleSample] | None = None) -> None:
        super().__init__()
        self._candles = list(candles or [])

    def set_candles(self, candles: list[CandleSample]) -> None:
        self._candles = list(candles)
        self.notify_changed()

    def count(self) -> int:
        return len(self._candles)

    def item(self, index: int) -> CandleSample:
        return self._candles[index]

    def x(self, index: int) -> float:
        return float(self._candles[index].index)

    def y(self, index: int) -> float:
        return float(self._candles[index].close)

    def _y_extent(self, index: int) -> tuple[float, float]:
        return sample_value_range(self._candles[index])
