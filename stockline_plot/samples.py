from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class LineSample:
    index: int
    value: float
    timestamp: int | None = None


@dataclass(frozen=True)
class CandleSample:
    index: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    timestamp: int | None = None

    @property
    def value(self) -> float:
        return self.close


Sample = Union[LineSample, CandleSample]


def sample_value_range(sample: Sample) -> tuple[float, float]:
    """Return the (low, high) Y extent a sample contributes to the data bounds."""
    if isinstance(sample, LineSample):
        return (sample.value, sample.value)
    if isinstance(sample, CandleSample):
        return (min(sample.low, sample.open, sample.close), max(sample.high, sample.open, sample.close))
    raise TypeError(f"unsupported sample type: {type(sample)!r}")
