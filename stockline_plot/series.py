from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SeriesData:
    x: np.ndarray
    y: np.ndarray
    timestamps: np.ndarray | None = None
    baseline: float | None = None

    @property
    def size(self) -> int:
        return int(self.y.size)


EMPTY_SERIES = SeriesData(x=np.zeros(0, dtype=np.float64), y=np.zeros(0, dtype=np.float64))
