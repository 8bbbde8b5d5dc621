from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence


def nearest_index(points: Sequence[float], point: float) -> int:
    """Return the index of the value in `points` closest to `point`.

    `points` must be non-decreasing. Ties between two neighbours resolve to the
    lower index.
    """
    size = len(points)
    if size == 0:
        raise ValueError("points must not be empty")

    index = bisect_left(points, point)
    if index < size and points[index] == point:
        return index

    if index == 0:
        return 0
    if index == size:
        return size - 1

    delta_up = points[index] - point
    delta_down = point - points[index - 1]
    if delta_up >= delta_down:
        index -= 1
    return index
