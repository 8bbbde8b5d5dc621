from __future__ import annotations

import numpy as np

from stockline_plot.raster.canvas import RGBA, blend_mask


def draw_polyline(dst: np.ndarray, xs: np.ndarray, ys: np.ndarray, color: RGBA, width: int = 1) -> None:
    if xs.size < 2:
        return
    blend_mask(dst, stroke_mask(dst.shape[:2], xs, ys, width), color)


def stroke_mask(shape: tuple[int, int], xs: np.ndarray, ys: np.ndarray, width: int = 1) -> np.ndarray:
    """Pixels covered by a square brush of `width` dragged along the polyline."""
    h, w = shape
    mask = np.zeros((h, w), dtype=bool)
    px, py = _trace(np.asarray(xs, dtype=np.float64), np.asarray(ys, dtype=np.float64))
    radius = max(0, width // 2)
    for oy in range(-radius, radius + 1):
        for ox in range(-radius, radius + 1):
            bx = px + ox
            by = py + oy
            keep = (bx >= 0) & (bx < w) & (by >= 0) & (by < h)
            mask[by[keep], bx[keep]] = True
    return mask


def _trace(xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    # One sample per pixel step along the major axis of every segment.
    x_parts: list[np.ndarray] = []
    y_parts: list[np.ndarray] = []
    for i in range(xs.size - 1):
        x0, y0, x1, y1 = xs[i], ys[i], xs[i + 1], ys[i + 1]
        steps = int(max(abs(np.rint(x1) - np.rint(x0)), abs(np.rint(y1) - np.rint(y0)))) + 1
        x_parts.append(np.rint(np.linspace(x0, x1, steps)))
        y_parts.append(np.rint(np.linspace(y0, y1, steps)))
    return np.concatenate(x_parts).astype(np.int64), np.concatenate(y_parts).astype(np.int64)
