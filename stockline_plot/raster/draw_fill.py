from __future__ import annotations

import numpy as np

from stockline_plot.raster.canvas import RGBA


def polygon_mask(shape: tuple[int, int], points: np.ndarray) -> np.ndarray:
    """Even-odd scanline fill of a closed polygon sampled at pixel centres."""
    h, w = shape
    mask = np.zeros((h, w), dtype=bool)
    if points.shape[0] < 3:
        return mask
    xs = points[:, 0]
    ys = points[:, 1]
    x_next = np.roll(xs, -1)
    y_next = np.roll(ys, -1)

    row_lo = max(0, int(np.floor(ys.min())))
    row_hi = min(h - 1, int(np.ceil(ys.max())))
    cols = np.arange(w, dtype=np.float64) + 0.5
    for row in range(row_lo, row_hi + 1):
        yc = row + 0.5
        crosses = (ys <= yc) != (y_next <= yc)
        if not np.any(crosses):
            continue
        ya = ys[crosses]
        yb = y_next[crosses]
        xa = xs[crosses]
        xb = x_next[crosses]
        xi = np.sort(xa + (yc - ya) * (xb - xa) / (yb - ya))
        for left, right in zip(xi[0::2], xi[1::2], strict=False):
            mask[row] |= (cols >= left) & (cols < right)
    return mask


def fill_polygon_gradient(dst: np.ndarray, points: np.ndarray, top: RGBA, bottom: RGBA) -> None:
    """Fill a polygon with a vertical gradient spanning the full canvas height."""
    h = dst.shape[0]
    mask = polygon_mask(dst.shape[:2], points)
    if not np.any(mask):
        return
    t = (np.arange(h, dtype=np.float32) / max(1, h - 1))[:, None]
    top_arr = np.asarray(top, dtype=np.float32)
    bottom_arr = np.asarray(bottom, dtype=np.float32)
    ramp = top_arr * (1.0 - t) + bottom_arr * t  # (h, 4)
    rows, cols = np.nonzero(mask)
    src = ramp[rows]
    alpha = src[:, 3:4] / 255.0
    current = dst[rows, cols, :3].astype(np.float32)
    dst[rows, cols, :3] = (src[:, :3] * alpha + current * (1.0 - alpha)).astype(np.uint8)
    dst[rows, cols, 3] = np.maximum(dst[rows, cols, 3], src[:, 3].astype(np.uint8))
