from __future__ import annotations

import numpy as np

from stockline_plot.raster.canvas import RGBA, blend_mask


def draw_disc(dst: np.ndarray, cx: float, cy: float, radius: float, color: RGBA) -> None:
    h, w = dst.shape[:2]
    x0 = max(0, int(np.floor(cx - radius)))
    x1 = min(w, int(np.ceil(cx + radius)) + 1)
    y0 = max(0, int(np.floor(cy - radius)))
    y1 = min(h, int(np.ceil(cy + radius)) + 1)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    inside = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius * radius
    mask = np.zeros((h, w), dtype=bool)
    mask[y0:y1, x0:x1] = inside
    blend_mask(dst, mask, color)
