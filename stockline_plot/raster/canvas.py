from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 255)) -> np.ndarray:
    """Allocate a (height, width, 4) uint8 frame filled with `color`."""
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[...] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Source-over `color` onto every pixel where the boolean `mask` is set.

    Each pixel is blended at most once, so a translucent stroke does not darken
    where its segments overlap.
    """
    if not np.any(mask):
        return
    alpha = color[3] / 255.0
    src = np.asarray(color[:3], dtype=np.float32) * alpha
    region = dst[mask]
    region[:, :3] = (src + region[:, :3].astype(np.float32) * (1.0 - alpha)).astype(np.uint8)
    np.maximum(region[:, 3], color[3], out=region[:, 3])
    dst[mask] = region


def row_mask(shape: tuple[int, int], x0: int, x1: int, y: int) -> np.ndarray:
    """Mask of a one-pixel horizontal run, clipped to `shape`."""
    mask = np.zeros(shape, dtype=bool)
    if 0 <= y < shape[0]:
        lo, hi = sorted((x0, x1))
        mask[y, max(0, lo) : min(shape[1], hi + 1)] = True
    return mask
