from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from stockline_plot.raster.canvas import RGBA


LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans Mono"
DEFAULT_FONT_SIZE_PX = 12.0
FONT_FALLBACK_PATTERNS = ("dejavusansmono", "menlo", "monaco", "courier")
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> None:
    if not text:
        return
    mask = _render_mask(text, _load_font(font_family, font_size_px))
    h, w = mask.shape
    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    coverage = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    alpha = (color[3] / 255.0) * coverage[:, :, None]
    patch = dst[y0:y1, x0:x1]
    rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    patch[:, :, :3] = np.clip(rgb * alpha + patch[:, :, :3].astype(np.float32) * (1.0 - alpha), 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.maximum(patch[:, :, 3], (alpha[:, :, 0] * 255.0).astype(np.uint8))


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    font = _load_font(font_family, font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=128)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=32)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    for path in _matching_fonts(_font_key(font_family) or _font_key(DEFAULT_FONT_FAMILY)):
        try:
            return ImageFont.truetype(str(path), size=size)
        except OSError:
            LOGGER.debug("skipping unreadable font %s", path)
    LOGGER.debug("no font found for %r; using Pillow's built-in face", font_family)
    return ImageFont.load_default(size=size)


def _matching_fonts(wanted: str) -> list[Path]:
    installed = _installed_fonts()
    out: list[Path] = []
    for pattern in (wanted,) + FONT_FALLBACK_PATTERNS:
        out.extend(path for path in installed if pattern in _font_key(path.stem))
    return out


@lru_cache(maxsize=1)
def _installed_fonts() -> tuple[Path, ...]:
    found: list[Path] = []
    for base in FONT_DIRS:
        if base.is_dir():
            found.extend(sorted(p for p in base.rglob("*") if p.suffix.lower() in (".ttf", ".otf")))
    return tuple(found)


def _font_key(name: str) -> str:
    return name.strip().lower().replace(" ", "").replace("-", "")
