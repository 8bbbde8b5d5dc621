from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import logging
from pathlib import Path
import re
import tomllib
from typing import Any, Mapping

from stockline_plot.geometry import FILL_POLICIES


LOGGER = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_COLOR_KEYS = (
    "line_color",
    "fill_top_color",
    "fill_bottom_color",
    "baseline_color",
    "scrub_line_color",
    "last_point_marker_color",
    "scrub_point_marker_color",
    "price_axis_text_color",
    "price_axis_divider_color",
    "background_color",
)
_BOOL_KEYS = (
    "has_price_axis",
    "has_date_axis",
    "has_volume_bars",
    "scrub_enabled",
    "last_point_marker_enabled",
)
_POSITIVE_KEYS = (
    "line_width",
    "marker_radius",
    "ripple_radius",
    "price_axis_font_size_px",
    "long_press_timeout_s",
)
_NON_NEGATIVE_KEYS = ("corner_radius", "touch_slop")


@dataclass(frozen=True)
class ChartConfig:
    """Validated line-chart options. Colors are stored as RGBA tuples."""

    has_price_axis: bool = False
    has_date_axis: bool = False
    has_volume_bars: bool = False
    line_color: RGBA = (62, 149, 255, 255)
    line_width: float = 2.0
    fill_policy: str = "none"
    fill_top_color: RGBA = (62, 149, 255, 153)
    fill_bottom_color: RGBA = (62, 149, 255, 0)
    baseline_color: RGBA = (128, 128, 128, 255)
    scrub_enabled: bool = False
    scrub_line_color: RGBA = (200, 200, 200, 204)
    scrub_line_width: float | None = None
    last_point_marker_enabled: bool = False
    last_point_marker_color: RGBA | None = None
    scrub_point_marker_color: RGBA | None = None
    marker_radius: float = 8.0
    ripple_radius: float = 16.0
    corner_radius: float = 4.0
    touch_slop: float = 8.0
    long_press_timeout_s: float = 0.25
    price_axis_text_color: RGBA = (0, 0, 0, 255)
    price_axis_divider_color: RGBA = (0, 0, 0, 0)
    price_axis_font_size_px: float = 12.0
    background_color: RGBA = (0, 0, 0, 0)

    @property
    def effective_scrub_line_width(self) -> float:
        return self.line_width if self.scrub_line_width is None else self.scrub_line_width

    @property
    def effective_last_point_marker_color(self) -> RGBA:
        return self.line_color if self.last_point_marker_color is None else self.last_point_marker_color

    @property
    def effective_scrub_point_marker_color(self) -> RGBA:
        return self.line_color if self.scrub_point_marker_color is None else self.scrub_point_marker_color


DEFAULT_CONFIG = ChartConfig()


def parse_hex_color(value: str) -> RGBA:
    if not isinstance(value, str) or not _HEX_COLOR.match(value):
        raise ValueError(f"expected a hex color (#RRGGBB or #RRGGBBAA), got {value!r}")
    raw = value[1:]
    r, g, b = (int(raw[i : i + 2], 16) for i in (0, 2, 4))
    a = int(raw[6:8], 16) if len(raw) == 8 else 255
    return (r, g, b, a)


def with_opacity(color: RGBA, opacity: float) -> RGBA:
    """Scale a color's alpha channel by `opacity` (0..1)."""
    if not 0.0 <= opacity <= 1.0:
        raise ValueError("opacity must be within [0, 1]")
    return (color[0], color[1], color[2], int(color[3] * opacity))


def validate_chart_config(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Validate and merge option overrides against the defaults."""

    raw: dict[str, Any] = asdict(DEFAULT_CONFIG)
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart option: {key}")
            raw[key] = value

    for key in _BOOL_KEYS:
        if not isinstance(raw[key], bool):
            raise ValueError(f"Option `{key}` must be a boolean")

    for key in _COLOR_KEYS:
        value = raw[key]
        if value is None and key in ("last_point_marker_color", "scrub_point_marker_color"):
            continue
        raw[key] = _coerce_color(key, value)

    for key in _POSITIVE_KEYS:
        if not _is_number(raw[key]) or float(raw[key]) <= 0:
            raise ValueError(f"Option `{key}` must be a positive number")
        raw[key] = float(raw[key])

    for key in _NON_NEGATIVE_KEYS:
        if not _is_number(raw[key]) or float(raw[key]) < 0:
            raise ValueError(f"Option `{key}` must be a non-negative number")
        raw[key] = float(raw[key])

    if raw["scrub_line_width"] is not None:
        if not _is_number(raw["scrub_line_width"]) or float(raw["scrub_line_width"]) <= 0:
            raise ValueError("Option `scrub_line_width` must be a positive number")
        raw["scrub_line_width"] = float(raw["scrub_line_width"])

    if raw["fill_policy"] not in FILL_POLICIES:
        raise ValueError(f"Unknown fill policy: {raw['fill_policy']!r}")

    if raw["ripple_radius"] < raw["marker_radius"]:
        raise ValueError("Option `ripple_radius` must be >= `marker_radius`")

    if raw["has_date_axis"] or raw["has_volume_bars"]:
        LOGGER.info("date axis and volume bars are accepted but not rendered")

    return ChartConfig(**{f.name: raw[f.name] for f in fields(ChartConfig)})


def load_chart_config(path: str | Path) -> ChartConfig:
    """Load options from the `[chart]` table of a TOML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", {})
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a TOML table")
    return validate_chart_config(table)


def _coerce_color(key: str, value: Any) -> RGBA:
    if isinstance(value, str):
        try:
            return parse_hex_color(value)
        except ValueError as exc:
            raise ValueError(f"Option `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)") from exc
    if isinstance(value, (tuple, list)) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if len(channels) == 3:
            channels.append(255)
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"Option `{key}` channels must be within [0, 255]")
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"Option `{key}` must be a hex color or an RGB(A) tuple")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
