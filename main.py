from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np
from PIL import Image

from stockline_core import EventLoop, InputEvent, ManualClock
from stockline_plot import LineChart, SeriesAdapter, load_chart_config, validate_chart_config
from stockline_plot.geometry import FILL_POLICIES
from stockline_ui import attach_scrub_detector


LOGGER = logging.getLogger("stockline")


def _random_walk(points: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    steps = rng.normal(loc=0.05, scale=1.0, size=points)
    return 100.0 + np.cumsum(steps)


def main() -> None:
    parser = argparse.ArgumentParser(prog="stockline-demo")
    parser.add_argument("--out", type=Path, default=Path("stockline.png"), help="PNG file to write.")
    parser.add_argument("--width", type=int, default=640)
    parser.add_argument("--height", type=int, default=320)
    parser.add_argument("--points", type=int, default=120, help="Number of generated samples.")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--config", type=Path, default=None, help="TOML file with a [chart] table.")
    parser.add_argument("--fill", choices=FILL_POLICIES, default=None, help="Override the fill policy.")
    parser.add_argument(
        "--scrub-x",
        type=float,
        default=None,
        help="Replay a long-press scrub at this pixel x before rendering.",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    if args.config is not None:
        config = load_chart_config(args.config)
    else:
        config = validate_chart_config(
            {
                "scrub_enabled": True,
                "last_point_marker_enabled": True,
                "fill_policy": "down",
                "has_price_axis": True,
                "background_color": "#101418FF",
                "price_axis_text_color": "#CBD5E1",
                "price_axis_divider_color": "#64748B",
            }
        )

    chart = LineChart(args.width, args.height, config=config, padding=(8, 8, 8, 8))
    if args.fill is not None:
        chart.set_fill_policy(args.fill)
    chart.set_adapter(SeriesAdapter.from_values(_random_walk(args.points, args.seed)))
    chart.set_scrub_listener(lambda sample: LOGGER.info("scrubbed: %s", sample))

    if args.scrub_x is not None:
        if not config.scrub_enabled:
            parser.error("--scrub-x requires scrub_enabled in the chart config")
        loop = EventLoop(clock=ManualClock())
        attach_scrub_detector(chart, loop)
        y = args.height / 2.0
        loop.dispatch(InputEvent("pointer_down", 0.0, args.scrub_x, y))
        loop.advance_to(config.long_press_timeout_s)
        if chart.selected_index is not None and chart.adapter is not None:
            print(f"selected: {chart.adapter.item(chart.selected_index)}")

    frame = chart.render()
    Image.fromarray(frame).save(args.out)
    print(f"wrote {args.out} ({args.width}x{args.height})")


if __name__ == "__main__":
    main()
