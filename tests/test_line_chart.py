from __future__ import annotations

import unittest
from unittest import mock

import numpy as np

from stockline_core.event_loop import EventLoop, ManualClock
from stockline_core.events import InputEvent
from stockline_plot import ChartRange, LineChart, SeriesAdapter, validate_chart_config
from stockline_plot.adapter import CandleAdapter
from stockline_plot.samples import CandleSample, LineSample
from stockline_ui.gestures.scrub import attach_scrub_detector


VALUES = [1.0, 3.0, 2.0, 5.0, 4.0]


def _chart(**overrides) -> LineChart:
    return LineChart(200, 100, config=validate_chart_config(overrides))


class LineChartPopulateTests(unittest.TestCase):
    def test_adapter_change_rebuilds_once_and_requests_one_redraw(self) -> None:
        redraws: list[int] = []
        chart = LineChart(200, 100, on_invalidate=lambda: redraws.append(1))
        adapter = SeriesAdapter.from_values(VALUES)
        chart.set_adapter(adapter)
        self.assertEqual(chart.rebuild_count, 1)
        self.assertEqual(len(redraws), 1)

        adapter.set_values([2.0, 4.0, 3.0])
        self.assertEqual(chart.rebuild_count, 2)
        self.assertEqual(len(redraws), 2)
        self.assertEqual(chart.geometry.x_points.shape, (3,))

    def test_points_span_content_rect_inset_by_half_stroke(self) -> None:
        chart = _chart()
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        np.testing.assert_allclose(chart.geometry.x_points, [1.0, 50.5, 100.0, 149.5, 199.0])
        np.testing.assert_allclose(chart.geometry.y_points, [99.0, 50.0, 74.5, 1.0, 25.5])
        self.assertFalse(chart.geometry.line.is_empty())
        self.assertTrue(chart.geometry.fill.is_empty())

    def test_swapping_adapter_stops_observing_the_old_one(self) -> None:
        chart = _chart()
        first = SeriesAdapter.from_values(VALUES)
        second = SeriesAdapter.from_values([5.0, 1.0])
        chart.set_adapter(first)
        chart.set_adapter(second)
        self.assertEqual(first.observer_count(), 0)
        self.assertEqual(second.observer_count(), 1)

        before = chart.rebuild_count
        first.set_values([1.0, 2.0, 3.0])
        self.assertEqual(chart.rebuild_count, before)

    def test_invalidated_adapter_clears_geometry(self) -> None:
        chart = _chart(last_point_marker_enabled=True)
        adapter = SeriesAdapter.from_values(VALUES)
        chart.set_adapter(adapter)
        self.assertFalse(chart.geometry.last_point_marker.is_empty())

        adapter.clear()
        self.assertTrue(chart.geometry.is_empty())
        self.assertIsNone(chart.scaler)
        self.assertEqual(chart.dirty.metadata["reason"], "clear")

    def test_removing_adapter_clears_geometry_and_scale(self) -> None:
        chart = _chart(has_price_axis=True, last_point_marker_enabled=True)
        adapter = SeriesAdapter.from_values([1.0, 3.0, 2.0])
        chart.set_adapter(adapter)
        self.assertFalse(chart.geometry.is_empty())

        chart.set_adapter(None)
        self.assertTrue(chart.geometry.is_empty())
        self.assertIsNone(chart.scaler)
        self.assertEqual(chart.price_axis.labels, [])
        self.assertEqual(adapter.observer_count(), 0)
        frame = chart.render()
        self.assertEqual(tuple(frame[99, 1]), (0, 0, 0, 0))

    def test_single_sample_draws_nothing(self) -> None:
        chart = _chart(last_point_marker_enabled=True)
        chart.set_adapter(SeriesAdapter.from_values([42.0]))
        self.assertTrue(chart.geometry.is_empty())
        self.assertIsNone(chart.scaler)

    def test_zero_size_chart_defers_population(self) -> None:
        chart = LineChart()
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        self.assertEqual(chart.rebuild_count, 0)
        chart.set_size(200, 100)
        self.assertEqual(chart.rebuild_count, 1)

    def test_scaled_coordinates_warn_before_first_scale(self) -> None:
        chart = _chart()
        with self.assertLogs("stockline_plot.chart", level="WARNING"):
            self.assertEqual(chart.scaled_x(3.0), 3.0)
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        self.assertAlmostEqual(chart.scaled_x(2.0), 100.0)
        self.assertAlmostEqual(chart.scaled_y(5.0), 1.0)

    def test_fill_policy_change_rebuilds_with_closed_fill(self) -> None:
        chart = _chart()
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        chart.set_fill_policy("down")
        self.assertEqual(chart.rebuild_count, 2)
        subpaths = chart.geometry.fill.subpaths()
        self.assertEqual(len(subpaths), 1)
        points, closed = subpaths[0]
        self.assertTrue(closed)
        self.assertEqual(tuple(points[-1]), (0.0, 100.0))

        chart.set_fill_policy("down")
        self.assertEqual(chart.rebuild_count, 2)
        with self.assertRaises(ValueError):
            chart.set_fill_policy("sideways")

    def test_chart_range_selects_date_format(self) -> None:
        chart = _chart()
        self.assertEqual(chart.date_format, "%b %d")
        chart.set_chart_range(ChartRange.FIVE_YEARS)
        self.assertEqual(chart.date_format, "%Y")
        with self.assertRaises(ValueError):
            chart.set_chart_range(99)
        self.assertEqual(chart.chart_range, ChartRange.FIVE_YEARS)

    def test_candle_adapter_plots_closes(self) -> None:
        candles = [
            CandleSample(index=0, open=10.0, high=12.0, low=9.0, close=11.0),
            CandleSample(index=1, open=11.0, high=15.0, low=10.0, close=14.0),
            CandleSample(index=2, open=14.0, high=14.0, low=8.0, close=9.0),
        ]
        chart = _chart()
        chart.set_adapter(CandleAdapter(candles))
        self.assertEqual(chart.geometry.x_points.shape, (3,))
        # Bounds include the wicks, so no close sits on the top or bottom edge.
        self.assertTrue(np.all(chart.geometry.y_points > 1.0))
        self.assertTrue(np.all(chart.geometry.y_points < 99.0))


class LineChartScrubTests(unittest.TestCase):
    def setUp(self) -> None:
        self.chart = _chart(scrub_enabled=True, last_point_marker_enabled=False)
        self.chart.set_adapter(SeriesAdapter.from_values(VALUES))
        self.selected: list[object] = []
        self.chart.set_scrub_listener(self.selected.append)

    def test_scrub_selects_nearest_sample_and_moves_marker(self) -> None:
        self.chart.on_scrubbed(105.0, 50.0)
        self.assertEqual(self.chart.selected_index, 2)
        self.assertEqual(self.selected, [LineSample(index=2, value=2.0)])
        self.assertEqual(self.chart.geometry.scrub_point_marker.circles(), [(100.0, 74.5, 8.0)])
        self.assertEqual(self.chart.geometry.scrub_line.bounds(), (105.0, 0.0, 105.0, 100.0))

    def test_scrub_outside_content_is_clamped(self) -> None:
        self.chart.on_scrubbed(-40.0, 10.0)
        self.assertEqual(self.chart.selected_index, 0)
        self.assertEqual(self.chart.geometry.scrub_line.bounds(), (1.0, 0.0, 1.0, 100.0))

        self.chart.on_scrubbed(500.0, 10.0)
        self.assertEqual(self.chart.selected_index, 4)

    def test_scrub_end_clears_indicator_and_notifies_none(self) -> None:
        self.chart.on_scrubbed(105.0, 50.0)
        self.chart.on_scrub_ended()
        self.assertIsNone(self.chart.selected_index)
        self.assertEqual(self.selected[-1], None)
        self.assertTrue(self.chart.geometry.scrub_line.is_empty())
        self.assertTrue(self.chart.geometry.scrub_point_marker.is_empty())

    def test_scrub_without_data_is_ignored(self) -> None:
        chart = _chart(scrub_enabled=True)
        chart.set_scrub_listener(self.selected.append)
        chart.on_scrubbed(10.0, 10.0)
        self.assertEqual(self.selected, [])

    def test_long_press_on_event_loop_drives_the_chart(self) -> None:
        loop = EventLoop(clock=ManualClock())
        detector = attach_scrub_detector(self.chart, loop)
        loop.dispatch(InputEvent("pointer_down", 0.0, 105.0, 50.0))
        self.assertEqual(self.selected, [])

        loop.advance_to(0.25)
        self.assertEqual(detector.state, "long_press_active")
        self.assertEqual(self.chart.selected_index, 2)

        loop.dispatch(InputEvent("pointer_move", 0.3, 190.0, 50.0))
        self.assertEqual(self.chart.selected_index, 4)

        loop.dispatch(InputEvent("pointer_up", 0.4, 190.0, 50.0))
        self.assertIsNone(self.chart.selected_index)
        self.assertEqual(self.selected[-1], None)


class LineChartRenderTests(unittest.TestCase):
    def test_render_returns_rgba_frame_with_line(self) -> None:
        chart = _chart()
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        frame = chart.render()
        self.assertEqual(frame.shape, (100, 200, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(tuple(frame[99, 1]), (62, 149, 255, 255))
        self.assertFalse(chart.dirty.dirty)

    def test_render_without_size_fails(self) -> None:
        with self.assertRaises(ValueError):
            LineChart().render()

    def test_price_axis_has_four_interior_labels(self) -> None:
        chart = _chart(has_price_axis=True)
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        labels = [label.text for label in chart.price_axis.labels]
        self.assertEqual(labels, ["2.33", "3.00", "3.67", "4.33"])
        self.assertLess(chart.content_rect().right, 200.0)
        self.assertEqual(chart.render().shape, (100, 200, 4))

    def test_price_labels_are_drawn_at_the_measured_density_size(self) -> None:
        chart = LineChart(200, 100, config=validate_chart_config({"has_price_axis": True}), density=2.0)
        chart.set_adapter(SeriesAdapter.from_values(VALUES))
        with mock.patch("stockline_plot.raster.render.draw_text") as draw_text:
            chart.render()
        self.assertEqual(draw_text.call_count, 4)
        sizes = {call.kwargs["font_size_px"] for call in draw_text.call_args_list}
        self.assertEqual(sizes, {chart.config.price_axis_font_size_px * 2.0})


if __name__ == "__main__":
    unittest.main()
