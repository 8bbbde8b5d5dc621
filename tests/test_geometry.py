from __future__ import annotations

import unittest

import numpy as np

from stockline_plot.adapters import SeriesAdapter
from stockline_plot.geometry import MarkerStyle, PathBuilder, clamp_scrub_x, fill_edge
from stockline_plot.paths import Path, round_corners
from stockline_plot.scales import ContentRect, CoordinateScaler


RECT = ContentRect(left=0.0, top=10.0, right=200.0, bottom=110.0)


class _ZeroAt:
    """Scaler stand-in that only answers where zero lands."""

    def __init__(self, zero_y: float) -> None:
        self.zero_y = zero_y

    def y(self, raw_y: float) -> float:
        return self.zero_y


def _build(values, *, fill_policy: str = "none", baseline: float | None = None, markers: MarkerStyle | None = None):
    adapter = SeriesAdapter.from_values(values, baseline=baseline)
    builder = PathBuilder(markers)
    scaler = None
    if adapter.count() >= 2:
        scaler = CoordinateScaler.from_adapter(adapter, RECT, stroke_width=2.0, filled=fill_policy != "none")
    geometry = builder.rebuild(adapter, scaler, fill_policy, content_rect=RECT, surface_width=240.0)
    return builder, geometry, scaler


class FillEdgeTests(unittest.TestCase):
    def test_toward_zero_uses_zero_line_inside_content(self) -> None:
        self.assertEqual(fill_edge("toward_zero", _ZeroAt(40.0), top=0.0, bottom=100.0), 40.0)

    def test_toward_zero_never_passes_content_bottom(self) -> None:
        self.assertEqual(fill_edge("toward_zero", _ZeroAt(150.0), top=0.0, bottom=100.0), 100.0)

    def test_up_down_and_none(self) -> None:
        scaler = _ZeroAt(0.0)
        self.assertEqual(fill_edge("up", scaler, top=5.0, bottom=95.0), 5.0)
        self.assertEqual(fill_edge("down", scaler, top=5.0, bottom=95.0), 95.0)
        self.assertIsNone(fill_edge("none", scaler, top=5.0, bottom=95.0))

    def test_unknown_policy_fails_fast(self) -> None:
        with self.assertRaises(ValueError):
            fill_edge("sideways", _ZeroAt(0.0), top=0.0, bottom=1.0)


class PathBuilderTests(unittest.TestCase):
    def test_too_few_points_leave_every_path_empty(self) -> None:
        for values in ([], [3.0]):
            _, geometry, _ = _build(values, fill_policy="down", baseline=1.0, markers=MarkerStyle(True, True))
            self.assertTrue(geometry.is_empty())
            self.assertFalse(geometry.has_data)
            self.assertEqual(geometry.x_points.size, 0)

    def test_rebuild_after_data_shrinks_clears_previous_geometry(self) -> None:
        adapter = SeriesAdapter.from_values([1.0, 2.0, 3.0])
        builder = PathBuilder()
        scaler = CoordinateScaler.from_adapter(adapter, RECT, stroke_width=2.0, filled=False)
        builder.rebuild(adapter, scaler, "down", content_rect=RECT, surface_width=200.0)
        self.assertFalse(builder.geometry.line.is_empty())

        adapter.set_values([1.0])
        geometry = builder.rebuild(adapter, None, "down", content_rect=RECT, surface_width=200.0)
        self.assertTrue(geometry.is_empty())
        self.assertEqual(builder.rebuild_count, 2)

    def test_line_passes_through_every_scaled_point(self) -> None:
        _, geometry, scaler = _build([1.0, 4.0, 2.0, 3.0])
        ops = geometry.line.ops
        self.assertEqual([op[0] for op in ops], ["move", "line", "line", "line"])
        self.assertAlmostEqual(ops[1][1], scaler.x(1.0))
        self.assertAlmostEqual(ops[1][2], scaler.y(4.0))
        self.assertTrue(np.allclose(geometry.x_points, [op[1] for op in ops]))

    def test_no_fill_region_for_none_policy(self) -> None:
        _, geometry, _ = _build([1.0, 2.0, 3.0], fill_policy="none")
        self.assertTrue(geometry.fill.is_empty())

    def test_down_fill_closes_along_content_bottom(self) -> None:
        _, geometry, _ = _build([1.0, 2.0, 3.0], fill_policy="down")
        ops = geometry.fill.ops
        last_x = float(geometry.x_points[-1])
        first_x = float(geometry.x_points[0])
        self.assertEqual(ops[-3], ("line", last_x, RECT.bottom))
        self.assertEqual(ops[-2], ("line", first_x, RECT.bottom))
        self.assertEqual(ops[-1], ("close",))
        self.assertEqual(ops[: len(geometry.line.ops)], geometry.line.ops)

    def test_up_fill_closes_along_content_top(self) -> None:
        _, geometry, _ = _build([1.0, 2.0, 3.0], fill_policy="up")
        self.assertEqual(geometry.fill.ops[-2][2], RECT.top)

    def test_baseline_spans_the_full_surface_width(self) -> None:
        _, geometry, scaler = _build([1.0, 2.0, 3.0], baseline=2.0)
        y = scaler.y(2.0)
        self.assertEqual(geometry.baseline.ops, (("move", 0.0, y), ("line", 240.0, y)))

    def test_no_baseline_path_without_baseline(self) -> None:
        _, geometry, _ = _build([1.0, 2.0, 3.0])
        self.assertTrue(geometry.baseline.is_empty())

    def test_last_point_marker_sits_on_final_sample(self) -> None:
        _, geometry, _ = _build([1.0, 2.0, 3.0], markers=MarkerStyle(last_point_enabled=True, scrub_enabled=True))
        last = (float(geometry.x_points[-1]), float(geometry.y_points[-1]))
        self.assertEqual(geometry.last_point_ripple.circles(), [(last[0], last[1], 16.0)])
        self.assertEqual(geometry.last_point_marker.circles(), [(last[0], last[1], 8.0)])
        self.assertTrue(geometry.scrub_point_marker.is_empty())
        self.assertTrue(geometry.scrub_point_ripple.is_empty())

    def test_pointer_location_moves_markers_and_resets(self) -> None:
        builder, geometry, _ = _build([1.0, 2.0, 3.0], markers=MarkerStyle(last_point_enabled=True, scrub_enabled=True))
        builder.update_pointer_location((50.0, 60.0))
        self.assertEqual(geometry.scrub_point_marker.circles(), [(50.0, 60.0, 8.0)])
        self.assertEqual(geometry.last_point_marker.circles(), [(50.0, 60.0, 8.0)])

        builder.update_pointer_location(None)
        self.assertTrue(geometry.scrub_point_marker.is_empty())
        cx, cy, _ = geometry.last_point_marker.circles()[0]
        self.assertEqual((cx, cy), (float(geometry.x_points[-1]), float(geometry.y_points[-1])))

    def test_disabled_markers_stay_empty(self) -> None:
        builder, geometry, _ = _build([1.0, 2.0, 3.0])
        builder.update_pointer_location((10.0, 10.0))
        self.assertTrue(geometry.last_point_marker.is_empty())
        self.assertTrue(geometry.scrub_point_marker.is_empty())

    def test_scrub_line_is_clamped_inside_content(self) -> None:
        builder, geometry, _ = _build([1.0, 2.0, 3.0])
        self.assertEqual(builder.set_scrub_line(-30.0, RECT, line_width=4.0), 2.0)
        self.assertEqual(geometry.scrub_line.ops, (("move", 2.0, RECT.top), ("line", 2.0, RECT.bottom)))
        self.assertEqual(builder.set_scrub_line(500.0, RECT, line_width=4.0), 198.0)
        self.assertEqual(clamp_scrub_x(75.0, RECT, 4.0), 75.0)

        builder.clear_scrub()
        self.assertTrue(geometry.scrub_line.is_empty())


class PathTests(unittest.TestCase):
    def test_line_to_on_empty_path_starts_a_subpath(self) -> None:
        path = Path()
        path.line_to(1.0, 2.0)
        self.assertEqual(path.ops, (("move", 1.0, 2.0),))

    def test_subpaths_split_on_move_and_close(self) -> None:
        path = Path()
        path.move_to(0, 0)
        path.line_to(10, 0)
        path.line_to(10, 10)
        path.close()
        path.move_to(20, 20)
        path.line_to(30, 30)
        path.add_circle(5, 5, 2)
        parts = path.subpaths()
        self.assertEqual(len(parts), 2)
        self.assertTrue(parts[0][1])
        self.assertFalse(parts[1][1])
        self.assertEqual(parts[1][0].tolist(), [[20.0, 20.0], [30.0, 30.0]])
        self.assertEqual(path.bounds(), (0.0, 0.0, 30.0, 30.0))

    def test_negative_radius_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Path().add_circle(0, 0, -1)

    def test_round_corners_cuts_joints_and_keeps_endpoints(self) -> None:
        points = np.asarray([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]])
        smooth = round_corners(points, radius=4.0)
        self.assertEqual(smooth[0].tolist(), [0.0, 0.0])
        self.assertEqual(smooth[-1].tolist(), [10.0, 10.0])
        rows = [tuple(row) for row in smooth.tolist()]
        self.assertIn((6.0, 0.0), rows)
        self.assertIn((10.0, 4.0), rows)
        self.assertNotIn((10.0, 0.0), rows)

    def test_round_corners_without_radius_is_identity(self) -> None:
        points = np.asarray([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]])
        self.assertTrue(np.array_equal(round_corners(points, radius=0.0), points))


if __name__ == "__main__":
    unittest.main()
