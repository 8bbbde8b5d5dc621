from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


PathOp = tuple


@dataclass
class Path:
    """Mutable vector path buffer: move/line/close plus full-circle arcs.

    Coordinates are surface pixels. The buffer is reset and refilled in place on
    every geometry rebuild.
    """

    _ops: list[PathOp] = field(default_factory=list)

    def reset(self) -> None:
        self._ops.clear()

    def move_to(self, x: float, y: float) -> None:
        self._ops.append(("move", float(x), float(y)))

    def line_to(self, x: float, y: float) -> None:
        if not self._ops:
            self.move_to(x, y)
            return
        self._ops.append(("line", float(x), float(y)))

    def close(self) -> None:
        if self._ops:
            self._ops.append(("close",))

    def add_circle(self, cx: float, cy: float, radius: float) -> None:
        if radius < 0:
            raise ValueError("radius must be >= 0")
        self._ops.append(("circle", float(cx), float(cy), float(radius)))

    def add_path(self, other: Path) -> None:
        self._ops.extend(other._ops)

    def add_polyline(self, xs: np.ndarray, ys: np.ndarray) -> None:
        for i, (x, y) in enumerate(zip(xs.tolist(), ys.tolist(), strict=True)):
            if i == 0:
                self.move_to(x, y)
            else:
                self.line_to(x, y)

    def is_empty(self) -> bool:
        return not self._ops

    @property
    def ops(self) -> tuple[PathOp, ...]:
        return tuple(self._ops)

    def subpaths(self) -> list[tuple[np.ndarray, bool]]:
        """Split move/line/close runs into (points, closed) pairs. Circles are skipped."""
        out: list[tuple[np.ndarray, bool]] = []
        current: list[tuple[float, float]] = []
        for op in self._ops:
            kind = op[0]
            if kind == "move":
                if current:
                    out.append((np.asarray(current, dtype=np.float64), False))
                current = [(op[1], op[2])]
            elif kind == "line":
                current.append((op[1], op[2]))
            elif kind == "close":
                if current:
                    out.append((np.asarray(current, dtype=np.float64), True))
                current = []
        if current:
            out.append((np.asarray(current, dtype=np.float64), False))
        return out

    def circles(self) -> list[tuple[float, float, float]]:
        return [(op[1], op[2], op[3]) for op in self._ops if op[0] == "circle"]

    def bounds(self) -> tuple[float, float, float, float] | None:
        xs: list[float] = []
        ys: list[float] = []
        for op in self._ops:
            if op[0] in ("move", "line"):
                xs.append(op[1])
                ys.append(op[2])
            elif op[0] == "circle":
                xs.extend((op[1] - op[3], op[1] + op[3]))
                ys.extend((op[2] - op[3], op[2] + op[3]))
        if not xs:
            return None
        return (min(xs), min(ys), max(xs), max(ys))


def round_corners(points: np.ndarray, radius: float, steps: int = 4) -> np.ndarray:
    """Replace each interior joint of a polyline with a short quadratic curve.

    The curve starts and ends `radius` pixels from the joint along each segment,
    capped at half the segment length so neighbouring curves never overlap.
    """
    pts = np.asarray(points, dtype=np.float64)
    if radius <= 0 or pts.shape[0] < 3:
        return pts

    out: list[np.ndarray] = [pts[0]]
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    for i in range(1, pts.shape[0] - 1):
        prev_pt, joint, next_pt = pts[i - 1], pts[i], pts[i + 1]
        into = joint - prev_pt
        out_of = next_pt - joint
        len_in = float(np.hypot(*into))
        len_out = float(np.hypot(*out_of))
        if len_in == 0.0 or len_out == 0.0:
            out.append(joint)
            continue
        cut_in = min(radius, len_in / 2.0)
        cut_out = min(radius, len_out / 2.0)
        start = joint - into * (cut_in / len_in)
        end = joint + out_of * (cut_out / len_out)
        curve = (1 - t) ** 2 * start + 2 * (1 - t) * t * joint + t**2 * end
        out.extend(curve)
    out.append(pts[-1])
    return np.vstack(out)
