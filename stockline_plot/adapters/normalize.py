from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from stockline_plot.errors import PlotDataError
from stockline_plot.series import SeriesData


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_series(
    y: Any = None,
    *,
    x: Any = None,
    data: Any = None,
    timestamps: Any = None,
    baseline: float | None = None,
) -> SeriesData:
    """Validate caller data into the float64 arrays a `SeriesAdapter` serves.

    `y`, `x` and `timestamps` may be sequences, numpy arrays, pandas Series,
    torch tensors, or column names of the `data` DataFrame. Every value must be
    finite and X must never decrease.
    """
    frame = _frame(data)
    y_arr = _finite("y", _as_float_array(_lookup(frame, y, "y"), "y"))

    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_arr = _finite("x", _as_float_array(_lookup(frame, x, "x"), "x"))
        _require_same_length("x", x_arr, y_arr)
        steps = np.diff(x_arr)
        if np.any(steps < 0):
            raise PlotDataError(f"x must be non-decreasing (index {int(np.argmax(steps < 0)) + 1})")

    ts_arr = None
    if timestamps is not None:
        ts_arr = _as_epoch_ms(_lookup(frame, timestamps, "timestamps"))
        _require_same_length("timestamps", ts_arr, y_arr)

    if baseline is not None:
        baseline = float(baseline)
        if not np.isfinite(baseline):
            raise PlotDataError("baseline must be finite")

    return SeriesData(x=x_arr, y=y_arr, timestamps=ts_arr, baseline=baseline)


def _frame(data: Any) -> Any:
    if data is None:
        return None
    if pd is None:
        raise PlotDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise PlotDataError("`data` must be a pandas DataFrame")
    return data


def _lookup(frame: Any, value: Any, label: str) -> Any:
    if pd is not None and isinstance(value, pd.DataFrame):
        frame, value = value, None
    if frame is None:
        if value is None:
            raise PlotDataError(f"{label} input is required")
        return value
    if isinstance(value, str):
        if value not in frame.columns:
            raise PlotDataError(f"column not found: {value}")
        return frame[value]
    if value is not None:
        return value
    numeric = [c for c in frame.columns if pd.api.types.is_numeric_dtype(frame[c])]
    if len(numeric) != 1:
        raise PlotDataError(f"cannot infer {label}: DataFrame must have exactly one numeric column")
    return frame[numeric[0]]


def _as_float_array(value: Any, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        value = value.detach().cpu().to(torch.float64).numpy()
    elif pd is not None and isinstance(value, pd.Series):
        value = value.to_numpy()
    elif isinstance(value, (str, bytes, bytearray)) or not isinstance(value, (np.ndarray, Sequence)):
        raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")

    arr = np.asarray(value, dtype=object if not isinstance(value, np.ndarray) else None)
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if arr.dtype.kind in "iufb":
        return arr.astype(np.float64)

    out = np.empty(arr.size, dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
        elif isinstance(raw, (int, float, Decimal, np.number)):
            out[i] = float(raw)
        else:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}")
    return out


def _as_epoch_ms(value: Any) -> np.ndarray:
    if pd is not None and isinstance(value, pd.Series) and pd.api.types.is_datetime64_any_dtype(value):
        value = value.to_numpy(dtype="datetime64[ms]")
    if isinstance(value, np.ndarray) and value.dtype.kind == "M":
        return value.astype("datetime64[ms]").astype(np.int64)
    return _finite("timestamps", _as_float_array(value, "timestamps")).astype(np.int64)


def _finite(label: str, arr: np.ndarray) -> np.ndarray:
    bad = np.flatnonzero(~np.isfinite(arr))
    if bad.size:
        raise PlotDataError(f"{label} contains a non-finite value at index {int(bad[0])}")
    return arr


def _require_same_length(label: str, arr: np.ndarray, y_arr: np.ndarray) -> None:
    if arr.size != y_arr.size:
        raise PlotDataError(f"{label} and y length mismatch: {arr.size} != {y_arr.size}")
