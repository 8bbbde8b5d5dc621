from __future__ import annotations


class PlotDataError(ValueError):
    """Raised when chart input data cannot be plotted."""
