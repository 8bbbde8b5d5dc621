from .normalize import normalize_series
from .series_adapter import SeriesAdapter

__all__ = ["SeriesAdapter", "normalize_series"]
