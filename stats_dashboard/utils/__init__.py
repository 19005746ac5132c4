"""Utility functions for statistics, units, colors and time windows."""

from stats_dashboard.utils.statistics import (
    calculate_sd,
    calculate_cv,
    calculate_quantiles,
    calculate_data_coverage,
)
from stats_dashboard.utils.units import (
    GlucoseUnits,
    EA1cDisplayUnit,
    TimeInRangeType,
    to_display_units,
    format_glucose,
    format_ea1c,
)
from stats_dashboard.utils.colors import GLUCOSE_RANGE_COLORS
from stats_dashboard.utils.timeseries import (
    filter_window,
    bucket_sums,
    page_bounds,
)

__all__ = [
    "calculate_sd",
    "calculate_cv",
    "calculate_quantiles",
    "calculate_data_coverage",
    "GlucoseUnits",
    "EA1cDisplayUnit",
    "TimeInRangeType",
    "to_display_units",
    "format_glucose",
    "format_ea1c",
    "GLUCOSE_RANGE_COLORS",
    "filter_window",
    "bucket_sums",
    "page_bounds",
]
