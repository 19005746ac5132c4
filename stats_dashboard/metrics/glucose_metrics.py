"""
Glucose metrics dataclass.

Follows international consensus guidelines (Battelino 2019) for CGM metrics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Tuple, Dict, Any

from stats_dashboard.utils.units import TimeInRangeType


@dataclass(frozen=True)
class GlucoseMetrics:
    """Summary metrics over the readings of the selected interval.

    Range percentages are over all readings and sum to 100. ``time_in_range``
    follows ``time_in_range_type``: low limit to high limit for the standard
    range, low limit to tight high for the tight range.
    """

    # Basic statistics
    mean: float
    median: float
    sd: float
    cv: float  # Coefficient of variation (%)

    # Estimated A1c
    ea1c: float  # ADAG, percent
    gmi: float   # Bergenstal 2018, percent

    # Range breakdown (percent of readings)
    time_very_low: float
    time_low: float
    time_tight: float
    time_upper_range: float
    time_high: float
    time_very_high: float

    # Sector split for the selected range type
    time_below_range: float
    time_in_range: float
    time_above_range: float
    time_in_range_type: TimeInRangeType

    readings_count: int
    data_coverage: float
    date_range: Tuple[datetime, datetime]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'mean_mg_dl': round(self.mean, 1),
            'median_mg_dl': round(self.median, 1),
            'sd_mg_dl': round(self.sd, 1),
            'cv_percent': round(self.cv, 1),
            'ea1c_percent': round(self.ea1c, 2),
            'gmi_percent': round(self.gmi, 2),
            'time_very_low_pct': round(self.time_very_low, 1),
            'time_low_pct': round(self.time_low, 1),
            'time_tight_pct': round(self.time_tight, 1),
            'time_upper_range_pct': round(self.time_upper_range, 1),
            'time_high_pct': round(self.time_high, 1),
            'time_very_high_pct': round(self.time_very_high, 1),
            'time_below_range_pct': round(self.time_below_range, 1),
            'time_in_range_pct': round(self.time_in_range, 1),
            'time_above_range_pct': round(self.time_above_range, 1),
            'time_in_range_type': self.time_in_range_type.value,
            'readings_count': self.readings_count,
            'data_coverage_pct': round(self.data_coverage, 1),
            'start_date': self.date_range[0].isoformat(),
            'end_date': self.date_range[1].isoformat(),
        }
