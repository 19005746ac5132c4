"""
Glucose Analyzer - percentile, distribution and summary statistics.

Works on a DataFrame of readings already restricted to the selected window.
All values are mg/dL.
"""

import numpy as np
import pandas as pd
from typing import Optional, List, Dict

from stats_dashboard.config import DashboardConfig
from stats_dashboard.metrics.glucose_metrics import GlucoseMetrics
from stats_dashboard.metrics.stat_records import (
    GlucoseRange,
    HourlyStat,
    GlucoseRangeStat,
    DailyPercentileStat,
    DailyDistributionStat,
)
from stats_dashboard.utils.statistics import (
    calculate_sd,
    calculate_cv,
    calculate_quantiles,
    calculate_data_coverage,
    mask_percentages,
)
from stats_dashboard.utils.units import TimeInRangeType, ea1c_percent, gmi_percent

BAND_QUANTILES = (0.10, 0.25, 0.50, 0.75, 0.90)


class GlucoseAnalyzer:
    """Analyzer for continuous glucose monitor (CGM) readings.

    Produces the collections behind the four glucose chart types:
    hourly percentiles (AGP), hourly range distribution, daily percentiles
    and daily range distribution, plus the summary metrics card.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: Optional[DashboardConfig] = None
    ):
        """Initialize glucose analyzer.

        Args:
            df: DataFrame with 'timestamp' and 'glucose_mg_dl' columns.
            config: Optional configuration. Uses defaults if None.
        """
        self.config = config or DashboardConfig()
        if df is None or df.empty:
            self.df = pd.DataFrame({
                'timestamp': pd.Series(dtype='datetime64[ns]'),
                'glucose_mg_dl': pd.Series(dtype=float),
            })
        else:
            self.df = (
                df[['timestamp', 'glucose_mg_dl']]
                .sort_values('timestamp', kind='mergesort')
                .reset_index(drop=True)
            )
        self._values: Optional[np.ndarray] = None

    @property
    def values(self) -> np.ndarray:
        """Get glucose values as numpy array."""
        if self._values is None:
            self._values = self.df['glucose_mg_dl'].to_numpy(dtype=float)
        return self._values

    @property
    def is_empty(self) -> bool:
        return len(self.values) == 0

    # =========================================================================
    # RANGE CLASSIFICATION
    # =========================================================================

    def range_masks(self, values: np.ndarray) -> Dict[GlucoseRange, np.ndarray]:
        """Boolean mask per glucose band; the masks partition ``values``."""
        t = self.config.glucose
        tight_top = min(t.tight_high, t.high_limit)
        return {
            GlucoseRange.VERY_LOW: values < t.very_low,
            GlucoseRange.LOW: (values >= t.very_low) & (values < t.low_limit),
            GlucoseRange.TIGHT: (values >= t.low_limit) & (values <= tight_top),
            GlucoseRange.UPPER_RANGE: (values > tight_top) & (values <= t.high_limit),
            GlucoseRange.HIGH: (values > t.high_limit) & (values <= t.very_high),
            GlucoseRange.VERY_HIGH: values > t.very_high,
        }

    def range_percentages(self, values: np.ndarray) -> Dict[GlucoseRange, float]:
        return mask_percentages(self.range_masks(values))

    def sector_percentages(self, values: np.ndarray) -> Dict[str, float]:
        """Below / in / above split for the configured time-in-range type."""
        t = self.config.glucose
        if self.config.display.time_in_range_type is TimeInRangeType.TIGHT:
            top = t.tight_high
        else:
            top = t.high_limit
        return mask_percentages({
            'below': values < t.low_limit,
            'in_range': (values >= t.low_limit) & (values <= top),
            'above': values > top,
        })

    # =========================================================================
    # BY TIME
    # =========================================================================

    def hourly_stats(self) -> List[HourlyStat]:
        """Percentile band per hour of day across all days (AGP).

        Only hours with readings are returned, ordered 0-23.
        """
        if self.is_empty:
            return []

        df = self.df.assign(hour=self.df['timestamp'].dt.hour)
        stats = []
        for hour, group in df.groupby('hour', sort=True):
            values = group['glucose_mg_dl'].to_numpy(dtype=float)
            q = calculate_quantiles(values, BAND_QUANTILES)
            stats.append(HourlyStat(
                hour=int(hour),
                median=q['p50'],
                p10=q['p10'],
                p25=q['p25'],
                p75=q['p75'],
                p90=q['p90'],
                mean=float(np.mean(values)),
                count=len(values),
            ))
        return stats

    def glucose_range_stats(self) -> List[GlucoseRangeStat]:
        """Band distribution per hour of day across all days."""
        if self.is_empty:
            return []

        df = self.df.assign(hour=self.df['timestamp'].dt.hour)
        return [
            GlucoseRangeStat(
                hour=int(hour),
                percentages=self.range_percentages(group['glucose_mg_dl'].to_numpy(dtype=float)),
                count=len(group),
            )
            for hour, group in df.groupby('hour', sort=True)
        ]

    # =========================================================================
    # BY DAY
    # =========================================================================

    def daily_percentile_stats(self) -> List[DailyPercentileStat]:
        """Percentile band per calendar day with readings, oldest first."""
        if self.is_empty:
            return []

        df = self.df.assign(day=self.df['timestamp'].dt.date)
        stats = []
        for day, group in df.groupby('day', sort=True):
            values = group['glucose_mg_dl'].to_numpy(dtype=float)
            q = calculate_quantiles(values, BAND_QUANTILES)
            stats.append(DailyPercentileStat(
                day=day,
                median=q['p50'],
                p10=q['p10'],
                p25=q['p25'],
                p75=q['p75'],
                p90=q['p90'],
                mean=float(np.mean(values)),
                count=len(values),
            ))
        return stats

    def daily_distribution_stats(self) -> List[DailyDistributionStat]:
        """Band distribution per calendar day with readings, oldest first."""
        if self.is_empty:
            return []

        df = self.df.assign(day=self.df['timestamp'].dt.date)
        return [
            DailyDistributionStat(
                day=day,
                percentages=self.range_percentages(group['glucose_mg_dl'].to_numpy(dtype=float)),
                count=len(group),
            )
            for day, group in df.groupby('day', sort=True)
        ]

    # =========================================================================
    # MAIN ANALYSIS
    # =========================================================================

    def analyze(self) -> Optional[GlucoseMetrics]:
        """Compute summary metrics; None when there are no readings."""
        if self.is_empty:
            return None

        values = self.values
        mean = float(np.mean(values))
        bands = self.range_percentages(values)
        sector = self.sector_percentages(values)

        date_range = (
            self.df['timestamp'].iloc[0].to_pydatetime(),
            self.df['timestamp'].iloc[-1].to_pydatetime(),
        )
        data_coverage = calculate_data_coverage(
            self.df,
            expected_interval_minutes=60 // self.config.analysis.readings_per_hour,
        )

        return GlucoseMetrics(
            mean=mean,
            median=float(np.median(values)),
            sd=calculate_sd(values),
            cv=calculate_cv(values),
            ea1c=ea1c_percent(mean),
            gmi=gmi_percent(mean),
            time_very_low=bands[GlucoseRange.VERY_LOW],
            time_low=bands[GlucoseRange.LOW],
            time_tight=bands[GlucoseRange.TIGHT],
            time_upper_range=bands[GlucoseRange.UPPER_RANGE],
            time_high=bands[GlucoseRange.HIGH],
            time_very_high=bands[GlucoseRange.VERY_HIGH],
            time_below_range=sector['below'],
            time_in_range=sector['in_range'],
            time_above_range=sector['above'],
            time_in_range_type=self.config.display.time_in_range_type,
            readings_count=len(values),
            data_coverage=data_coverage,
            date_range=date_range,
        )
