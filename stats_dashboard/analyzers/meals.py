"""
Meal Analyzer - macronutrient totals per hour or day.
"""

import pandas as pd
from typing import Optional, List

from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import AnyInterval, StatsTimeInterval, interval_days, interval_window
from stats_dashboard.metrics.stat_records import MealStat, MealSummary
from stats_dashboard.utils.timeseries import bucket_sums, filter_window

MACROS = ['carbs', 'fat', 'protein']


class MealAnalyzer:
    """Sums logged carbs, fat and protein per bucket."""

    def __init__(
        self,
        df: pd.DataFrame,
        config: Optional[DashboardConfig] = None
    ):
        """Initialize meal analyzer.

        Args:
            df: DataFrame with 'timestamp', 'carbs', 'fat' and 'protein' columns.
            config: Optional configuration. Uses defaults if None.
        """
        self.config = config or DashboardConfig()
        if df is None or df.empty:
            self.df = pd.DataFrame(columns=['timestamp'] + MACROS)
        else:
            self.df = df[['timestamp'] + MACROS].copy()
            self.df[MACROS] = self.df[MACROS].apply(pd.to_numeric, errors='coerce').fillna(0.0)

    def _stats(self, interval: AnyInterval, now: pd.Timestamp, hourly: bool) -> List[MealStat]:
        start, end = interval_window(interval, now)
        buckets = bucket_sums(self.df, MACROS, start, end, 'h' if hourly else 'D')
        return [
            MealStat(
                period_start=ts.to_pydatetime(),
                carbs=float(row['carbs']),
                fat=float(row['fat']),
                protein=float(row['protein']),
            )
            for ts, row in buckets.iterrows()
        ]

    def hourly_meal_stats(self, now: pd.Timestamp) -> List[MealStat]:
        """Macronutrient totals for each of the last 24 hours."""
        return self._stats(StatsTimeInterval.DAY, now, hourly=True)

    def daily_meal_stats(self, interval: AnyInterval, now: pd.Timestamp) -> List[MealStat]:
        """Macronutrient totals per calendar day of the interval window."""
        return self._stats(interval, now, hourly=False)

    def summary(self, interval: AnyInterval, now: pd.Timestamp) -> Optional[MealSummary]:
        daily = self.daily_meal_stats(interval, now)
        if not daily:
            return None

        start, end = interval_window(interval, now)
        meals = filter_window(self.df, start, end)
        meal_count = int((meals[MACROS].astype(float).sum(axis=1) > 0).sum())

        days = interval_days(interval)
        return MealSummary(
            average_carbs=sum(s.carbs for s in daily) / days,
            average_fat=sum(s.fat for s in daily) / days,
            average_protein=sum(s.protein for s in daily) / days,
            meal_count=meal_count,
            days=days,
        )
