"""
Loop Analyzer - loop cycle records and performance ratios.
"""

import numpy as np
import pandas as pd
from typing import Optional, List

from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import AnyInterval, interval_days, interval_window, is_hourly
from stats_dashboard.metrics.stat_records import LoopStatRecord, LoopBarStat, LoopStatsSummary
from stats_dashboard.utils.timeseries import bucket_sums, filter_window

SUCCESS_STATUS = 'success'


class LoopAnalyzer:
    """Analyzer for loop cycles of the dosing algorithm.

    A cycle succeeded when its status is ``success`` (case-insensitive);
    any other status text is the error the cycle ended with.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: Optional[DashboardConfig] = None
    ):
        """Initialize loop analyzer.

        Args:
            df: DataFrame with 'start', 'end' and 'status' columns.
            config: Optional configuration. Uses defaults if None.
        """
        self.config = config or DashboardConfig()
        self.df = _prepare(df)

    def _window(self, interval: AnyInterval, now: pd.Timestamp) -> pd.DataFrame:
        start, end = interval_window(interval, now)
        return filter_window(self.df, start, end, column='start')

    def loop_stat_records(self, interval: AnyInterval, now: pd.Timestamp) -> List[LoopStatRecord]:
        """Cycles started inside the interval window, oldest first."""
        cycles = self._window(interval, now)
        return [
            LoopStatRecord(
                start=row['start'].to_pydatetime(),
                end=None if pd.isna(row['end']) else row['end'].to_pydatetime(),
                duration_seconds=float(row['duration_seconds']),
                interval_seconds=None if pd.isna(row['interval_seconds']) else float(row['interval_seconds']),
                succeeded=bool(row['succeeded']),
                status=str(row['status']),
            )
            for _, row in cycles.iterrows()
        ]

    def loop_bar_stats(self, interval: AnyInterval, now: pd.Timestamp) -> List[LoopBarStat]:
        """Successful/failed counts per hour (day, today) or per day."""
        start, end = interval_window(interval, now)
        buckets = bucket_sums(
            self.df, ['successful', 'failed'], start, end,
            'h' if is_hourly(interval) else 'D',
            column='start',
        )
        return [
            LoopBarStat(
                period_start=ts.to_pydatetime(),
                successful=int(row['successful']),
                failed=int(row['failed']),
            )
            for ts, row in buckets.iterrows()
        ]

    def summary(
        self,
        interval: AnyInterval,
        now: pd.Timestamp,
        glucose_count: int = 0
    ) -> Optional[LoopStatsSummary]:
        """Loop performance over the window; None without cycles.

        Args:
            interval: Selected loop interval.
            now: Reference time.
            glucose_count: Glucose readings inside the same window.
        """
        cycles = self._window(interval, now)
        if cycles.empty:
            return None

        days = interval_days(interval)
        loop_count = len(cycles)
        successful = int(cycles['succeeded'].sum())
        intervals = cycles['interval_seconds'].dropna().to_numpy(dtype=float)
        durations = cycles['duration_seconds'].to_numpy(dtype=float)

        return LoopStatsSummary(
            loop_count=loop_count,
            successful=successful,
            failed=loop_count - successful,
            success_rate=successful / loop_count * 100,
            loops_per_day=loop_count / days,
            median_duration_seconds=float(np.median(durations)),
            average_interval_minutes=float(np.mean(intervals) / 60) if len(intervals) else 0.0,
            glucose_count=glucose_count,
            readings_per_day=glucose_count / days,
        )


def _prepare(df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """Sort cycles and derive duration, interval and outcome columns."""
    columns = [
        'start', 'end', 'status', 'succeeded', 'successful', 'failed',
        'duration_seconds', 'interval_seconds',
    ]
    if df is None or df.empty:
        return pd.DataFrame(columns=columns)

    out = df[['start', 'end', 'status']].sort_values('start', kind='mergesort').reset_index(drop=True)
    out['status'] = out['status'].fillna('').astype(str)
    out['succeeded'] = out['status'].str.strip().str.lower() == SUCCESS_STATUS
    out['successful'] = out['succeeded'].astype(float)
    out['failed'] = (~out['succeeded']).astype(float)

    duration = (out['end'] - out['start']).dt.total_seconds()
    out['duration_seconds'] = duration.fillna(0.0).clip(lower=0.0)
    out['interval_seconds'] = out['start'].diff().dt.total_seconds()
    return out[columns]
