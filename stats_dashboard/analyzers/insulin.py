"""
Insulin Analyzer - total daily dose and bolus composition.
"""

import pandas as pd
from typing import Optional, List

from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import AnyInterval, StatsTimeInterval, interval_days, interval_window
from stats_dashboard.metrics.stat_records import TDDStat, BolusStat, InsulinSummary
from stats_dashboard.utils.timeseries import bucket_sums

# Values of the 'kind' column
MANUAL_BOLUS = 'bolus'
SMB = 'smb'
EXTERNAL = 'external'
BASAL = 'basal'

INSULIN_KINDS = (MANUAL_BOLUS, SMB, EXTERNAL, BASAL)
_COMPONENTS = ['manual_bolus', 'smb', 'external', 'basal']
_KIND_TO_COMPONENT = {
    MANUAL_BOLUS: 'manual_bolus',
    SMB: 'smb',
    EXTERNAL: 'external',
    BASAL: 'basal',
}


class InsulinAnalyzer:
    """Buckets insulin deliveries into hourly or daily totals.

    Hourly buckets always cover the last 24 hours; daily buckets cover the
    calendar days of the selected interval. Buckets are zero-filled across
    the window as soon as any dose falls inside it.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: Optional[DashboardConfig] = None
    ):
        """Initialize insulin analyzer.

        Args:
            df: DataFrame with 'timestamp', 'units' and 'kind' columns.
            config: Optional configuration. Uses defaults if None.
        """
        self.config = config or DashboardConfig()
        self.df = _pivot_components(df)

    def _buckets(self, interval: AnyInterval, now: pd.Timestamp, hourly: bool) -> pd.DataFrame:
        start, end = interval_window(interval, now)
        return bucket_sums(self.df, _COMPONENTS, start, end, 'h' if hourly else 'D')

    def _tdd(self, buckets: pd.DataFrame) -> List[TDDStat]:
        totals = buckets[_COMPONENTS].sum(axis=1)
        return [
            TDDStat(period_start=ts.to_pydatetime(), amount=float(amount))
            for ts, amount in totals.items()
        ]

    def _bolus(self, buckets: pd.DataFrame) -> List[BolusStat]:
        return [
            BolusStat(
                period_start=ts.to_pydatetime(),
                manual_bolus=float(row['manual_bolus']),
                smb=float(row['smb']),
                external=float(row['external']),
            )
            for ts, row in buckets.iterrows()
        ]

    def hourly_tdd_stats(self, now: pd.Timestamp) -> List[TDDStat]:
        """Insulin totals for each of the last 24 hours."""
        return self._tdd(self._buckets(StatsTimeInterval.DAY, now, hourly=True))

    def daily_tdd_stats(self, interval: AnyInterval, now: pd.Timestamp) -> List[TDDStat]:
        """Insulin totals per calendar day of the interval window."""
        return self._tdd(self._buckets(interval, now, hourly=False))

    def hourly_bolus_stats(self, now: pd.Timestamp) -> List[BolusStat]:
        """Manual/SMB/external bolus totals for each of the last 24 hours."""
        return self._bolus(self._buckets(StatsTimeInterval.DAY, now, hourly=True))

    def daily_bolus_stats(self, interval: AnyInterval, now: pd.Timestamp) -> List[BolusStat]:
        """Manual/SMB/external bolus totals per calendar day of the interval window."""
        return self._bolus(self._buckets(interval, now, hourly=False))

    def summary(self, interval: AnyInterval, now: pd.Timestamp) -> Optional[InsulinSummary]:
        """Per-day averages over the days the interval spans; None without doses."""
        buckets = self._buckets(interval, now, hourly=False)
        if buckets.empty:
            return None

        days = interval_days(interval)
        bolus = float(buckets[['manual_bolus', 'smb', 'external']].to_numpy().sum())
        basal = float(buckets['basal'].sum())
        total = bolus + basal
        return InsulinSummary(
            average_tdd=total / days,
            average_bolus=bolus / days,
            average_basal=basal / days,
            bolus_share=(bolus / total * 100) if total > 0 else 0.0,
            days=days,
        )


def _pivot_components(df: Optional[pd.DataFrame]) -> pd.DataFrame:
    """One column per insulin component; unknown kinds are dropped."""
    columns = ['timestamp'] + _COMPONENTS
    if df is None or df.empty:
        return pd.DataFrame(columns=columns)

    events = df[df['kind'].isin(INSULIN_KINDS)]
    out = pd.DataFrame({'timestamp': events['timestamp'].to_numpy()})
    kinds = events['kind'].to_numpy()
    units = events['units'].astype(float).to_numpy()
    for kind, component in _KIND_TO_COMPONENT.items():
        out[component] = units * (kinds == kind)
    return out[columns]
