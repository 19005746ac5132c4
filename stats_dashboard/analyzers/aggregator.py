"""
Stats Aggregator - builds everything the statistics screen reads.

``StatsAggregator.aggregate`` is a pure function of the dataset, the
configuration, the selection and the reference time ``now``. It never
raises: a failure inside one domain is logged and that domain comes back
empty, which the card resolver renders as its no-data placeholder.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

import pandas as pd

from stats_dashboard.analyzers.glucose import GlucoseAnalyzer
from stats_dashboard.analyzers.insulin import InsulinAnalyzer
from stats_dashboard.analyzers.looping import LoopAnalyzer
from stats_dashboard.analyzers.meals import MealAnalyzer
from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import (
    AnyInterval,
    StatsTimeIntervalWithToday,
    interval_days,
    interval_window,
)
from stats_dashboard.loaders.exports import StatsDataset, empty_glucose
from stats_dashboard.metrics import (
    GlucoseMetrics,
    HourlyStat,
    GlucoseRangeStat,
    DailyPercentileStat,
    DailyDistributionStat,
    TDDStat,
    BolusStat,
    InsulinSummary,
    MealStat,
    MealSummary,
    LoopStatRecord,
    LoopBarStat,
    LoopStatsSummary,
)
from stats_dashboard.selection import SelectionState
from stats_dashboard.utils.timeseries import filter_window, page_bounds
from stats_dashboard.utils.units import GlucoseUnits, EA1cDisplayUnit, TimeInRangeType

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class StatsSnapshot:
    """Read-only view model for one render of the statistics screen."""

    # Preferences and thresholds
    units: GlucoseUnits = GlucoseUnits.MG_DL
    time_in_range_type: TimeInRangeType = TimeInRangeType.STANDARD
    ea1c_display_unit: EA1cDisplayUnit = EA1cDisplayUnit.PERCENT
    low_limit: float = 70.0
    high_limit: float = 180.0

    # Glucose
    glucose: pd.DataFrame = field(default_factory=empty_glucose, compare=False, repr=False)
    glucose_count: int = 0
    hourly_stats: List[HourlyStat] = field(default_factory=list)
    glucose_range_stats: List[GlucoseRangeStat] = field(default_factory=list)
    daily_percentile_stats: List[DailyPercentileStat] = field(default_factory=list)
    daily_distribution_stats: List[DailyDistributionStat] = field(default_factory=list)
    glucose_metrics: Optional[GlucoseMetrics] = None

    # Insulin
    hourly_tdd_stats: List[TDDStat] = field(default_factory=list)
    daily_tdd_stats: List[TDDStat] = field(default_factory=list)
    hourly_bolus_stats: List[BolusStat] = field(default_factory=list)
    daily_bolus_stats: List[BolusStat] = field(default_factory=list)
    insulin_summary: Optional[InsulinSummary] = None

    # Looping
    loop_stat_records: List[LoopStatRecord] = field(default_factory=list)
    loop_bar_stats: List[LoopBarStat] = field(default_factory=list)
    loop_stats: Optional[LoopStatsSummary] = None

    # Meals
    hourly_meal_stats: List[MealStat] = field(default_factory=list)
    daily_meal_stats: List[MealStat] = field(default_factory=list)
    meal_summary: Optional[MealSummary] = None


class StatsAggregator:
    """Turns a ``StatsDataset`` into a ``StatsSnapshot`` for a selection."""

    def __init__(
        self,
        dataset: Optional[StatsDataset] = None,
        config: Optional[DashboardConfig] = None
    ):
        self.dataset = dataset or StatsDataset()
        self.config = config or DashboardConfig()

    def aggregate(
        self,
        selection: Optional[SelectionState] = None,
        now: Optional[pd.Timestamp] = None
    ) -> StatsSnapshot:
        """Compute all collections for ``selection`` at reference time ``now``.

        Args:
            selection: Current selection; the initial selection if None.
            now: Reference time (naive, local). Defaults to the current time.

        Returns:
            StatsSnapshot. Domains that fail to compute are left empty.
        """
        selection = selection or SelectionState.initial(self.config)
        now = pd.Timestamp.now() if now is None else pd.Timestamp(now)
        t = self.config.glucose
        display = self.config.display

        values: Dict[str, Any] = {
            'units': display.units,
            'time_in_range_type': display.time_in_range_type,
            'ea1c_display_unit': display.ea1c_display_unit,
            'low_limit': float(t.low_limit),
            'high_limit': float(t.high_limit),
        }
        values.update(self._safely('glucose', lambda: self._glucose(selection, now), {}))
        values.update(self._safely('insulin', lambda: self._insulin(selection, now), {}))
        values.update(self._safely('looping', lambda: self._looping(selection, now), {}))
        values.update(self._safely('meals', lambda: self._meals(selection, now), {}))
        return StatsSnapshot(**values)

    def _safely(self, domain: str, compute: Callable[[], T], fallback: T) -> T:
        try:
            return compute()
        except Exception:
            logger.exception("Failed to compute %s statistics; showing no data", domain)
            return fallback

    # =========================================================================
    # DOMAINS
    # =========================================================================

    def glucose_window_interval(self, selection: SelectionState) -> AnyInterval:
        """Window the glucose readings are drawn from.

        By-day charts page through the longest window; by-time charts use the
        selected interval directly.
        """
        if selection.glucose_chart_type.groups_by_day:
            return StatsTimeIntervalWithToday.TOTAL
        return selection.glucose_interval

    def _glucose(self, selection: SelectionState, now: pd.Timestamp) -> Dict[str, Any]:
        start, end = interval_window(self.glucose_window_interval(selection), now)
        readings = filter_window(self.dataset.glucose, start, end)
        analyzer = GlucoseAnalyzer(readings, self.config)
        logger.debug("Glucose window %s - %s: %d readings", start, end, len(analyzer.df))

        return {
            'glucose': analyzer.df,
            'glucose_count': len(analyzer.df),
            'hourly_stats': analyzer.hourly_stats(),
            'glucose_range_stats': analyzer.glucose_range_stats(),
            'daily_percentile_stats': analyzer.daily_percentile_stats(),
            'daily_distribution_stats': analyzer.daily_distribution_stats(),
            'glucose_metrics': analyzer.analyze(),
        }

    def _insulin(self, selection: SelectionState, now: pd.Timestamp) -> Dict[str, Any]:
        analyzer = InsulinAnalyzer(self.dataset.insulin, self.config)
        interval = selection.insulin_interval
        return {
            'hourly_tdd_stats': analyzer.hourly_tdd_stats(now),
            'daily_tdd_stats': analyzer.daily_tdd_stats(interval, now),
            'hourly_bolus_stats': analyzer.hourly_bolus_stats(now),
            'daily_bolus_stats': analyzer.daily_bolus_stats(interval, now),
            'insulin_summary': analyzer.summary(interval, now),
        }

    def _looping(self, selection: SelectionState, now: pd.Timestamp) -> Dict[str, Any]:
        analyzer = LoopAnalyzer(self.dataset.loops, self.config)
        interval = selection.loop_interval
        start, end = interval_window(interval, now)
        glucose_count = len(filter_window(self.dataset.glucose, start, end))
        return {
            'loop_stat_records': analyzer.loop_stat_records(interval, now),
            'loop_bar_stats': analyzer.loop_bar_stats(interval, now),
            'loop_stats': analyzer.summary(interval, now, glucose_count=glucose_count),
        }

    def _meals(self, selection: SelectionState, now: pd.Timestamp) -> Dict[str, Any]:
        analyzer = MealAnalyzer(self.dataset.meals, self.config)
        interval = selection.meal_interval
        return {
            'hourly_meal_stats': analyzer.hourly_meal_stats(now),
            'daily_meal_stats': analyzer.daily_meal_stats(interval, now),
            'meal_summary': analyzer.summary(interval, now),
        }


def page_daily_stats(stats: List[T], interval: AnyInterval, page: int = 0) -> List[T]:
    """Visible slice of day-keyed stats for a by-day chart.

    Pages hold as many days as the interval spans (week 7, month 30,
    total 90); page 0 ends with the most recent day.
    """
    if isinstance(interval, StatsTimeIntervalWithToday):
        interval = interval.to_stats_interval()
    lo, hi = page_bounds(len(stats), interval_days(interval), page)
    return list(stats[lo:hi])


def page_count(n_items: int, interval: AnyInterval) -> int:
    if isinstance(interval, StatsTimeIntervalWithToday):
        interval = interval.to_stats_interval()
    size = interval_days(interval)
    return max(1, (n_items + size - 1) // size)
