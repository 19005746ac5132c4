"""Metric dataclasses for aggregation results."""

from stats_dashboard.metrics.glucose_metrics import GlucoseMetrics
from stats_dashboard.metrics.stat_records import (
    GlucoseRange,
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
    has_bolus_data,
    has_meal_data,
)

__all__ = [
    "GlucoseMetrics",
    "GlucoseRange",
    "HourlyStat",
    "GlucoseRangeStat",
    "DailyPercentileStat",
    "DailyDistributionStat",
    "TDDStat",
    "BolusStat",
    "InsulinSummary",
    "MealStat",
    "MealSummary",
    "LoopStatRecord",
    "LoopBarStat",
    "LoopStatsSummary",
    "has_bolus_data",
    "has_meal_data",
]
