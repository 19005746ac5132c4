"""Analyzers computing statistics for each dashboard domain."""

from stats_dashboard.analyzers.glucose import GlucoseAnalyzer
from stats_dashboard.analyzers.insulin import InsulinAnalyzer
from stats_dashboard.analyzers.looping import LoopAnalyzer
from stats_dashboard.analyzers.meals import MealAnalyzer
from stats_dashboard.analyzers.aggregator import (
    StatsAggregator,
    StatsSnapshot,
    page_daily_stats,
    page_count,
)

__all__ = [
    "GlucoseAnalyzer",
    "InsulinAnalyzer",
    "LoopAnalyzer",
    "MealAnalyzer",
    "StatsAggregator",
    "StatsSnapshot",
    "page_daily_stats",
    "page_count",
]
