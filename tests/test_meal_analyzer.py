from __future__ import annotations

import pandas as pd
import pytest

from stats_dashboard.analyzers import MealAnalyzer
from stats_dashboard.intervals import StatsTimeInterval


def test_daily_meal_totals(meals_df: pd.DataFrame, now: pd.Timestamp) -> None:
    stats = MealAnalyzer(meals_df).daily_meal_stats(StatsTimeInterval.WEEK, now)
    assert len(stats) == 7
    assert all(s.carbs == 40.0 and s.fat == 10.0 and s.protein == 20.0 for s in stats)


def test_hourly_meal_totals(meals_df: pd.DataFrame, now: pd.Timestamp) -> None:
    stats = MealAnalyzer(meals_df).hourly_meal_stats(now)
    assert len(stats) == 24
    breakfast = [s for s in stats if s.carbs > 0]
    assert len(breakfast) == 1
    assert breakfast[0].period_start.hour == 8


def test_meal_summary(meals_df: pd.DataFrame, now: pd.Timestamp) -> None:
    summary = MealAnalyzer(meals_df).summary(StatsTimeInterval.MONTH, now)
    # Ten days of data spread over a thirty-day window
    assert summary.days == 30
    assert summary.meal_count == 11
    assert summary.average_carbs == pytest.approx(40.0 * 11 / 30)


def test_day_summary_is_the_24_hour_total(now: pd.Timestamp) -> None:
    df = pd.DataFrame({
        "timestamp": [now - pd.Timedelta(hours=1)],
        "carbs": [60.0],
        "fat": [0.0],
        "protein": [0.0],
    })
    summary = MealAnalyzer(df).summary(StatsTimeInterval.DAY, now)
    assert summary.days == 1
    assert summary.meal_count == 1
    assert summary.average_carbs == pytest.approx(60.0)


def test_missing_macros_count_as_zero(now: pd.Timestamp) -> None:
    df = pd.DataFrame({
        "timestamp": pd.to_datetime(["2025-03-15 12:00:00"]),
        "carbs": [5.0],
        "fat": [None],
        "protein": [None],
    })
    stats = MealAnalyzer(df).daily_meal_stats(StatsTimeInterval.WEEK, now)
    assert stats[-1].carbs == 5.0
    assert stats[-1].fat == 0.0


def test_no_meals(now: pd.Timestamp) -> None:
    analyzer = MealAnalyzer(pd.DataFrame())
    assert analyzer.daily_meal_stats(StatsTimeInterval.WEEK, now) == []
    assert analyzer.summary(StatsTimeInterval.WEEK, now) is None
