from __future__ import annotations

import pytest

from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import StatsTimeInterval, StatsTimeIntervalWithToday
from stats_dashboard.selection import (
    GlucoseChartType,
    InsulinChartType,
    SelectionState,
    StatisticViewType,
    chart_types_for,
    glucose_interval_options,
    select_glucose_chart_type,
    select_glucose_interval,
    select_insulin_chart_type,
    select_meal_interval,
    select_view,
    set_glucose_day_selected,
)

BY_DAY = [GlucoseChartType.PERCENTILE_BY_DAY, GlucoseChartType.DISTRIBUTION_BY_DAY]
BY_TIME = [GlucoseChartType.PERCENTILE_BY_TIME, GlucoseChartType.DISTRIBUTION_BY_TIME]


def test_initial_selection() -> None:
    state = SelectionState.initial()
    assert state.selected_view is StatisticViewType.GLUCOSE
    assert state.glucose_chart_type is GlucoseChartType.PERCENTILE_BY_TIME
    assert state.glucose_interval is StatsTimeIntervalWithToday.TODAY
    assert state.insulin_interval is StatsTimeInterval.WEEK
    assert state.is_glucose_day_selected is False


def test_initial_selection_uses_configured_intervals() -> None:
    config = DashboardConfig()
    config.defaults.glucose_interval = "month"
    config.defaults.meal_interval = "day"
    state = SelectionState.initial(config)
    assert state.glucose_interval is StatsTimeIntervalWithToday.MONTH
    assert state.meal_interval is StatsTimeInterval.DAY


@pytest.mark.parametrize("chart_type", BY_DAY)
@pytest.mark.parametrize(
    "interval", [StatsTimeIntervalWithToday.DAY, StatsTimeIntervalWithToday.TODAY]
)
def test_switch_to_by_day_chart_moves_single_day_interval_to_week(chart_type, interval) -> None:
    state = SelectionState(glucose_interval=interval)
    new_state = select_glucose_chart_type(state, chart_type)
    assert new_state.glucose_chart_type is chart_type
    assert new_state.glucose_interval is StatsTimeIntervalWithToday.WEEK


@pytest.mark.parametrize("chart_type", BY_DAY)
def test_switch_to_by_day_chart_keeps_multi_day_interval(chart_type) -> None:
    state = SelectionState(glucose_interval=StatsTimeIntervalWithToday.MONTH)
    assert select_glucose_chart_type(state, chart_type).glucose_interval is StatsTimeIntervalWithToday.MONTH


@pytest.mark.parametrize("chart_type", BY_TIME)
def test_switch_back_to_by_time_chart_keeps_interval(chart_type) -> None:
    state = SelectionState(
        glucose_chart_type=GlucoseChartType.PERCENTILE_BY_DAY,
        glucose_interval=StatsTimeIntervalWithToday.WEEK,
    )
    assert select_glucose_chart_type(state, chart_type).glucose_interval is StatsTimeIntervalWithToday.WEEK


def test_switching_chart_type_clears_day_selection() -> None:
    state = set_glucose_day_selected(
        SelectionState(glucose_chart_type=GlucoseChartType.PERCENTILE_BY_DAY,
                       glucose_interval=StatsTimeIntervalWithToday.WEEK),
        True,
    )
    assert state.is_glucose_day_selected
    new_state = select_glucose_chart_type(state, GlucoseChartType.DISTRIBUTION_BY_DAY)
    assert new_state.is_glucose_day_selected is False


@pytest.mark.parametrize("chart_type", BY_DAY)
def test_by_day_options_exclude_day_and_today(chart_type) -> None:
    options = glucose_interval_options(chart_type)
    assert StatsTimeIntervalWithToday.DAY not in options
    assert StatsTimeIntervalWithToday.TODAY not in options
    assert options == [
        StatsTimeIntervalWithToday.WEEK,
        StatsTimeIntervalWithToday.MONTH,
        StatsTimeIntervalWithToday.TOTAL,
    ]


@pytest.mark.parametrize("chart_type", BY_TIME)
def test_by_time_options_are_complete(chart_type) -> None:
    assert set(glucose_interval_options(chart_type)) == set(StatsTimeIntervalWithToday)


def test_select_unavailable_glucose_interval_raises() -> None:
    state = SelectionState(
        glucose_chart_type=GlucoseChartType.DISTRIBUTION_BY_DAY,
        glucose_interval=StatsTimeIntervalWithToday.WEEK,
    )
    with pytest.raises(ValueError):
        select_glucose_interval(state, StatsTimeIntervalWithToday.TODAY)


def test_select_glucose_interval_accepts_raw_value() -> None:
    state = select_glucose_interval(SelectionState(), "total")
    assert state.glucose_interval is StatsTimeIntervalWithToday.TOTAL


def test_transitions_return_new_state() -> None:
    state = SelectionState()
    new_state = select_view(state, StatisticViewType.MEALS)
    new_state = select_meal_interval(new_state, StatsTimeInterval.MONTH)
    new_state = select_insulin_chart_type(new_state, InsulinChartType.BOLUS_DISTRIBUTION)
    assert state == SelectionState()
    assert new_state.selected_view is StatisticViewType.MEALS
    assert new_state.meal_interval is StatsTimeInterval.MONTH
    assert new_state.insulin_chart_type is InsulinChartType.BOLUS_DISTRIBUTION


def test_chart_types_per_view() -> None:
    assert chart_types_for(StatisticViewType.GLUCOSE) == list(GlucoseChartType)
    assert chart_types_for(StatisticViewType.INSULIN) == list(InsulinChartType)
