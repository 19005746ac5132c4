from __future__ import annotations

from datetime import datetime

import pytest

from stats_dashboard.analyzers import StatsSnapshot
from stats_dashboard.cards import (
    NO_BOLUS_DATA,
    NO_GLUCOSE_DATA,
    NO_LOOP_DATA,
    NO_MEAL_DATA,
    NO_TDD_DATA,
    ChartCard,
    ChartKind,
    Placeholder,
    RenderContext,
    resolve_cards,
)
from stats_dashboard.intervals import StatsTimeInterval, StatsTimeIntervalWithToday
from stats_dashboard.metrics import BolusStat, HourlyStat, MealStat, TDDStat
from stats_dashboard.selection import (
    GlucoseChartType,
    InsulinChartType,
    LoopingChartType,
    MealChartType,
    SelectionState,
    StatisticViewType,
    chart_types_for,
)

T0 = datetime(2025, 3, 15)

_CHART_FIELDS = {
    StatisticViewType.GLUCOSE: "glucose_chart_type",
    StatisticViewType.INSULIN: "insulin_chart_type",
    StatisticViewType.LOOPING: "looping_chart_type",
    StatisticViewType.MEALS: "meal_chart_type",
}


def _glucose_snapshot() -> StatsSnapshot:
    return StatsSnapshot(
        glucose_count=3,
        hourly_stats=[HourlyStat(8, 120.0, 90.0, 100.0, 140.0, 160.0, 122.0, 3)],
    )


def test_no_glucose_readings_shows_placeholder() -> None:
    selection = SelectionState(glucose_chart_type=GlucoseChartType.PERCENTILE_BY_TIME)
    layout = resolve_cards(selection, StatsSnapshot())
    assert layout.cards == [NO_GLUCOSE_DATA]
    assert layout.is_placeholder
    assert NO_GLUCOSE_DATA.title == "No Glucose Data"


def test_zero_bolus_records_show_placeholder() -> None:
    selection = SelectionState(
        selected_view=StatisticViewType.INSULIN,
        insulin_chart_type=InsulinChartType.BOLUS_DISTRIBUTION,
    )
    snapshot = StatsSnapshot(daily_bolus_stats=[BolusStat(T0, 0.0, 0.0, 0.0)])
    assert resolve_cards(selection, snapshot).cards == [NO_BOLUS_DATA]


def test_carbs_alone_show_meal_card() -> None:
    selection = SelectionState(selected_view=StatisticViewType.MEALS)
    meals = [MealStat(T0, carbs=5.0, fat=0.0, protein=0.0)]
    layout = resolve_cards(selection, StatsSnapshot(daily_meal_stats=meals))
    assert not layout.is_placeholder
    card = layout.cards[0]
    assert card.kind is ChartKind.MEAL_TOTALS
    assert card.params["meal_stats"] == meals


@pytest.mark.parametrize("view", list(StatisticViewType))
def test_empty_snapshot_never_renders_a_chart(view: StatisticViewType) -> None:
    for chart_type in chart_types_for(view):
        selection = SelectionState(selected_view=view, **{_CHART_FIELDS[view]: chart_type})
        layout = resolve_cards(selection, StatsSnapshot())
        assert layout.is_placeholder
        assert all(isinstance(card, Placeholder) for card in layout.cards)


def test_empty_placeholders_per_tab() -> None:
    empty = StatsSnapshot()
    assert resolve_cards(SelectionState(selected_view=StatisticViewType.INSULIN), empty).cards == [NO_TDD_DATA]
    assert resolve_cards(SelectionState(selected_view=StatisticViewType.LOOPING), empty).cards == [NO_LOOP_DATA]
    assert resolve_cards(SelectionState(selected_view=StatisticViewType.MEALS), empty).cards == [NO_MEAL_DATA]


def test_by_time_chart_shows_metrics_card() -> None:
    layout = resolve_cards(SelectionState(), _glucose_snapshot())
    assert [c.kind for c in layout.cards] == [ChartKind.GLUCOSE_PERCENTILE, ChartKind.GLUCOSE_METRICS]
    assert layout.cards[0].params["is_today"] is True
    assert layout.hint


def test_day_selection_hides_metrics_card() -> None:
    selection = SelectionState(is_glucose_day_selected=True)
    layout = resolve_cards(selection, _glucose_snapshot())
    assert [c.kind for c in layout.cards] == [ChartKind.GLUCOSE_PERCENTILE]


@pytest.mark.parametrize(
    "chart_type, kind",
    [
        (GlucoseChartType.PERCENTILE_BY_DAY, ChartKind.GLUCOSE_DAILY_PERCENTILE),
        (GlucoseChartType.DISTRIBUTION_BY_DAY, ChartKind.GLUCOSE_DAILY_DISTRIBUTION),
    ],
)
def test_by_day_charts_have_no_metrics_card(chart_type, kind) -> None:
    selection = SelectionState(glucose_chart_type=chart_type, glucose_interval=StatsTimeIntervalWithToday.MONTH)
    layout = resolve_cards(selection, _glucose_snapshot())
    assert [c.kind for c in layout.cards] == [kind]
    assert layout.cards[0].params["selected_interval"] is StatsTimeInterval.MONTH


def test_insulin_day_interval_uses_hourly_stats() -> None:
    hourly = [TDDStat(T0, 1.0)]
    daily = [TDDStat(T0, 24.0)]
    snapshot = StatsSnapshot(hourly_tdd_stats=hourly, daily_tdd_stats=daily)

    day = resolve_cards(
        SelectionState(selected_view=StatisticViewType.INSULIN, insulin_interval=StatsTimeInterval.DAY),
        snapshot,
    )
    week = resolve_cards(
        SelectionState(selected_view=StatisticViewType.INSULIN, insulin_interval=StatsTimeInterval.WEEK),
        snapshot,
    )
    assert day.cards[0].params["tdd_stats"] == hourly
    assert week.cards[0].params["tdd_stats"] == daily


@pytest.mark.parametrize("chart_type", [LoopingChartType.CGM_CONNECTION_TRACE, LoopingChartType.UP_TIME])
def test_unfinished_looping_charts_are_coming_soon(chart_type) -> None:
    selection = SelectionState(selected_view=StatisticViewType.LOOPING, looping_chart_type=chart_type)
    layout = resolve_cards(selection, StatsSnapshot())
    assert layout.cards[0].title == "Coming soon."


def test_meal_hypo_hyper_chart_is_coming_soon() -> None:
    selection = SelectionState(
        selected_view=StatisticViewType.MEALS,
        meal_chart_type=MealChartType.MEAL_TO_HYPO_HYPER_DISTRIBUTION,
    )
    snapshot = StatsSnapshot(daily_meal_stats=[MealStat(T0, 40.0, 10.0, 20.0)])
    assert resolve_cards(selection, snapshot).cards[0].title == "Coming soon."


def test_render_context() -> None:
    assert RenderContext("dark").plotly_template == "plotly_dark"
    assert RenderContext("unknown").plotly_template == RenderContext().plotly_template
    assert isinstance(ChartCard(ChartKind.MEAL_TOTALS).params, dict)
