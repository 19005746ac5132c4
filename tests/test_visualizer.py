from __future__ import annotations

from datetime import date, datetime

import plotly.graph_objects as go
import pytest

from stats_dashboard.analyzers import GlucoseAnalyzer, StatsAggregator
from stats_dashboard.cards import ChartCard, ChartKind, RenderContext, resolve_cards
from stats_dashboard.intervals import StatsTimeInterval, StatsTimeIntervalWithToday
from stats_dashboard.metrics import (
    BolusStat,
    DailyDistributionStat,
    GlucoseRange,
    LoopBarStat,
    MealStat,
    TDDStat,
)
from stats_dashboard.selection import GlucoseChartType, SelectionState
from stats_dashboard.utils.units import GlucoseUnits
from stats_dashboard.visualizers import PlotlyVisualizer

T0 = datetime(2025, 3, 15)


def test_glucose_cards_render(dataset, now) -> None:
    viz = PlotlyVisualizer()
    snapshot = StatsAggregator(dataset).aggregate(SelectionState(), now)
    for card in resolve_cards(SelectionState(), snapshot).cards:
        fig = viz.figure_for(card)
        assert isinstance(fig, go.Figure)
        assert len(fig.data) > 0


@pytest.mark.parametrize("chart_type", list(GlucoseChartType))
def test_every_glucose_chart_type_renders(chart_type, dataset, now) -> None:
    selection = SelectionState(glucose_chart_type=chart_type, glucose_interval=StatsTimeIntervalWithToday.WEEK)
    snapshot = StatsAggregator(dataset).aggregate(selection, now)
    card = resolve_cards(selection, snapshot).cards[0]
    assert isinstance(PlotlyVisualizer().figure_for(card), go.Figure)


def test_bar_charts_stack_components() -> None:
    viz = PlotlyVisualizer(context=RenderContext("dark"))
    bolus = viz.figure_for(ChartCard(ChartKind.BOLUS_DISTRIBUTION, {
        "selected_interval": StatsTimeInterval.WEEK,
        "bolus_stats": [BolusStat(T0, 5.0, 0.5, 2.0)],
    }))
    assert [trace.name for trace in bolus.data] == ["Manual Bolus", "Smb", "External"]
    assert bolus.layout.barmode == "stack"
    assert bolus.layout.template.layout.paper_bgcolor is not None

    meals = viz.figure_for(ChartCard(ChartKind.MEAL_TOTALS, {
        "selected_interval": StatsTimeInterval.DAY,
        "meal_stats": [MealStat(T0, 40.0, 10.0, 20.0)],
    }))
    assert len(meals.data) == 3

    loops = viz.figure_for(ChartCard(ChartKind.LOOPING_PERFORMANCE, {
        "selected_interval": StatsTimeIntervalWithToday.TODAY,
        "loop_bar_stats": [LoopBarStat(T0, 11, 1)],
    }))
    assert list(loops.data[0].y) == [11.0]

    tdd = viz.figure_for(ChartCard(ChartKind.TOTAL_DAILY_DOSE, {
        "selected_interval": StatsTimeInterval.WEEK,
        "tdd_stats": [TDDStat(T0, 24.0)],
    }))
    assert list(tdd.data[0].y) == [24.0]


def test_range_labels_follow_units() -> None:
    viz = PlotlyVisualizer()
    assert viz.range_labels(GlucoseUnits.MG_DL)[GlucoseRange.TIGHT] == "70-140"
    assert viz.range_labels(GlucoseUnits.MMOL_L)[GlucoseRange.VERY_LOW] == "<3.0"


def test_daily_distribution_has_one_trace_per_band() -> None:
    stat = DailyDistributionStat(
        day=date(2025, 3, 15),
        percentages={band: 100 / 6 for band in GlucoseRange},
        count=6,
    )
    fig = PlotlyVisualizer().create_daily_distribution_chart([stat])
    assert len(fig.data) == len(GlucoseRange)


def test_metrics_card_without_metrics() -> None:
    card = ChartCard(ChartKind.GLUCOSE_METRICS, {"metrics": GlucoseAnalyzer(None).analyze()})
    assert PlotlyVisualizer().figure_for(card) is None
