"""
Card resolution for the statistics screen.

``resolve_cards`` decides, for the selected tab, which cards to show: a
no-data or coming-soon placeholder, or chart cards carrying the parameter
set their chart needs. It has no UI dependency so every branch of the
decision table can be checked directly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

from stats_dashboard.analyzers.aggregator import StatsSnapshot
from stats_dashboard.intervals import StatsTimeInterval, StatsTimeIntervalWithToday
from stats_dashboard.metrics.stat_records import has_bolus_data, has_meal_data
from stats_dashboard.selection import (
    GlucoseChartType,
    InsulinChartType,
    LoopingChartType,
    MealChartType,
    SelectionState,
    StatisticViewType,
)
from stats_dashboard.utils.colors import THEME_BACKGROUNDS, PLOTLY_TEMPLATES


@dataclass(frozen=True)
class RenderContext:
    """Ambient rendering values, passed explicitly instead of looked up."""
    color_scheme: str = "light"

    @property
    def background_color(self) -> str:
        return THEME_BACKGROUNDS.get(self.color_scheme, THEME_BACKGROUNDS['light'])

    @property
    def plotly_template(self) -> str:
        return PLOTLY_TEMPLATES.get(self.color_scheme, PLOTLY_TEMPLATES['light'])


class ChartKind(str, Enum):
    GLUCOSE_PERCENTILE = "glucose_percentile"
    GLUCOSE_DISTRIBUTION = "glucose_distribution"
    GLUCOSE_DAILY_PERCENTILE = "glucose_daily_percentile"
    GLUCOSE_DAILY_DISTRIBUTION = "glucose_daily_distribution"
    GLUCOSE_METRICS = "glucose_metrics"
    TOTAL_DAILY_DOSE = "total_daily_dose"
    BOLUS_DISTRIBUTION = "bolus_distribution"
    LOOPING_PERFORMANCE = "looping_performance"
    MEAL_TOTALS = "meal_totals"


@dataclass(frozen=True)
class Placeholder:
    """Empty-state card: title, icon name and description."""
    title: str
    icon: str
    description: str


@dataclass(frozen=True)
class ChartCard:
    """A chart card and the parameter set its chart is built from."""
    kind: ChartKind
    params: Dict[str, Any] = field(default_factory=dict)


Card = Union[Placeholder, ChartCard]


@dataclass(frozen=True)
class TabLayout:
    cards: List[Card]
    hint: str = ""

    @property
    def is_placeholder(self) -> bool:
        return all(isinstance(card, Placeholder) for card in self.cards)


# =============================================================================
# PLACEHOLDERS
# =============================================================================

NO_GLUCOSE_DATA = Placeholder(
    "No Glucose Data", "bar_chart",
    "Glucose statistics will appear here once data is available.",
)
NO_TDD_DATA = Placeholder(
    "No TDD Data", "stacked_bar_chart",
    "Total Daily Doses will appear here once data is available.",
)
NO_BOLUS_DATA = Placeholder(
    "No Bolus Data", "vaccines",
    "Bolus statistics will appear here once data is available.",
)
NO_LOOP_DATA = Placeholder(
    "No Loop Data", "autorenew",
    "Loop statistics will appear here once data is available.",
)
NO_MEAL_DATA = Placeholder(
    "No Meal Data", "restaurant",
    "Meal statistics will appear here once data is available.",
)


def coming_soon(description: str) -> Placeholder:
    return Placeholder("Coming soon.", "hourglass_empty", description)


# =============================================================================
# HINTS
# =============================================================================

GLUCOSE_HINTS = {
    GlucoseChartType.PERCENTILE_BY_TIME:
        "Hover over the AGP graph or the Time-in-Range ring to reveal more details.",
    GlucoseChartType.DISTRIBUTION_BY_TIME:
        "Hover over the Time-in-Range ring to reveal more details.",
    GlucoseChartType.PERCENTILE_BY_DAY:
        "Hover over a day to reveal more details. Page through time with the slider.",
    GlucoseChartType.DISTRIBUTION_BY_DAY:
        "Hover over a bar to reveal more details. Page through time with the slider.",
}

BAR_CHART_HINT = "Hover over a bar to reveal more details."


# =============================================================================
# RESOLUTION
# =============================================================================

def resolve_cards(selection: SelectionState, snapshot: StatsSnapshot) -> TabLayout:
    """Cards for the tab currently selected."""
    view = selection.selected_view
    if view is StatisticViewType.GLUCOSE:
        return resolve_glucose(selection, snapshot)
    if view is StatisticViewType.INSULIN:
        return resolve_insulin(selection, snapshot)
    if view is StatisticViewType.LOOPING:
        return resolve_looping(selection, snapshot)
    return resolve_meals(selection, snapshot)


def _glucose_params(snapshot: StatsSnapshot) -> Dict[str, Any]:
    return {
        'low_limit': snapshot.low_limit,
        'high_limit': snapshot.high_limit,
        'units': snapshot.units,
        'time_in_range_type': snapshot.time_in_range_type,
    }


def resolve_glucose(selection: SelectionState, snapshot: StatsSnapshot) -> TabLayout:
    """Time-in-range card, then the metrics card unless a day view is active."""
    if snapshot.glucose_count == 0:
        return TabLayout([NO_GLUCOSE_DATA])

    chart_type = selection.glucose_chart_type
    base = _glucose_params(snapshot)

    if chart_type is GlucoseChartType.PERCENTILE_BY_TIME:
        main = ChartCard(ChartKind.GLUCOSE_PERCENTILE, dict(
            base,
            hourly_stats=snapshot.hourly_stats,
            is_today=selection.glucose_interval is StatsTimeIntervalWithToday.TODAY,
        ))
    elif chart_type is GlucoseChartType.DISTRIBUTION_BY_TIME:
        main = ChartCard(ChartKind.GLUCOSE_DISTRIBUTION, dict(
            base,
            glucose_range_stats=snapshot.glucose_range_stats,
        ))
    elif chart_type is GlucoseChartType.PERCENTILE_BY_DAY:
        main = ChartCard(ChartKind.GLUCOSE_DAILY_PERCENTILE, dict(
            base,
            daily_stats=snapshot.daily_percentile_stats,
            selected_interval=selection.glucose_interval.to_stats_interval(),
            is_day_selected=selection.is_glucose_day_selected,
        ))
    else:
        main = ChartCard(ChartKind.GLUCOSE_DAILY_DISTRIBUTION, dict(
            base,
            daily_stats=snapshot.daily_distribution_stats,
            selected_interval=selection.glucose_interval.to_stats_interval(),
            ea1c_display_unit=snapshot.ea1c_display_unit,
            is_day_selected=selection.is_glucose_day_selected,
        ))

    cards: List[Card] = [main]
    if not selection.is_glucose_day_selected and not chart_type.groups_by_day:
        cards.append(ChartCard(ChartKind.GLUCOSE_METRICS, dict(
            base,
            metrics=snapshot.glucose_metrics,
            ea1c_display_unit=snapshot.ea1c_display_unit,
        )))
    return TabLayout(cards, GLUCOSE_HINTS[chart_type])


def resolve_insulin(selection: SelectionState, snapshot: StatsSnapshot) -> TabLayout:
    interval = selection.insulin_interval
    is_day = interval is StatsTimeInterval.DAY

    if selection.insulin_chart_type is InsulinChartType.TOTAL_DAILY_DOSE:
        if not snapshot.daily_tdd_stats:
            return TabLayout([NO_TDD_DATA], BAR_CHART_HINT)
        card = ChartCard(ChartKind.TOTAL_DAILY_DOSE, {
            'selected_interval': interval,
            'tdd_stats': snapshot.hourly_tdd_stats if is_day else snapshot.daily_tdd_stats,
            'summary': snapshot.insulin_summary,
        })
        return TabLayout([card], BAR_CHART_HINT)

    if not snapshot.daily_bolus_stats or not has_bolus_data(snapshot.daily_bolus_stats):
        return TabLayout([NO_BOLUS_DATA], BAR_CHART_HINT)
    card = ChartCard(ChartKind.BOLUS_DISTRIBUTION, {
        'selected_interval': interval,
        'bolus_stats': snapshot.hourly_bolus_stats if is_day else snapshot.daily_bolus_stats,
    })
    return TabLayout([card], BAR_CHART_HINT)


def resolve_looping(selection: SelectionState, snapshot: StatsSnapshot) -> TabLayout:
    chart_type = selection.looping_chart_type
    if chart_type.coming_soon:
        return TabLayout([coming_soon(chart_type.display_name)])
    if not snapshot.loop_stat_records:
        return TabLayout([NO_LOOP_DATA])

    card = ChartCard(ChartKind.LOOPING_PERFORMANCE, {
        'loop_stat_records': snapshot.loop_stat_records,
        'loop_bar_stats': snapshot.loop_bar_stats,
        'selected_interval': selection.loop_interval,
        'stats': snapshot.loop_stats,
    })
    return TabLayout([card], BAR_CHART_HINT)


def resolve_meals(selection: SelectionState, snapshot: StatsSnapshot) -> TabLayout:
    chart_type = selection.meal_chart_type
    if chart_type.coming_soon:
        return TabLayout([coming_soon(chart_type.display_name)], BAR_CHART_HINT)
    if not snapshot.daily_meal_stats or not has_meal_data(snapshot.daily_meal_stats):
        return TabLayout([NO_MEAL_DATA], BAR_CHART_HINT)

    interval = selection.meal_interval
    card = ChartCard(ChartKind.MEAL_TOTALS, {
        'selected_interval': interval,
        'meal_stats': (
            snapshot.hourly_meal_stats if interval is StatsTimeInterval.DAY
            else snapshot.daily_meal_stats
        ),
        'summary': snapshot.meal_summary,
    })
    return TabLayout([card], BAR_CHART_HINT)
