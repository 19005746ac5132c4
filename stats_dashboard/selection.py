"""
View selection state for the statistics screen.

Selection has two axes: the primary tab and a per-tab chart type, plus one
interval per tab. ``SelectionState`` is immutable; every user action goes
through one of the transition functions below, which return a new state.
The only automatic transition is the coercion in ``select_glucose_chart_type``.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Union

from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import StatsTimeInterval, StatsTimeIntervalWithToday


class StatisticViewType(str, Enum):
    GLUCOSE = "glucose"
    INSULIN = "insulin"
    LOOPING = "looping"
    MEALS = "meals"

    @property
    def display_name(self) -> str:
        return self.value.title()


class GlucoseChartType(str, Enum):
    PERCENTILE_BY_TIME = "percentileByTime"
    DISTRIBUTION_BY_TIME = "distributionByTime"
    PERCENTILE_BY_DAY = "percentileByDay"
    DISTRIBUTION_BY_DAY = "distributionByDay"

    @property
    def display_name(self) -> str:
        return {
            "percentileByTime": "Percentile by Time",
            "distributionByTime": "Distribution by Time",
            "percentileByDay": "Percentile by Day",
            "distributionByDay": "Distribution by Day",
        }[self.value]

    @property
    def groups_by_day(self) -> bool:
        return self in (GlucoseChartType.PERCENTILE_BY_DAY, GlucoseChartType.DISTRIBUTION_BY_DAY)


class InsulinChartType(str, Enum):
    TOTAL_DAILY_DOSE = "totalDailyDose"
    BOLUS_DISTRIBUTION = "bolusDistribution"

    @property
    def display_name(self) -> str:
        return {
            "totalDailyDose": "Total Daily Dose",
            "bolusDistribution": "Bolus Distribution",
        }[self.value]


class LoopingChartType(str, Enum):
    LOOPING_PERFORMANCE = "loopingPerformance"
    CGM_CONNECTION_TRACE = "cgmConnectionTrace"
    UP_TIME = "upTime"

    @property
    def display_name(self) -> str:
        return {
            "loopingPerformance": "Looping Performance",
            "cgmConnectionTrace": "CGM Connection Trace",
            "upTime": "Up-Time",
        }[self.value]

    @property
    def coming_soon(self) -> bool:
        return self is not LoopingChartType.LOOPING_PERFORMANCE


class MealChartType(str, Enum):
    TOTAL_MEALS = "totalMeals"
    MEAL_TO_HYPO_HYPER_DISTRIBUTION = "mealToHypoHyperDistribution"

    @property
    def display_name(self) -> str:
        return {
            "totalMeals": "Total Meals",
            "mealToHypoHyperDistribution": "Meal to Hypo/Hyper",
        }[self.value]

    @property
    def coming_soon(self) -> bool:
        return self is MealChartType.MEAL_TO_HYPO_HYPER_DISTRIBUTION


ChartType = Union[GlucoseChartType, InsulinChartType, LoopingChartType, MealChartType]

_DAY_LIKE = (StatsTimeIntervalWithToday.DAY, StatsTimeIntervalWithToday.TODAY)


@dataclass(frozen=True)
class SelectionState:
    """Currently selected tab, chart types and intervals."""
    selected_view: StatisticViewType = StatisticViewType.GLUCOSE

    glucose_chart_type: GlucoseChartType = GlucoseChartType.PERCENTILE_BY_TIME
    insulin_chart_type: InsulinChartType = InsulinChartType.TOTAL_DAILY_DOSE
    looping_chart_type: LoopingChartType = LoopingChartType.LOOPING_PERFORMANCE
    meal_chart_type: MealChartType = MealChartType.TOTAL_MEALS

    glucose_interval: StatsTimeIntervalWithToday = StatsTimeIntervalWithToday.TODAY
    insulin_interval: StatsTimeInterval = StatsTimeInterval.WEEK
    loop_interval: StatsTimeIntervalWithToday = StatsTimeIntervalWithToday.TODAY
    meal_interval: StatsTimeInterval = StatsTimeInterval.WEEK

    # A day picked inside a by-day glucose chart
    is_glucose_day_selected: bool = False

    @classmethod
    def initial(cls, config: Optional[DashboardConfig] = None) -> 'SelectionState':
        """Initial state: glucose tab, percentile-by-time, configured intervals."""
        defaults = (config or DashboardConfig()).defaults
        return cls(
            glucose_interval=StatsTimeIntervalWithToday(defaults.glucose_interval),
            insulin_interval=StatsTimeInterval(defaults.insulin_interval),
            loop_interval=StatsTimeIntervalWithToday(defaults.loop_interval),
            meal_interval=StatsTimeInterval(defaults.meal_interval),
        )


# =============================================================================
# OPTION SETS
# =============================================================================

def glucose_interval_options(chart_type: GlucoseChartType) -> List[StatsTimeIntervalWithToday]:
    """Intervals offered for a glucose chart type.

    Day-of-period charts cannot show a single day, so day and today are dropped.
    """
    if chart_type.groups_by_day:
        return [
            StatsTimeIntervalWithToday.WEEK,
            StatsTimeIntervalWithToday.MONTH,
            StatsTimeIntervalWithToday.TOTAL,
        ]
    return list(StatsTimeIntervalWithToday)


def loop_interval_options() -> List[StatsTimeIntervalWithToday]:
    return list(StatsTimeIntervalWithToday)


def insulin_interval_options() -> List[StatsTimeInterval]:
    return list(StatsTimeInterval)


def meal_interval_options() -> List[StatsTimeInterval]:
    return list(StatsTimeInterval)


def chart_types_for(view: StatisticViewType) -> list:
    return {
        StatisticViewType.GLUCOSE: list(GlucoseChartType),
        StatisticViewType.INSULIN: list(InsulinChartType),
        StatisticViewType.LOOPING: list(LoopingChartType),
        StatisticViewType.MEALS: list(MealChartType),
    }[view]


# =============================================================================
# TRANSITIONS
# =============================================================================

def select_view(state: SelectionState, view: StatisticViewType) -> SelectionState:
    return replace(state, selected_view=StatisticViewType(view))


def select_glucose_chart_type(state: SelectionState, chart_type: GlucoseChartType) -> SelectionState:
    """Switch the glucose chart type.

    Switching into a day-of-period chart while day or today is selected moves
    the interval to week. The reverse direction never changes the interval.
    """
    chart_type = GlucoseChartType(chart_type)
    interval = state.glucose_interval
    if chart_type.groups_by_day and interval in _DAY_LIKE:
        interval = StatsTimeIntervalWithToday.WEEK
    return replace(
        state,
        glucose_chart_type=chart_type,
        glucose_interval=interval,
        is_glucose_day_selected=False,
    )


def select_glucose_interval(
    state: SelectionState,
    interval: StatsTimeIntervalWithToday
) -> SelectionState:
    """Pick a glucose interval.

    Raises:
        ValueError: If the interval is not offered for the current chart type.
    """
    interval = StatsTimeIntervalWithToday(interval)
    if interval not in glucose_interval_options(state.glucose_chart_type):
        raise ValueError(
            f"Interval {interval.value!r} is not available for "
            f"{state.glucose_chart_type.value!r}"
        )
    return replace(state, glucose_interval=interval)


def select_insulin_chart_type(state: SelectionState, chart_type: InsulinChartType) -> SelectionState:
    return replace(state, insulin_chart_type=InsulinChartType(chart_type))


def select_insulin_interval(state: SelectionState, interval: StatsTimeInterval) -> SelectionState:
    return replace(state, insulin_interval=StatsTimeInterval(interval))


def select_looping_chart_type(state: SelectionState, chart_type: LoopingChartType) -> SelectionState:
    return replace(state, looping_chart_type=LoopingChartType(chart_type))


def select_loop_interval(state: SelectionState, interval: StatsTimeIntervalWithToday) -> SelectionState:
    return replace(state, loop_interval=StatsTimeIntervalWithToday(interval))


def select_meal_chart_type(state: SelectionState, chart_type: MealChartType) -> SelectionState:
    return replace(state, meal_chart_type=MealChartType(chart_type))


def select_meal_interval(state: SelectionState, interval: StatsTimeInterval) -> SelectionState:
    return replace(state, meal_interval=StatsTimeInterval(interval))


def set_glucose_day_selected(state: SelectionState, selected: bool) -> SelectionState:
    return replace(state, is_glucose_day_selected=bool(selected))
