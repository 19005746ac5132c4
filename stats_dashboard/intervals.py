"""
Selectable time intervals and the windows they cover.

Two vocabularies exist: insulin and meal statistics use ``StatsTimeInterval``
(day, week, month, total); glucose and loop statistics additionally offer
``today`` through ``StatsTimeIntervalWithToday``.
"""

from enum import Enum
from typing import Tuple, Union

import pandas as pd

from stats_dashboard.utils.timeseries import local_midnight


class StatsTimeInterval(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    TOTAL = "total"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.value]


class StatsTimeIntervalWithToday(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    TOTAL = "total"
    TODAY = "today"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self.value]

    def to_stats_interval(self) -> StatsTimeInterval:
        """Interval used by day-of-period charts: month/total pass through, anything else is a week."""
        if self in (StatsTimeIntervalWithToday.MONTH, StatsTimeIntervalWithToday.TOTAL):
            return StatsTimeInterval(self.value)
        return StatsTimeInterval.WEEK


AnyInterval = Union[StatsTimeInterval, StatsTimeIntervalWithToday]

_DISPLAY_NAMES = {
    "day": "D",
    "week": "W",
    "month": "M",
    "total": "3 M",
    "today": "Today",
}

# Calendar days covered by the multi-day intervals (including today)
INTERVAL_DAYS = {
    "week": 7,
    "month": 30,
    "total": 90,
}


def is_hourly(interval: AnyInterval) -> bool:
    """Whether bucketed totals for this interval are hourly rather than daily."""
    return interval.value in ("day", "today")


def interval_days(interval: AnyInterval) -> int:
    """Number of calendar days an interval spans; 1 for day and today."""
    return INTERVAL_DAYS.get(interval.value, 1)


def interval_window(interval: AnyInterval, now: pd.Timestamp) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Start and end (both inclusive) of the window an interval covers.

    - day: the 24 hourly buckets ending with the hour containing ``now``
    - today: local midnight to ``now``
    - week/month/total: the last 7/30/90 calendar days including today
    """
    now = pd.Timestamp(now)
    if interval.value == "day":
        return now.floor('h') - pd.Timedelta(hours=23), now
    if interval.value == "today":
        return local_midnight(now), now
    days = INTERVAL_DAYS[interval.value]
    return local_midnight(now) - pd.Timedelta(days=days - 1), now
