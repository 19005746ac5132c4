"""
Value objects produced by the analyzers, one per time bucket.

Every record is frozen: the aggregator builds fresh records per request and
nothing downstream mutates them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Dict, Iterable, Optional


class GlucoseRange(str, Enum):
    """Glucose bands, low to high."""
    VERY_LOW = "very_low"
    LOW = "low"
    TIGHT = "tight"
    UPPER_RANGE = "upper_range"
    HIGH = "high"
    VERY_HIGH = "very_high"


# =============================================================================
# GLUCOSE
# =============================================================================

@dataclass(frozen=True)
class HourlyStat:
    """Percentile band for one hour of the day (AGP)."""
    hour: int
    median: float
    p10: float
    p25: float
    p75: float
    p90: float
    mean: float
    count: int


@dataclass(frozen=True)
class GlucoseRangeStat:
    """Share of readings per glucose band for one hour of the day."""
    hour: int
    percentages: Dict[GlucoseRange, float]
    count: int

    def __hash__(self) -> int:
        return hash((self.hour, tuple(sorted(self.percentages.items())), self.count))


@dataclass(frozen=True)
class DailyPercentileStat:
    """Percentile band for one calendar day."""
    day: date
    median: float
    p10: float
    p25: float
    p75: float
    p90: float
    mean: float
    count: int


@dataclass(frozen=True)
class DailyDistributionStat:
    """Share of readings per glucose band for one calendar day."""
    day: date
    percentages: Dict[GlucoseRange, float]
    count: int

    def __hash__(self) -> int:
        return hash((self.day, tuple(sorted(self.percentages.items())), self.count))


# =============================================================================
# INSULIN
# =============================================================================

@dataclass(frozen=True)
class TDDStat:
    """Total insulin delivered in one bucket (hour or day)."""
    period_start: datetime
    amount: float


@dataclass(frozen=True)
class BolusStat:
    """Bolus insulin split by origin for one bucket."""
    period_start: datetime
    manual_bolus: float
    smb: float
    external: float

    @property
    def total(self) -> float:
        return self.manual_bolus + self.smb + self.external


@dataclass(frozen=True)
class InsulinSummary:
    """Per-day averages over the days of the selected interval."""
    average_tdd: float
    average_bolus: float
    average_basal: float
    bolus_share: float  # percent of TDD
    days: int


# =============================================================================
# MEALS
# =============================================================================

@dataclass(frozen=True)
class MealStat:
    """Macronutrients logged in one bucket (grams)."""
    period_start: datetime
    carbs: float
    fat: float
    protein: float

    @property
    def total(self) -> float:
        return self.carbs + self.fat + self.protein


@dataclass(frozen=True)
class MealSummary:
    average_carbs: float
    average_fat: float
    average_protein: float
    meal_count: int
    days: int


# =============================================================================
# LOOPING
# =============================================================================

@dataclass(frozen=True)
class LoopStatRecord:
    """One loop cycle."""
    start: datetime
    end: Optional[datetime]
    duration_seconds: float
    interval_seconds: Optional[float]  # since the previous cycle started
    succeeded: bool
    status: str


@dataclass(frozen=True)
class LoopBarStat:
    """Successful and failed cycles in one bucket."""
    period_start: datetime
    successful: int
    failed: int

    @property
    def total(self) -> int:
        return self.successful + self.failed


@dataclass(frozen=True)
class LoopStatsSummary:
    loop_count: int
    successful: int
    failed: int
    success_rate: float        # percent
    loops_per_day: float
    median_duration_seconds: float
    average_interval_minutes: float
    glucose_count: int
    readings_per_day: float


# =============================================================================
# HAS-DATA PREDICATES
# =============================================================================

def has_bolus_data(stats: Iterable[BolusStat]) -> bool:
    """True when at least one record has a positive bolus component."""
    return any(s.manual_bolus > 0 or s.smb > 0 or s.external > 0 for s in stats)


def has_meal_data(stats: Iterable[MealStat]) -> bool:
    """True when at least one record has a positive macronutrient."""
    return any(s.carbs > 0 or s.fat > 0 or s.protein > 0 for s in stats)
