"""
Unit handling for glucose values and estimated A1c.

Glucose is stored internally in mg/dL; conversion happens only at the edges
(loading mmol/L exports and formatting values for display).
"""

from enum import Enum
from typing import Union

import numpy as np
import pandas as pd

MMOL_FACTOR = 18.0182


class GlucoseUnits(str, Enum):
    """Display unit for glucose values."""
    MG_DL = "mg/dL"
    MMOL_L = "mmol/L"


class EA1cDisplayUnit(str, Enum):
    """Display unit for estimated A1c."""
    PERCENT = "percent"
    MMOL_MOL = "mmol/mol"


class TimeInRangeType(str, Enum):
    """Which range counts as "in range" for time-in-range figures."""
    STANDARD = "timeInRange"        # low limit .. high limit
    TIGHT = "timeInTightRange"      # low limit .. tight high

    @property
    def display_name(self) -> str:
        return "TIR" if self is TimeInRangeType.STANDARD else "TITR"


Numeric = Union[float, np.ndarray, pd.Series]


def mmol_to_mg_dl(value: Numeric) -> Numeric:
    """Convert mmol/L to mg/dL."""
    return value * MMOL_FACTOR


def to_display_units(value_mg_dl: Numeric, units: GlucoseUnits) -> Numeric:
    """Convert an internal mg/dL value into the requested display unit."""
    if units is GlucoseUnits.MMOL_L:
        return value_mg_dl / MMOL_FACTOR
    return value_mg_dl


def format_glucose(value_mg_dl: float, units: GlucoseUnits) -> str:
    """Format a glucose value with the precision customary for the unit."""
    if units is GlucoseUnits.MMOL_L:
        return f"{to_display_units(value_mg_dl, units):.1f} {units.value}"
    return f"{value_mg_dl:.0f} {units.value}"


def ea1c_percent(mean_mg_dl: float) -> float:
    """Estimated A1c (%) from mean glucose using the ADAG regression."""
    return (mean_mg_dl + 46.7) / 28.7


def gmi_percent(mean_mg_dl: float) -> float:
    """Glucose Management Indicator (%), Bergenstal 2018."""
    return 3.31 + 0.02392 * mean_mg_dl


def percent_to_mmol_mol(percent: float) -> float:
    """Convert an A1c percentage (NGSP) into IFCC mmol/mol."""
    return (percent - 2.15) * 10.929


def format_ea1c(percent: float, unit: EA1cDisplayUnit) -> str:
    if unit is EA1cDisplayUnit.MMOL_MOL:
        return f"{percent_to_mmol_mol(percent):.0f} mmol/mol"
    return f"{percent:.1f}%"
