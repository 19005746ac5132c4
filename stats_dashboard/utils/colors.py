"""
Color utilities for statistics charts.

Provides the palette for glucose range bands and for the component series
of insulin, meal and loop charts.
"""

from typing import Dict


# =============================================================================
# GLUCOSE RANGE COLORS
# =============================================================================

# Keyed by GlucoseRange value
GLUCOSE_RANGE_COLORS: Dict[str, str] = {
    'very_low': '#8B0000',     # <54 - dark red
    'low': '#ef4444',          # 54-69 - red
    'tight': '#10b981',        # 70-140 - green
    'upper_range': '#6BCB77',  # 140-180 - light green
    'high': '#f59e0b',         # 180-250 - amber
    'very_high': '#f97316',    # >250 - orange
}

# Three-way split used by the sector chart
SECTOR_COLORS: Dict[str, str] = {
    'below': '#ef4444',
    'in_range': '#10b981',
    'above': '#f59e0b',
}

# Percentile bands of the AGP
PERCENTILE_BAND_COLORS = {
    'outer': 'rgba(16, 185, 129, 0.15)',   # 10-90
    'inner': 'rgba(16, 185, 129, 0.35)',   # 25-75
    'median': '#059669',
}


# =============================================================================
# COMPONENT COLORS
# =============================================================================

INSULIN_COLORS: Dict[str, str] = {
    'tdd': '#3b82f6',
    'manual_bolus': '#3b82f6',
    'smb': '#06b6d4',
    'external': '#a855f7',
    'basal': '#94a3b8',
}

MEAL_COLORS: Dict[str, str] = {
    'carbs': '#f59e0b',
    'fat': '#ef4444',
    'protein': '#22c55e',
}

LOOP_COLORS: Dict[str, str] = {
    'successful': '#10b981',
    'failed': '#ef4444',
}


# =============================================================================
# THEME
# =============================================================================

THEME_BACKGROUNDS: Dict[str, str] = {
    'light': '#ffffff',
    'dark': '#0e1117',
}

PLOTLY_TEMPLATES: Dict[str, str] = {
    'light': 'plotly_white',
    'dark': 'plotly_dark',
}
