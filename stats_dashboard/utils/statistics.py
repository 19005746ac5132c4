"""
Statistical utilities for diabetes statistics aggregation.

Provides common statistical calculations used across analyzers.
"""

import numpy as np
import pandas as pd
from typing import Dict, Sequence, Union

ArrayLike = Union[np.ndarray, pd.Series, Sequence[float]]


def _clean(values: ArrayLike) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    return values[~np.isnan(values)]


def calculate_sd(values: ArrayLike) -> float:
    """Sample standard deviation; 0.0 for fewer than two values."""
    values = _clean(values)
    if len(values) < 2:
        return 0.0
    return float(np.std(values, ddof=1))


def calculate_cv(values: ArrayLike) -> float:
    """Calculate coefficient of variation (CV).

    CV = (standard deviation / mean) × 100

    Target: <36% per International Consensus (Battelino 2019).

    Args:
        values: Array of values.

    Returns:
        CV as a percentage (0-100+).
    """
    values = _clean(values)

    if len(values) < 2 or np.mean(values) == 0:
        return 0.0

    return float((np.std(values, ddof=1) / np.mean(values)) * 100)


def calculate_quantiles(
    values: ArrayLike,
    quantiles: Sequence[float] = (0.10, 0.25, 0.50, 0.75, 0.90)
) -> Dict[str, float]:
    """Calculate multiple quantiles for a dataset.

    Args:
        values: Array of values.
        quantiles: Quantiles to calculate (0-1).

    Returns:
        Dictionary mapping quantile names (e.g., 'p10', 'p50') to values.
        Empty input maps every name to 0.0.
    """
    values = _clean(values)

    if len(values) == 0:
        return {quantile_name(q): 0.0 for q in quantiles}

    return {
        quantile_name(q): float(np.percentile(values, q * 100))
        for q in quantiles
    }


def quantile_name(q: float) -> str:
    return f"p{int(round(q * 100))}"


def mask_percentages(masks: Dict[str, np.ndarray]) -> Dict[str, float]:
    """Share (0-100) of True entries for each boolean mask.

    All masks must have the same length; an empty length yields zeros.
    """
    result = {}
    for name, mask in masks.items():
        n = len(mask)
        result[name] = float(np.sum(mask) / n * 100) if n else 0.0
    return result


def calculate_data_coverage(
    df: pd.DataFrame,
    timestamp_column: str = 'timestamp',
    expected_interval_minutes: int = 5
) -> float:
    """Calculate data coverage as percentage of expected readings.

    Args:
        df: DataFrame with timestamp column.
        timestamp_column: Name of timestamp column.
        expected_interval_minutes: Expected interval between readings.

    Returns:
        Coverage percentage (0-100).
    """
    if len(df) < 2:
        return 0.0

    timestamps = df[timestamp_column].sort_values()
    total_hours = (timestamps.max() - timestamps.min()).total_seconds() / 3600
    expected_readings = total_hours * (60 / expected_interval_minutes)

    if expected_readings == 0:
        return 0.0

    return float(min(100, (len(df) / expected_readings) * 100))
