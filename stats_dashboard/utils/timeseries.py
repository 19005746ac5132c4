"""
Time-bucketing helpers shared by the analyzers.
"""

from typing import List, Optional, Tuple

import pandas as pd


def filter_window(
    df: pd.DataFrame,
    start: pd.Timestamp,
    end: pd.Timestamp,
    column: str = 'timestamp'
) -> pd.DataFrame:
    """Rows with ``start <= df[column] <= end``, sorted by that column."""
    if df is None:
        return pd.DataFrame()
    if df.empty:
        return df.iloc[0:0].reset_index(drop=True)
    mask = (df[column] >= start) & (df[column] <= end)
    return df.loc[mask].sort_values(column, kind='mergesort').reset_index(drop=True)


def bucket_starts(start: pd.Timestamp, end: pd.Timestamp, freq: str) -> pd.DatetimeIndex:
    """All bucket start times from the bucket containing ``start`` to the one containing ``end``."""
    return pd.date_range(start=start.floor(freq), end=end.floor(freq), freq=freq)


def bucket_sums(
    df: pd.DataFrame,
    value_columns: List[str],
    start: pd.Timestamp,
    end: pd.Timestamp,
    freq: str,
    column: str = 'timestamp',
) -> pd.DataFrame:
    """Sum value columns per time bucket, zero-filled across the whole window.

    Args:
        df: Events with a timestamp column and numeric value columns.
        value_columns: Columns to sum.
        start: Window start (inclusive).
        end: Window end (inclusive).
        freq: Pandas frequency, ``'h'`` or ``'D'``.
        column: Timestamp column name.

    Returns:
        DataFrame indexed by bucket start with one column per value column.
        Empty when no event falls inside the window.
    """
    events = filter_window(df, start, end, column)
    if events.empty:
        return pd.DataFrame(columns=value_columns, dtype=float)

    index = bucket_starts(start, end, freq)
    grouped = (
        events.assign(_bucket=events[column].dt.floor(freq))
        .groupby('_bucket')[value_columns]
        .sum()
    )
    return grouped.reindex(index, fill_value=0.0).astype(float)


def page_bounds(
    n_items: int,
    page_size: int,
    page: int = 0
) -> Tuple[int, int]:
    """Slice bounds for page ``page`` counted back from the most recent item.

    Page 0 is the last ``page_size`` items. Negative pages are clamped to
    page 0 and pages past the end to the oldest available page.
    """
    if n_items <= 0 or page_size <= 0:
        return 0, 0
    last_page = (n_items - 1) // page_size
    page = max(0, min(page, last_page))
    end = n_items - page * page_size
    return max(0, end - page_size), end


def local_midnight(ts: pd.Timestamp) -> pd.Timestamp:
    return ts.normalize()


def normalize_timestamps(series: pd.Series, timezone: Optional[str] = None) -> pd.Series:
    """Parse timestamps and make them naive.

    Timezone-aware values are converted to ``timezone`` (UTC when None)
    before the zone is dropped.
    """
    parsed = pd.to_datetime(series, errors='coerce')
    if getattr(parsed.dt, 'tz', None) is not None:
        parsed = parsed.dt.tz_convert(timezone or 'UTC').dt.tz_localize(None)
    return parsed
