from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from stats_dashboard.config import DashboardConfig
from stats_dashboard.loaders.exports import StatsDataset

NOW = pd.Timestamp("2025-03-15 14:30:00")


@pytest.fixture
def now() -> pd.Timestamp:
    return NOW


@pytest.fixture
def config() -> DashboardConfig:
    return DashboardConfig()


@pytest.fixture
def glucose_df() -> pd.DataFrame:
    """Ten days of 5-minute readings ending at NOW, cycling 50..250 mg/dL."""
    timestamps = pd.date_range(NOW - pd.Timedelta(days=10), NOW, freq="5min")
    values = 50.0 + (np.arange(len(timestamps)) % 5) * 50.0
    return pd.DataFrame({"timestamp": timestamps, "glucose_mg_dl": values})


@pytest.fixture
def insulin_df() -> pd.DataFrame:
    """Every day for ten days: basal 1 U at 03:00, bolus 5 U at 08:00,
    SMB 0.5 U at 12:00 and external 2 U at 19:00."""
    rows = []
    for offset in range(10, -1, -1):
        day = NOW.normalize() - pd.Timedelta(days=offset)
        rows.append((day + pd.Timedelta(hours=3), 1.0, "basal"))
        rows.append((day + pd.Timedelta(hours=8), 5.0, "bolus"))
        rows.append((day + pd.Timedelta(hours=12), 0.5, "smb"))
        rows.append((day + pd.Timedelta(hours=19), 2.0, "external"))
    df = pd.DataFrame(rows, columns=["timestamp", "units", "kind"])
    return df[df["timestamp"] <= NOW].reset_index(drop=True)


@pytest.fixture
def meals_df() -> pd.DataFrame:
    """One breakfast per day at 08:00 for ten days."""
    days = [NOW.normalize() - pd.Timedelta(days=offset) for offset in range(10, -1, -1)]
    return pd.DataFrame({
        "timestamp": [day + pd.Timedelta(hours=8) for day in days],
        "carbs": 40.0,
        "fat": 10.0,
        "protein": 20.0,
    })


@pytest.fixture
def loops_df() -> pd.DataFrame:
    """Four cycles this morning, one of them failed, the last without an end."""
    starts = pd.to_datetime([
        "2025-03-15 10:00:00",
        "2025-03-15 10:05:00",
        "2025-03-15 10:10:00",
        "2025-03-15 10:15:00",
    ])
    ends = pd.Series(starts + pd.Timedelta(seconds=3))
    ends.iloc[-1] = pd.NaT
    return pd.DataFrame({
        "start": starts,
        "end": ends,
        "status": ["Success", "success", "Failed: no glucose", "SUCCESS "],
    })


@pytest.fixture
def dataset(glucose_df, insulin_df, meals_df, loops_df) -> StatsDataset:
    return StatsDataset(glucose=glucose_df, insulin=insulin_df, meals=meals_df, loops=loops_df)
