from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from stats_dashboard.loaders import (
    GlucoseLoader,
    InsulinLoader,
    LoopLoader,
    MealLoader,
    StatsDataset,
)


def test_glucose_mg_dl_export(tmp_path: Path) -> None:
    path = tmp_path / "glucose.csv"
    path.write_text(
        "Timestamp,Glucose\n"
        "2025-03-15 08:05:00,120\n"
        "2025-03-15 08:00:00,110\n"
        "2025-03-15 08:00:00,130\n"
        "2025-03-15 08:10:00,0\n"
        "2025-03-15 08:15:00,High\n"
    )
    df = GlucoseLoader(path).load()
    assert list(df.columns) == ["timestamp", "glucose_mg_dl"]
    assert list(df["glucose_mg_dl"]) == [120.0, 120.0]
    assert df["timestamp"].is_monotonic_increasing


def test_glucose_mmol_export_is_converted(tmp_path: Path) -> None:
    path = tmp_path / "glucose.csv"
    path.write_text("date,glucose_mmol_l\n2025-03-15 08:00:00,10.0\n")
    df = GlucoseLoader(path).load()
    assert df["glucose_mg_dl"].iloc[0] == pytest.approx(180.182)


def test_tz_aware_timestamps_are_converted(tmp_path: Path) -> None:
    path = tmp_path / "glucose.csv"
    path.write_text("timestamp,sgv\n2025-03-15T12:00:00Z,100\n")
    df = GlucoseLoader(path, timezone="Europe/Berlin").load()
    assert df["timestamp"].iloc[0] == pd.Timestamp("2025-03-15 13:00:00")


def test_missing_required_column_raises(tmp_path: Path) -> None:
    path = tmp_path / "insulin.csv"
    path.write_text("timestamp,units\n2025-03-15 08:00:00,5\n")
    with pytest.raises(ValueError, match="kind"):
        InsulinLoader(path).load()


def test_insulin_kinds_are_normalized(tmp_path: Path) -> None:
    path = tmp_path / "insulin.csv"
    path.write_text(
        "timestamp,amount,type\n"
        "2025-03-15 08:00:00,5,Meal Bolus\n"
        "2025-03-15 08:30:00,0.3,SMB\n"
        "2025-03-15 09:00:00,1.0,Temp Basal\n"
        "2025-03-15 09:30:00,2.0,External Insulin\n"
        "2025-03-15 10:00:00,9.0,Prime\n"
    )
    df = InsulinLoader(path).load()
    assert list(df["kind"]) == ["bolus", "smb", "basal", "external"]


def test_meal_macros_default_to_zero(tmp_path: Path) -> None:
    path = tmp_path / "meals.csv"
    path.write_text("timestamp,carbs\n2025-03-15 08:00:00,45\n")
    df = MealLoader(path).load()
    assert df.iloc[0]["carbs"] == 45.0
    assert df.iloc[0]["fat"] == 0.0
    assert df.iloc[0]["protein"] == 0.0


def test_loop_end_is_optional(tmp_path: Path) -> None:
    path = tmp_path / "loops.csv"
    path.write_text("start,status\n2025-03-15 10:00:00,success\n")
    df = LoopLoader(path).load()
    assert df["end"].isna().all()
    assert df.iloc[0]["status"] == "success"


def test_dataset_from_directory(tmp_path: Path) -> None:
    (tmp_path / "glucose.csv").write_text("timestamp,glucose\n2025-03-15 08:00:00,110\n")
    (tmp_path / "meals.csv").write_text("timestamp,carbs,fat,protein\n2025-03-15 08:00:00,40,10,20\n")
    dataset = StatsDataset.from_directory(tmp_path)
    assert len(dataset.glucose) == 1
    assert len(dataset.meals) == 1
    assert dataset.insulin.empty
    assert dataset.loops.empty
