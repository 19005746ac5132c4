from __future__ import annotations

from datetime import datetime

from stats_dashboard.metrics import BolusStat, MealStat, has_bolus_data, has_meal_data

T0 = datetime(2025, 3, 15)


def test_bolus_records_with_all_zero_components_have_no_data() -> None:
    stats = [BolusStat(T0, manual_bolus=0.0, smb=0.0, external=0.0)]
    assert not has_bolus_data(stats)


def test_any_positive_bolus_component_counts() -> None:
    stats = [
        BolusStat(T0, manual_bolus=0.0, smb=0.0, external=0.0),
        BolusStat(T0, manual_bolus=0.0, smb=0.2, external=0.0),
    ]
    assert has_bolus_data(stats)


def test_meal_with_only_carbs_has_data() -> None:
    assert has_meal_data([MealStat(T0, carbs=5.0, fat=0.0, protein=0.0)])


def test_empty_and_zero_meals_have_no_data() -> None:
    assert not has_meal_data([])
    assert not has_meal_data([MealStat(T0, carbs=0.0, fat=0.0, protein=0.0)])


def test_totals() -> None:
    assert BolusStat(T0, 1.0, 0.5, 2.0).total == 3.5
    assert MealStat(T0, 40.0, 10.0, 20.0).total == 70.0
