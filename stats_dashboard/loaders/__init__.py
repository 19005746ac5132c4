"""Data loaders for exported glucose, insulin, meal and loop data."""

from stats_dashboard.loaders.exports import (
    ExportLoader,
    GlucoseLoader,
    InsulinLoader,
    MealLoader,
    LoopLoader,
    StatsDataset,
)

__all__ = [
    "ExportLoader",
    "GlucoseLoader",
    "InsulinLoader",
    "MealLoader",
    "LoopLoader",
    "StatsDataset",
]
