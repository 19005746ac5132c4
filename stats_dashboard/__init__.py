"""
Stats Dashboard - Statistics screen for diabetes therapy data.

This package provides modular components for:
- Loading exported glucose, insulin, meal and loop-cycle data
- Aggregating glucose, insulin, looping and meal statistics per time interval
- Resolving which cards and charts the statistics screen shows
- Rendering interactive charts in a Streamlit dashboard
"""

from stats_dashboard.config import DashboardConfig, load_config

__version__ = "0.1.0"
__all__ = ["DashboardConfig", "load_config"]
