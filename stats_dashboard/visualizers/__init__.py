"""Visualization modules for the statistics screen."""

from stats_dashboard.visualizers.plotly_viz import PlotlyVisualizer

__all__ = ["PlotlyVisualizer"]
