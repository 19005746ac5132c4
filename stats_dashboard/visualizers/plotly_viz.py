"""
Plotly Visualizer - Interactive charts for the Streamlit dashboard.

One builder per chart kind; ``figure_for`` dispatches a resolved chart card
to its builder.
"""

import plotly.graph_objects as go
from typing import Optional, Dict, Any, List

from stats_dashboard.cards import ChartCard, ChartKind, RenderContext
from stats_dashboard.config import DashboardConfig
from stats_dashboard.intervals import AnyInterval, is_hourly
from stats_dashboard.metrics import (
    GlucoseMetrics,
    GlucoseRange,
    HourlyStat,
    GlucoseRangeStat,
    DailyPercentileStat,
    DailyDistributionStat,
    TDDStat,
    BolusStat,
    MealStat,
    LoopBarStat,
)
from stats_dashboard.utils.colors import (
    GLUCOSE_RANGE_COLORS,
    SECTOR_COLORS,
    PERCENTILE_BAND_COLORS,
    INSULIN_COLORS,
    MEAL_COLORS,
    LOOP_COLORS,
)
from stats_dashboard.utils.units import GlucoseUnits, TimeInRangeType, to_display_units


class PlotlyVisualizer:
    """Interactive Plotly visualizations for Streamlit.

    Provides interactive charts with consistent styling.
    """

    def __init__(
        self,
        config: Optional[DashboardConfig] = None,
        context: Optional[RenderContext] = None
    ):
        """Initialize visualizer.

        Args:
            config: Optional configuration.
            context: Color scheme to render with.
        """
        self.config = config or DashboardConfig()
        self.context = context or RenderContext(self.config.display.color_scheme)
        self.font_family = "Inter, sans-serif"

    def _get_base_layout(self, height: int = 400, **kwargs) -> dict:
        """Get base layout for consistent styling."""
        return {
            'height': height,
            'template': self.context.plotly_template,
            'margin': dict(l=50, r=30, t=50, b=30),
            'paper_bgcolor': 'rgba(0,0,0,0)',
            'plot_bgcolor': self.context.background_color,
            'font': dict(family=self.font_family, size=12),
            'hoverlabel': dict(font_size=12, bordercolor='rgba(128,128,128,0.3)'),
            **kwargs
        }

    def _grid(self, fig: go.Figure) -> go.Figure:
        fig.update_xaxes(showgrid=True, gridcolor='rgba(128,128,128,0.15)')
        fig.update_yaxes(showgrid=True, gridcolor='rgba(128,128,128,0.15)')
        return fig

    def range_labels(self, units: GlucoseUnits) -> Dict[GlucoseRange, str]:
        """Legend labels for the glucose bands in display units."""
        t = self.config.glucose

        def fmt(value: float) -> str:
            shown = to_display_units(value, units)
            return f"{shown:.1f}" if units is GlucoseUnits.MMOL_L else f"{shown:.0f}"

        tight_top = min(t.tight_high, t.high_limit)
        return {
            GlucoseRange.VERY_LOW: f"<{fmt(t.very_low)}",
            GlucoseRange.LOW: f"{fmt(t.very_low)}-{fmt(t.low_limit)}",
            GlucoseRange.TIGHT: f"{fmt(t.low_limit)}-{fmt(tight_top)}",
            GlucoseRange.UPPER_RANGE: f"{fmt(tight_top)}-{fmt(t.high_limit)}",
            GlucoseRange.HIGH: f"{fmt(t.high_limit)}-{fmt(t.very_high)}",
            GlucoseRange.VERY_HIGH: f">{fmt(t.very_high)}",
        }

    def _add_limit_lines(self, fig: go.Figure, low: float, high: float, units: GlucoseUnits):
        """Add target range reference lines to a figure."""
        fig.add_hline(y=to_display_units(low, units), line_dash='dash', line_color='#ef4444', opacity=0.5)
        fig.add_hline(y=to_display_units(high, units), line_dash='dash', line_color='#f59e0b', opacity=0.5)

    # =========================================================================
    # GLUCOSE BY TIME
    # =========================================================================

    def create_agp_chart(
        self,
        hourly_stats: List[HourlyStat],
        low_limit: float,
        high_limit: float,
        units: GlucoseUnits = GlucoseUnits.MG_DL,
        is_today: bool = False,
        height: int = 380,
    ) -> go.Figure:
        """Create ambulatory glucose profile: 10-90 and 25-75 bands plus median.

        Args:
            hourly_stats: Percentile band per hour of day.
            low_limit: Target range lower bound (mg/dL).
            high_limit: Target range upper bound (mg/dL).
            units: Display units.
            is_today: Title the chart for today's readings only.
            height: Chart height.

        Returns:
            Plotly Figure.
        """
        hours = [s.hour for s in hourly_stats]

        def series(attr: str) -> List[float]:
            return [float(to_display_units(getattr(s, attr), units)) for s in hourly_stats]

        fig = go.Figure()
        for upper, lower, band in (('p90', 'p10', 'outer'), ('p75', 'p25', 'inner')):
            fig.add_trace(go.Scatter(
                x=hours, y=series(upper), mode='lines', line=dict(width=0),
                showlegend=False, hoverinfo='skip',
            ))
            fig.add_trace(go.Scatter(
                x=hours, y=series(lower), mode='lines', line=dict(width=0),
                fill='tonexty', fillcolor=PERCENTILE_BAND_COLORS[band],
                name='10-90%' if band == 'outer' else '25-75%',
                hoverinfo='skip',
            ))

        fig.add_trace(go.Scatter(
            x=hours,
            y=series('median'),
            mode='lines+markers',
            name='Median',
            line=dict(color=PERCENTILE_BAND_COLORS['median'], width=2),
            hovertemplate=f'%{{x}}:00<br><b>%{{y:.1f}}</b> {units.value}<extra></extra>',
        ))
        self._add_limit_lines(fig, low_limit, high_limit, units)

        fig.update_layout(
            **self._get_base_layout(height=height),
            title=dict(text="Today" if is_today else "Ambulatory Glucose Profile", font=dict(size=14)),
            xaxis=dict(title='Hour of Day', range=[0, 23], dtick=3),
            yaxis_title=f'Glucose ({units.value})',
            legend=dict(orientation='h', y=-0.2),
        )
        return self._grid(fig)

    def create_range_distribution_chart(
        self,
        glucose_range_stats: List[GlucoseRangeStat],
        units: GlucoseUnits = GlucoseUnits.MG_DL,
        height: int = 380,
    ) -> go.Figure:
        """Create stacked bars of range shares per hour of day."""
        labels = self.range_labels(units)
        hours = [s.hour for s in glucose_range_stats]

        fig = go.Figure()
        for band in GlucoseRange:
            fig.add_trace(go.Bar(
                x=hours,
                y=[s.percentages.get(band, 0.0) for s in glucose_range_stats],
                name=labels[band],
                marker_color=GLUCOSE_RANGE_COLORS[band.value],
                hovertemplate='%{x}:00<br>%{y:.1f}%<extra>' + labels[band] + '</extra>',
            ))

        fig.update_layout(
            **self._get_base_layout(height=height),
            barmode='stack',
            title=dict(text='Distribution by Time', font=dict(size=14)),
            xaxis=dict(title='Hour of Day', dtick=3),
            yaxis=dict(title='%', range=[0, 100]),
            legend=dict(orientation='h', y=-0.2),
        )
        return self._grid(fig)

    # =========================================================================
    # GLUCOSE BY DAY
    # =========================================================================

    def create_daily_percentile_chart(
        self,
        daily_stats: List[DailyPercentileStat],
        low_limit: float,
        high_limit: float,
        units: GlucoseUnits = GlucoseUnits.MG_DL,
        height: int = 380,
    ) -> go.Figure:
        """Create per-day box-style chart of the percentile bands."""
        def conv(value: float) -> float:
            return float(to_display_units(value, units))

        fig = go.Figure(go.Box(
            x=[s.day for s in daily_stats],
            lowerfence=[conv(s.p10) for s in daily_stats],
            q1=[conv(s.p25) for s in daily_stats],
            median=[conv(s.median) for s in daily_stats],
            q3=[conv(s.p75) for s in daily_stats],
            upperfence=[conv(s.p90) for s in daily_stats],
            mean=[conv(s.mean) for s in daily_stats],
            marker_color=PERCENTILE_BAND_COLORS['median'],
            name='Daily percentiles',
        ))
        self._add_limit_lines(fig, low_limit, high_limit, units)

        fig.update_layout(
            **self._get_base_layout(height=height),
            title=dict(text='Percentile by Day', font=dict(size=14)),
            yaxis_title=f'Glucose ({units.value})',
            showlegend=False,
        )
        return self._grid(fig)

    def create_daily_distribution_chart(
        self,
        daily_stats: List[DailyDistributionStat],
        units: GlucoseUnits = GlucoseUnits.MG_DL,
        height: int = 380,
    ) -> go.Figure:
        """Create stacked bars of range shares per calendar day."""
        labels = self.range_labels(units)
        days = [s.day for s in daily_stats]

        fig = go.Figure()
        for band in GlucoseRange:
            fig.add_trace(go.Bar(
                x=days,
                y=[s.percentages.get(band, 0.0) for s in daily_stats],
                name=labels[band],
                marker_color=GLUCOSE_RANGE_COLORS[band.value],
                hovertemplate='%{x|%b %d}<br>%{y:.1f}%<extra>' + labels[band] + '</extra>',
            ))

        fig.update_layout(
            **self._get_base_layout(height=height),
            barmode='stack',
            title=dict(text='Distribution by Day', font=dict(size=14)),
            yaxis=dict(title='%', range=[0, 100]),
            legend=dict(orientation='h', y=-0.2),
        )
        return self._grid(fig)

    # =========================================================================
    # TIME IN RANGE
    # =========================================================================

    def create_donut_chart(
        self,
        labels: List[str],
        values: List[float],
        colors: List[str],
        title: str = 'Time in Range',
        height: int = 300,
    ) -> go.Figure:
        """Create donut chart for time in range.

        Args:
            labels: Zone labels.
            values: Percentages for each zone.
            colors: Colors for each zone.
            title: Chart title.
            height: Chart height.

        Returns:
            Plotly Figure.
        """
        fig = go.Figure(data=[go.Pie(
            labels=labels,
            values=values,
            hole=0.55,
            marker_colors=colors,
            textinfo='percent',
            textposition='inside',
            sort=False,
            hovertemplate='%{label}<br><b>%{value:.1f}%</b><extra></extra>'
        )])

        fig.update_layout(
            **self._get_base_layout(height=height),
            title=dict(text=title, font=dict(size=14)),
            showlegend=True,
            legend=dict(orientation='h', y=-0.1),
        )

        return fig

    def create_sector_chart(self, metrics: GlucoseMetrics) -> go.Figure:
        """Create below/in/above range donut for the selected range type."""
        range_name = metrics.time_in_range_type.display_name
        labels = ['Below Range', f'In Range ({range_name})', 'Above Range']
        values = [metrics.time_below_range, metrics.time_in_range, metrics.time_above_range]
        colors = [SECTOR_COLORS['below'], SECTOR_COLORS['in_range'], SECTOR_COLORS['above']]
        title = 'Time in Tight Range' if metrics.time_in_range_type is TimeInRangeType.TIGHT else 'Time in Range'
        return self.create_donut_chart(labels, values, colors, title)

    # =========================================================================
    # BUCKETED TOTALS
    # =========================================================================

    def _stacked_bars(
        self,
        x: list,
        series: Dict[str, List[float]],
        colors: Dict[str, str],
        title: str,
        y_title: str,
        interval: AnyInterval,
        height: int = 360,
    ) -> go.Figure:
        fig = go.Figure()
        hover_x = '%{x|%H:%M}' if is_hourly(interval) else '%{x|%b %d}'
        for name, values in series.items():
            fig.add_trace(go.Bar(
                x=x,
                y=values,
                name=name.replace('_', ' ').title(),
                marker_color=colors[name],
                hovertemplate=hover_x + '<br><b>%{y:.1f}</b><extra>%{fullData.name}</extra>',
            ))

        fig.update_layout(
            **self._get_base_layout(height=height),
            barmode='stack',
            title=dict(text=title, font=dict(size=14)),
            yaxis_title=y_title,
            legend=dict(orientation='h', y=-0.2),
            bargap=0.15,
        )
        return self._grid(fig)

    def create_tdd_chart(self, tdd_stats: List[TDDStat], interval: AnyInterval) -> go.Figure:
        return self._stacked_bars(
            [s.period_start for s in tdd_stats],
            {'tdd': [s.amount for s in tdd_stats]},
            INSULIN_COLORS,
            'Insulin per Hour' if is_hourly(interval) else 'Total Daily Dose',
            'Insulin (U)',
            interval,
        )

    def create_bolus_chart(self, bolus_stats: List[BolusStat], interval: AnyInterval) -> go.Figure:
        return self._stacked_bars(
            [s.period_start for s in bolus_stats],
            {
                'manual_bolus': [s.manual_bolus for s in bolus_stats],
                'smb': [s.smb for s in bolus_stats],
                'external': [s.external for s in bolus_stats],
            },
            INSULIN_COLORS,
            'Bolus Distribution',
            'Insulin (U)',
            interval,
        )

    def create_meal_chart(self, meal_stats: List[MealStat], interval: AnyInterval) -> go.Figure:
        return self._stacked_bars(
            [s.period_start for s in meal_stats],
            {
                'carbs': [s.carbs for s in meal_stats],
                'fat': [s.fat for s in meal_stats],
                'protein': [s.protein for s in meal_stats],
            },
            MEAL_COLORS,
            'Total Meals',
            'Grams',
            interval,
        )

    def create_loop_chart(self, loop_bar_stats: List[LoopBarStat], interval: AnyInterval) -> go.Figure:
        return self._stacked_bars(
            [s.period_start for s in loop_bar_stats],
            {
                'successful': [float(s.successful) for s in loop_bar_stats],
                'failed': [float(s.failed) for s in loop_bar_stats],
            },
            LOOP_COLORS,
            'Loop Cycles',
            'Loops',
            interval,
        )

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def figure_for(self, card: ChartCard) -> Optional[go.Figure]:
        """Build the figure for a chart card; None for cards without a chart."""
        p: Dict[str, Any] = card.params
        kind = card.kind

        if kind is ChartKind.GLUCOSE_PERCENTILE:
            return self.create_agp_chart(
                p['hourly_stats'], p['low_limit'], p['high_limit'], p['units'], p['is_today'],
            )
        if kind is ChartKind.GLUCOSE_DISTRIBUTION:
            return self.create_range_distribution_chart(p['glucose_range_stats'], p['units'])
        if kind is ChartKind.GLUCOSE_DAILY_PERCENTILE:
            return self.create_daily_percentile_chart(
                p['daily_stats'], p['low_limit'], p['high_limit'], p['units'],
            )
        if kind is ChartKind.GLUCOSE_DAILY_DISTRIBUTION:
            return self.create_daily_distribution_chart(p['daily_stats'], p['units'])
        if kind is ChartKind.GLUCOSE_METRICS:
            return self.create_sector_chart(p['metrics']) if p.get('metrics') else None
        if kind is ChartKind.TOTAL_DAILY_DOSE:
            return self.create_tdd_chart(p['tdd_stats'], p['selected_interval'])
        if kind is ChartKind.BOLUS_DISTRIBUTION:
            return self.create_bolus_chart(p['bolus_stats'], p['selected_interval'])
        if kind is ChartKind.MEAL_TOTALS:
            return self.create_meal_chart(p['meal_stats'], p['selected_interval'])
        if kind is ChartKind.LOOPING_PERFORMANCE:
            return self.create_loop_chart(p['loop_bar_stats'], p['selected_interval'])
        return None
