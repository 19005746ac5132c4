"""
Statistics Dashboard Streamlit App

Interactive statistics screen for exported diabetes therapy data, with
glucose, insulin, looping and meal tabs.
"""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import pandas as pd
import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from stats_dashboard.config import load_config
from stats_dashboard.logging_setup import configure_logging
from stats_dashboard.loaders import (
    GlucoseLoader,
    InsulinLoader,
    MealLoader,
    LoopLoader,
    StatsDataset,
)
from stats_dashboard.analyzers import StatsAggregator, page_daily_stats, page_count
from stats_dashboard.cards import ChartCard, ChartKind, Placeholder, RenderContext, resolve_cards
from stats_dashboard.metrics import GlucoseRange
from stats_dashboard.selection import (
    SelectionState,
    StatisticViewType,
    chart_types_for,
    glucose_interval_options,
    insulin_interval_options,
    loop_interval_options,
    meal_interval_options,
    select_view,
    select_glucose_chart_type,
    select_glucose_interval,
    select_insulin_chart_type,
    select_insulin_interval,
    select_looping_chart_type,
    select_loop_interval,
    select_meal_chart_type,
    select_meal_interval,
    set_glucose_day_selected,
)
from stats_dashboard.utils.units import (
    GlucoseUnits,
    EA1cDisplayUnit,
    TimeInRangeType,
    format_glucose,
    format_ea1c,
    to_display_units,
)
from stats_dashboard.visualizers import PlotlyVisualizer

logger = logging.getLogger("stats_dashboard.app")


# =============================================================================
# Page Config
# =============================================================================

st.set_page_config(
    page_title="Statistics",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }

    div[data-testid="stMetricValue"] {
        font-size: 1.5rem;
        font-weight: 700;
    }

    div[data-testid="stMetricLabel"] {
        font-size: 0.8rem;
        font-weight: 500;
        text-transform: uppercase;
        letter-spacing: 0.03em;
    }
</style>
""", unsafe_allow_html=True)


# =============================================================================
# Session State Initialization
# =============================================================================

def init_session_state():
    """Initialize session state variables."""
    if 'config' not in st.session_state:
        st.session_state.config = load_config()
        configure_logging(st.session_state.config.logging)
    if 'dataset' not in st.session_state:
        st.session_state.dataset = StatsDataset()
    if 'selection' not in st.session_state:
        st.session_state.selection = SelectionState.initial(st.session_state.config)


init_session_state()


# =============================================================================
# Selection Widgets
# =============================================================================

def _apply_transition(transition, key):
    """Widget callback: feed the widget value through a selection transition."""
    st.session_state.selection = transition(st.session_state.selection, st.session_state[key])
    st.session_state.glucose_page_slider = 0


def _choice(label, options, current, key, transition, selectbox=False, label_visibility="visible"):
    """Radio (or selectbox) bound to one axis of the selection state."""
    # Keep the widget in step with transitions that moved the value elsewhere
    st.session_state[key] = current
    widget = st.selectbox if selectbox else st.radio
    kwargs = {} if selectbox else {'horizontal': True}
    widget(
        label,
        options,
        key=key,
        format_func=lambda option: option.display_name,
        on_change=_apply_transition,
        args=(transition, key),
        label_visibility=label_visibility,
        **kwargs
    )


def render_selectors(selection: SelectionState):
    """Chart-type picker and interval picker for the selected tab."""
    view = selection.selected_view
    col1, col2 = st.columns([1, 1])

    if view is StatisticViewType.GLUCOSE:
        with col1:
            _choice("Chart", chart_types_for(view), selection.glucose_chart_type,
                    'glucose_chart_choice', select_glucose_chart_type, selectbox=True)
        with col2:
            _choice("Interval", glucose_interval_options(selection.glucose_chart_type),
                    selection.glucose_interval, 'glucose_interval_choice', select_glucose_interval)
    elif view is StatisticViewType.INSULIN:
        with col1:
            _choice("Chart", chart_types_for(view), selection.insulin_chart_type,
                    'insulin_chart_choice', select_insulin_chart_type, selectbox=True)
        with col2:
            _choice("Interval", insulin_interval_options(), selection.insulin_interval,
                    'insulin_interval_choice', select_insulin_interval)
    elif view is StatisticViewType.LOOPING:
        with col1:
            _choice("Chart", chart_types_for(view), selection.looping_chart_type,
                    'looping_chart_choice', select_looping_chart_type, selectbox=True)
        with col2:
            _choice("Interval", loop_interval_options(), selection.loop_interval,
                    'loop_interval_choice', select_loop_interval)
    else:
        with col1:
            _choice("Chart", chart_types_for(view), selection.meal_chart_type,
                    'meal_chart_choice', select_meal_chart_type, selectbox=True)
        with col2:
            _choice("Interval", meal_interval_options(), selection.meal_interval,
                    'meal_interval_choice', select_meal_interval)


# =============================================================================
# Sidebar - Data and Preferences
# =============================================================================

UPLOADS = [
    ('glucose', "Glucose Readings (CSV)", GlucoseLoader),
    ('insulin', "Insulin Deliveries (CSV)", InsulinLoader),
    ('meals', "Meals (CSV)", MealLoader),
    ('loops', "Loop Cycles (CSV)", LoopLoader),
]


def render_sidebar():
    """Render sidebar with file uploads and display preferences."""
    config = st.session_state.config
    dataset = st.session_state.dataset

    with st.sidebar:
        st.title("📊 Statistics")

        st.subheader("Data Upload")
        for attr, label, loader_cls in UPLOADS:
            upload = st.file_uploader(label, type=['csv'], key=f'{attr}_upload')
            if upload is None:
                continue
            try:
                df = loader_cls(upload, config.analysis.timezone).load()
                setattr(dataset, attr, df)
                st.success(f"Loaded {len(df):,} {attr} rows")
            except Exception as e:
                logger.exception("Failed to load %s upload", attr)
                st.error(f"Error loading {attr} file: {e}")

        with st.expander("Load from folder"):
            folder = st.text_input("Export folder", value="")
            if st.button("Load exports") and folder:
                try:
                    st.session_state.dataset = StatsDataset.from_directory(folder, config.analysis.timezone)
                    st.success(f"Loaded exports from {folder}")
                except Exception as e:
                    logger.exception("Failed to load exports from %s", folder)
                    st.error(f"Error loading exports: {e}")

        st.divider()
        st.subheader("Display")

        display = config.display
        units = st.radio(
            "Glucose Units",
            list(GlucoseUnits),
            index=list(GlucoseUnits).index(display.units),
            format_func=lambda u: u.value,
            horizontal=True,
        )
        tir_type = st.radio(
            "Time in Range",
            list(TimeInRangeType),
            index=list(TimeInRangeType).index(display.time_in_range_type),
            format_func=lambda t: t.display_name,
            horizontal=True,
        )
        ea1c_unit = st.radio(
            "eA1c Unit",
            list(EA1cDisplayUnit),
            index=list(EA1cDisplayUnit).index(display.ea1c_display_unit),
            format_func=lambda u: u.value,
            horizontal=True,
        )
        color_scheme = st.radio(
            "Chart Theme", ["light", "dark"],
            index=0 if display.color_scheme == "light" else 1,
            horizontal=True,
        )

        with st.expander("⚙️ Target Range"):
            t = config.glucose
            t.low_limit = st.number_input("Low limit (mg/dL)", value=float(t.low_limit), step=1.0)
            t.high_limit = st.number_input("High limit (mg/dL)", value=float(t.high_limit), step=1.0)
            t.tight_high = st.number_input("Tight range top (mg/dL)", value=float(t.tight_high), step=1.0)

        config.display = replace(
            display,
            units=units,
            time_in_range_type=tir_type,
            ea1c_display_unit=ea1c_unit,
            color_scheme=color_scheme,
        )


# =============================================================================
# Card Rendering
# =============================================================================

def render_placeholder(placeholder: Placeholder):
    st.info(f"**{placeholder.title}**\n\n{placeholder.description}", icon=f":material/{placeholder.icon}:")


def render_glucose_metrics(params: dict, viz: PlotlyVisualizer):
    """Summary metrics plus the time-in-range ring."""
    metrics = params.get('metrics')
    if metrics is None:
        return
    units = params['units']
    ea1c_unit = params['ea1c_display_unit']

    col1, col2 = st.columns([2, 1])
    with col1:
        row1 = st.columns(3)
        row1[0].metric("Mean", format_glucose(metrics.mean, units))
        row1[1].metric("Median", format_glucose(metrics.median, units))
        row1[2].metric("SD", format_glucose(metrics.sd, units))
        row2 = st.columns(3)
        row2[0].metric("CV", f"{metrics.cv:.1f}%")
        row2[1].metric("eA1c", format_ea1c(metrics.ea1c, ea1c_unit))
        row2[2].metric("GMI", format_ea1c(metrics.gmi, ea1c_unit))
        st.caption(
            f"{metrics.readings_count:,} readings · {metrics.data_coverage:.0f}% coverage"
        )
        st.download_button(
            "Download metrics (CSV)",
            pd.Series(metrics.to_dict(), name="value").to_csv(index_label="metric"),
            file_name=f"glucose_metrics_{metrics.date_range[1].strftime('%Y%m%d')}.csv",
            mime="text/csv",
        )
    with col2:
        fig = viz.figure_for(ChartCard(ChartKind.GLUCOSE_METRICS, params))
        if fig is not None:
            st.plotly_chart(fig, use_container_width=True)


def _paged(card: ChartCard) -> ChartCard:
    """Limit a by-day card to the page chosen with the slider."""
    params = card.params
    interval = params['selected_interval']
    pages = page_count(len(params['daily_stats']), interval)
    page = 0
    if pages > 1:
        # Clamp a page left over from a longer interval
        if st.session_state.get("glucose_page_slider", 0) > pages - 1:
            st.session_state.glucose_page_slider = pages - 1
        page = st.slider("Periods back", 0, pages - 1, key="glucose_page_slider")
    visible = page_daily_stats(params['daily_stats'], interval, page)
    return ChartCard(card.kind, dict(params, daily_stats=visible))


def render_day_details(card: ChartCard):
    """Toggle for inspecting a single day of a by-day chart."""
    selection = st.session_state.selection
    days = card.params['daily_stats']
    selected = st.toggle("Inspect a single day", value=selection.is_glucose_day_selected)
    if selected != selection.is_glucose_day_selected:
        st.session_state.selection = set_glucose_day_selected(selection, selected)
    if not selected or not days:
        return

    stat = st.selectbox("Day", days[::-1], format_func=lambda s: s.day.strftime('%a %b %d'))
    units = card.params['units']
    cols = st.columns(4)
    if card.kind is ChartKind.GLUCOSE_DAILY_PERCENTILE:
        cols[0].metric("Median", format_glucose(stat.median, units))
        cols[1].metric("25-75%", f"{to_display_units(stat.p25, units):.0f}-{to_display_units(stat.p75, units):.0f}")
        cols[2].metric("10-90%", f"{to_display_units(stat.p10, units):.0f}-{to_display_units(stat.p90, units):.0f}")
    else:
        p = stat.percentages
        below = p.get(GlucoseRange.VERY_LOW, 0.0) + p.get(GlucoseRange.LOW, 0.0)
        in_range = p.get(GlucoseRange.TIGHT, 0.0) + p.get(GlucoseRange.UPPER_RANGE, 0.0)
        above = p.get(GlucoseRange.HIGH, 0.0) + p.get(GlucoseRange.VERY_HIGH, 0.0)
        cols[0].metric("Below Range", f"{below:.1f}%")
        cols[1].metric("In Range", f"{in_range:.1f}%")
        cols[2].metric("Above Range", f"{above:.1f}%")
    cols[3].metric("Readings", f"{stat.count:,}")


def render_summary(card: ChartCard):
    """Averages shown beneath the insulin, meal and loop charts."""
    summary = card.params.get('summary') or card.params.get('stats')
    if summary is None:
        return
    cols = st.columns(4)
    if card.kind is ChartKind.TOTAL_DAILY_DOSE:
        cols[0].metric("Avg TDD", f"{summary.average_tdd:.1f} U")
        cols[1].metric("Avg Bolus", f"{summary.average_bolus:.1f} U")
        cols[2].metric("Avg Basal", f"{summary.average_basal:.1f} U")
        cols[3].metric("Bolus Share", f"{summary.bolus_share:.0f}%")
    elif card.kind is ChartKind.MEAL_TOTALS:
        cols[0].metric("Avg Carbs", f"{summary.average_carbs:.0f} g")
        cols[1].metric("Avg Fat", f"{summary.average_fat:.0f} g")
        cols[2].metric("Avg Protein", f"{summary.average_protein:.0f} g")
        cols[3].metric("Meals", f"{summary.meal_count:,}")
    elif card.kind is ChartKind.LOOPING_PERFORMANCE:
        cols[0].metric("Success Rate", f"{summary.success_rate:.1f}%")
        cols[1].metric("Loops / Day", f"{summary.loops_per_day:.0f}")
        cols[2].metric("Median Duration", f"{summary.median_duration_seconds:.1f} s")
        cols[3].metric("Avg Interval", f"{summary.average_interval_minutes:.1f} min")
        st.caption(f"{summary.glucose_count:,} glucose readings · {summary.readings_per_day:.0f} per day")


def render_card(card, viz: PlotlyVisualizer):
    if isinstance(card, Placeholder):
        render_placeholder(card)
        return

    if card.kind is ChartKind.GLUCOSE_METRICS:
        render_glucose_metrics(card.params, viz)
        return

    by_day = card.kind in (ChartKind.GLUCOSE_DAILY_PERCENTILE, ChartKind.GLUCOSE_DAILY_DISTRIBUTION)
    if by_day:
        card = _paged(card)

    fig = viz.figure_for(card)
    if fig is not None:
        st.plotly_chart(fig, use_container_width=True)

    if by_day:
        render_day_details(card)
    else:
        render_summary(card)


# =============================================================================
# Main
# =============================================================================

def current_time(timezone=None) -> pd.Timestamp:
    """Reference time in the same naive local clock as the loaded data."""
    if timezone:
        return pd.Timestamp.now(tz=timezone).tz_localize(None)
    return pd.Timestamp.now()


def render_main():
    """Render main dashboard content."""
    render_sidebar()

    config = st.session_state.config
    selection = st.session_state.selection

    _choice("View", list(StatisticViewType), selection.selected_view, "view_choice",
            select_view, label_visibility="collapsed")
    selection = st.session_state.selection

    render_selectors(selection)
    selection = st.session_state.selection

    aggregator = StatsAggregator(st.session_state.dataset, config)
    snapshot = aggregator.aggregate(selection, current_time(config.analysis.timezone))
    layout = resolve_cards(selection, snapshot)

    viz = PlotlyVisualizer(config, RenderContext(config.display.color_scheme))
    for card in layout.cards:
        with st.container(border=True):
            render_card(card, viz)

    if layout.hint and not layout.is_placeholder:
        st.caption(layout.hint)


if __name__ == "__main__":
    render_main()
