"""
Visualization module for Plotly charts.
Builds the day dashboard charts (category donut, duration bars, day
timeline) from an ActivityAggregator.
"""

import plotly.graph_objects as go

from ..analytics.summary import ActivityAggregator
from ..config import CHART_BORDER_COLOR, DEFAULT_CHART_HEIGHT, TIMELINE_CHART_HEIGHT
from ..utils.formatting import format_minutes

EMPTY_DAY_TEXT = "No activities logged yet"


def _empty_figure(height: int = DEFAULT_CHART_HEIGHT) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=EMPTY_DAY_TEXT,
        xref="paper", yref="paper",
        x=0.5, y=0.5, showarrow=False,
        font=dict(size=16)
    )
    fig.update_layout(height=height)
    return fig


def create_category_donut(aggregator: ActivityAggregator) -> go.Figure:
    """
    Create a doughnut chart of minutes per category.

    Args:
        aggregator: Aggregator bound to the day to show

    Returns:
        Plotly Figure with the doughnut chart
    """
    series = aggregator.pie_series()
    if not series.values:
        return _empty_figure()

    fig = go.Figure(data=[go.Pie(
        labels=series.labels,
        values=series.values,
        marker=dict(colors=series.colors, line=dict(color=CHART_BORDER_COLOR, width=3)),
        hole=0.6,
        sort=False,
        text=[format_minutes(v) for v in series.values],
        textinfo='percent',
        hovertemplate='<b>%{label}</b><br>%{text}<extra></extra>'
    )])

    fig.update_layout(
        title='Time by Category',
        height=DEFAULT_CHART_HEIGHT,
        legend=dict(orientation='v', x=1.0, y=0.5),
    )

    return fig


def create_duration_bar(aggregator: ActivityAggregator) -> go.Figure:
    """
    Create a bar chart with one bar per activity, in logging order.

    Args:
        aggregator: Aggregator bound to the day to show

    Returns:
        Plotly Figure with the bar chart
    """
    series = aggregator.bar_series()
    if not series.values:
        return _empty_figure()

    fig = go.Figure(data=[go.Bar(
        # Positional x keeps activities with the same name apart
        x=list(range(len(series.values))),
        y=series.values,
        marker=dict(color=series.colors),
        text=[format_minutes(v) for v in series.values],
        hovertemplate='%{text}<extra></extra>',
        textposition='none',
    )])

    fig.update_layout(
        title='Duration per Activity',
        height=DEFAULT_CHART_HEIGHT,
        showlegend=False,
        xaxis=dict(
            tickmode='array',
            tickvals=list(range(len(series.labels))),
            ticktext=series.labels,
        ),
        yaxis_title='Minutes',
    )

    return fig


def create_day_timeline(aggregator: ActivityAggregator) -> go.Figure:
    """
    Create a single stacked bar spanning the 24 hours of the day.

    Each activity is a segment whose width is its share of the full day.
    Segments too narrow for text carry no label.

    Args:
        aggregator: Aggregator bound to the day to show

    Returns:
        Plotly Figure with the timeline
    """
    segments = aggregator.timeline_segments()
    if not segments:
        return _empty_figure(TIMELINE_CHART_HEIGHT)

    fig = go.Figure()
    for segment in segments:
        fig.add_trace(go.Bar(
            x=[segment.width_percent],
            y=['Day'],
            orientation='h',
            marker=dict(color=segment.color),
            text=[segment.label],
            textposition='inside',
            insidetextanchor='middle',
            hovertext=[segment.title],
            hoverinfo='text',
            showlegend=False,
        ))

    fig.update_layout(
        barmode='stack',
        height=TIMELINE_CHART_HEIGHT,
        xaxis=dict(range=[0, 100], ticksuffix='%', title='Share of the day'),
        yaxis=dict(showticklabels=False),
    )

    return fig
