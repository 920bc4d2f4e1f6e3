"""
Analytics subpackage for day summaries.
"""

from .summary import (
    ActivityAggregator,
    CategoryShare,
    ChartSeries,
    DaySummary,
    TimelineSegment,
    activities_frame,
)

__all__ = [
    "ActivityAggregator",
    "CategoryShare",
    "ChartSeries",
    "DaySummary",
    "TimelineSegment",
    "activities_frame",
]
