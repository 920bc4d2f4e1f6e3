"""
Day analytics - category totals, top category, timeline and chart series.

Everything is recomputed from the source's current activities on each call;
a day holds at most a few dozen activities so nothing is cached.
"""

import math
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional

import pandas as pd

from ..categories import OTHER_KEY, CategoryInfo, lookup
from ..config import (
    MAX_MINUTES_PER_DAY,
    TIMELINE_LABEL_MIN_PERCENT,
    TIMELINE_LABEL_LENGTH,
    BAR_LABEL_LENGTH,
)
from ..utils.formatting import format_minutes, truncate

FRAME_COLUMNS = ['id', 'name', 'category', 'duration']


@dataclass
class TimelineSegment:
    """One activity as a slice of the 24h bar."""
    category: str
    width_percent: float
    label: str
    name: str
    minutes: int
    color: str
    title: str


@dataclass
class CategoryShare:
    """Minutes and share of the day's total for one category."""
    category: str
    minutes: int
    percentage: float
    label: str
    icon: str
    color: str


@dataclass
class ChartSeries:
    """Parallel label/value/color lists ready for a chart."""
    labels: List[str]
    values: List[int]
    colors: List[str]


@dataclass
class DaySummary:
    """Headline numbers for the summary cards."""
    total_minutes: int
    activity_count: int
    top_category: Optional[str]
    top_category_display: str
    average_duration: int

    def to_dict(self) -> dict:
        return asdict(self)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def activities_frame(activities: list) -> pd.DataFrame:
    """
    Build a DataFrame of activities in chronological order.

    Missing or empty categories are attributed to 'other'; unknown keys are
    kept as they are.
    """
    records = [
        {
            'id': a.id,
            'name': a.name,
            'category': a.category or OTHER_KEY,
            'duration': int(a.duration),
        }
        for a in activities
    ]
    df = pd.DataFrame(records, columns=FRAME_COLUMNS)
    df['duration'] = df['duration'].astype('int64')
    return df


class ActivityAggregator:
    """
    Derived views over the activities of one day.

    Args:
        source: Object exposing an `activities` list (a ledger or dashboard view)
    """

    def __init__(self, source: Any, max_minutes: int = MAX_MINUTES_PER_DAY):
        self._source = source
        self.max_minutes = max_minutes

    @property
    def activities(self) -> list:
        return list(self._source.activities)

    def _frame(self) -> pd.DataFrame:
        return activities_frame(self.activities)

    def total_minutes(self) -> int:
        return int(sum(a.duration for a in self.activities))

    def activity_count(self) -> int:
        return len(self.activities)

    def category_totals(self) -> Dict[str, int]:
        """
        Summed minutes per category key.

        Keys are ordered by their first chronological appearance.
        """
        df = self._frame()
        if df.empty:
            return {}
        totals = df.groupby('category', sort=False)['duration'].sum()
        return {category: int(minutes) for category, minutes in totals.items()}

    def top_category(self) -> Optional[str]:
        """
        Category with the most minutes.

        On a tie the category that appeared first in the day wins.
        """
        top, top_minutes = None, 0
        for category, minutes in self.category_totals().items():
            if minutes > top_minutes:
                top, top_minutes = category, minutes
        return top

    def average_duration(self) -> int:
        count = self.activity_count()
        if count == 0:
            return 0
        return round_half_up(self.total_minutes() / count)

    def timeline_segments(self) -> List[TimelineSegment]:
        """Activities in chronological order as percentage widths of the full day."""
        segments = []
        for activity in self.activities:
            info = lookup(activity.category)
            width = activity.duration / self.max_minutes * 100
            segments.append(TimelineSegment(
                category=activity.category or OTHER_KEY,
                width_percent=width,
                label=activity.name[:TIMELINE_LABEL_LENGTH] if width > TIMELINE_LABEL_MIN_PERCENT else '',
                name=activity.name,
                minutes=activity.duration,
                color=info.color,
                title=f"{activity.name}: {format_minutes(activity.duration)}",
            ))
        return segments

    def timeline_legend(self) -> List[CategoryInfo]:
        """Distinct categories on the timeline, resolved to display metadata."""
        seen = []
        for activity in self.activities:
            key = activity.category or OTHER_KEY
            if key not in seen:
                seen.append(key)
        return [lookup(key) for key in seen]

    def category_breakdown(self) -> List[CategoryShare]:
        """
        Categories sorted by minutes, largest first.

        Equal minutes are ordered by category key.
        """
        totals = self.category_totals()
        if not totals:
            return []

        summary = pd.DataFrame(list(totals.items()), columns=['category', 'minutes'])
        summary = summary.sort_values(['minutes', 'category'], ascending=[False, True])
        total = int(summary['minutes'].sum())

        shares = []
        for row in summary.itertuples(index=False):
            info = lookup(row.category)
            shares.append(CategoryShare(
                category=row.category,
                minutes=int(row.minutes),
                percentage=float(row.minutes / total * 100) if total > 0 else 0.0,
                label=info.label,
                icon=info.icon,
                color=info.color,
            ))
        return shares

    def pie_series(self) -> ChartSeries:
        """Category totals as doughnut chart input."""
        labels, values, colors = [], [], []
        for category, minutes in self.category_totals().items():
            info = lookup(category)
            labels.append(info.label)
            values.append(minutes)
            colors.append(info.color)
        return ChartSeries(labels=labels, values=values, colors=colors)

    def bar_series(self) -> ChartSeries:
        """One bar per activity, in chronological order."""
        activities = self.activities
        return ChartSeries(
            labels=[truncate(a.name, BAR_LABEL_LENGTH) for a in activities],
            values=[a.duration for a in activities],
            colors=[lookup(a.category).color for a in activities],
        )

    def summary(self) -> DaySummary:
        top = self.top_category()
        return DaySummary(
            total_minutes=self.total_minutes(),
            activity_count=self.activity_count(),
            top_category=top,
            top_category_display=lookup(top).display_name if top else '-',
            average_duration=self.average_duration(),
        )
