"""
Dashboard view - analytics for a day chosen independently of the ledger.
"""

from datetime import date
from typing import Any, Callable, List, Optional

from ..analytics.summary import ActivityAggregator, DaySummary
from ..api.gateway import SyncGateway
from ..errors import SubscriptionFailed
from ..models import Activity
from ..utils.dates import DayLike
from .auth import AuthSession
from .day_feed import DayFeed


class DashboardView:
    """
    Read-only analytics view with its own day selection.

    Usage:
        dashboard = DashboardView(gateway, auth)
        dashboard.add_listener(render)
        dashboard.select_day("2026-01-15")
        dashboard.aggregator.category_breakdown()
    """

    def __init__(self, gateway: SyncGateway, auth: AuthSession):
        self._feed = DayFeed(gateway, auth, owner=self, name="dashboard")
        self.aggregator = ActivityAggregator(self)

    def select_day(self, day: DayLike):
        self._feed.select_day(day)

    def close(self):
        self._feed.close()

    @property
    def day(self) -> Optional[date]:
        return self._feed.day

    @property
    def activities(self) -> List[Activity]:
        return self._feed.activities

    @property
    def has_data(self) -> bool:
        return bool(self._feed.activities)

    @property
    def last_error(self) -> Optional[SubscriptionFailed]:
        return self._feed.last_error

    def summary(self) -> DaySummary:
        return self.aggregator.summary()

    def add_listener(self, callback: Callable[['DashboardView'], Any]) -> Callable[[], None]:
        return self._feed.add_listener(callback)

    def add_error_listener(self, callback: Callable[[SubscriptionFailed], Any]) -> Callable[[], None]:
        return self._feed.add_error_listener(callback)
