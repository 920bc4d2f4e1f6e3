"""
Tracker session - wires auth state to the ledger and the dashboard.
"""

from datetime import date
from typing import Optional

from ..analytics.summary import ActivityAggregator
from ..api.gateway import SyncGateway
from ..utils.dates import DayLike, to_day, today
from ..logger import setup_logger
from .auth import AuthSession, User
from .dashboard import DashboardView
from .ledger import ActivityLedger

logger = setup_logger(__name__)


class TrackerSession:
    """
    One user-facing session: an activity ledger for the day being edited and
    a dashboard for the day being analysed.

    Signing in subscribes both views to their days; signing out detaches
    them and drops their data.
    """

    def __init__(
        self,
        gateway: SyncGateway,
        auth: Optional[AuthSession] = None,
        day: Optional[DayLike] = None,
    ):
        self.auth = auth or AuthSession()
        self.ledger = ActivityLedger(gateway, self.auth)
        self.ledger_aggregator = ActivityAggregator(self.ledger)
        self.dashboard = DashboardView(gateway, self.auth)

        self._activity_day: date = to_day(day) if day is not None else today()
        self._dashboard_day: date = self._activity_day
        self._remove_auth_listener = self.auth.on_auth_state_changed(self._handle_auth_state_change)

        if self.auth.current_user is not None:
            self._handle_auth_state_change(self.auth.current_user)

    @property
    def activity_day(self) -> date:
        return self._activity_day

    @property
    def dashboard_day(self) -> date:
        return self._dashboard_day

    def _handle_auth_state_change(self, user: Optional[User]):
        if user is not None:
            logger.info(f"Loading {self._activity_day} for {user.uid}")
            self.ledger.select_day(self._activity_day)
            self.dashboard.select_day(self._dashboard_day)
        else:
            self.ledger.close()
            self.dashboard.close()

    def set_activity_day(self, day: DayLike):
        self._activity_day = to_day(day)
        self.ledger.select_day(self._activity_day)

    def set_dashboard_day(self, day: DayLike):
        self._dashboard_day = to_day(day)
        self.dashboard.select_day(self._dashboard_day)

    def analyse(self):
        """Show the day being edited on the dashboard."""
        self.set_dashboard_day(self._activity_day)

    def close(self):
        self._remove_auth_listener()
        self.ledger.close()
        self.dashboard.close()
