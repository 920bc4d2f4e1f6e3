"""
Services package - Ledger, dashboard and session logic.
"""

from .auth import AuthSession, User
from .day_feed import DayFeed
from .ledger import ActivityLedger
from .dashboard import DashboardView
from .session import TrackerSession

__all__ = [
    'AuthSession',
    'User',
    'DayFeed',
    'ActivityLedger',
    'DashboardView',
    'TrackerSession',
]
