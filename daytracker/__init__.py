"""
daytracker - daily activity ledger with a 24h budget and day analytics.
"""

from .analytics import ActivityAggregator
from .api import InMemoryGateway, SQLiteGateway, SyncGateway
from .categories import CATEGORIES, lookup
from .errors import (
    BudgetExceeded,
    InvalidInput,
    LedgerError,
    LedgerResult,
    NotAuthenticated,
    NotFound,
    NotLoaded,
    PersistenceFailed,
    SubscriptionFailed,
)
from .models import Activity, ActivityDraft
from .services import ActivityLedger, AuthSession, DashboardView, TrackerSession, User

__version__ = "0.1.0"

__all__ = [
    'ActivityAggregator',
    'InMemoryGateway',
    'SQLiteGateway',
    'SyncGateway',
    'CATEGORIES',
    'lookup',
    'BudgetExceeded',
    'InvalidInput',
    'LedgerError',
    'LedgerResult',
    'NotAuthenticated',
    'NotFound',
    'NotLoaded',
    'PersistenceFailed',
    'SubscriptionFailed',
    'Activity',
    'ActivityDraft',
    'ActivityLedger',
    'AuthSession',
    'DashboardView',
    'TrackerSession',
    'User',
]
