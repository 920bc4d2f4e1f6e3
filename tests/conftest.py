"""
Pytest configuration and fixtures
"""
import asyncio
import os
import sys
import tempfile
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep test logs out of the working tree; must happen before daytracker is imported
os.environ.setdefault("DAYTRACKER_LOG_DIR", tempfile.mkdtemp(prefix="daytracker-logs-"))

from daytracker.api.gateway import InMemoryGateway, SyncGateway  # noqa: E402
from daytracker.models import Activity  # noqa: E402
from daytracker.services.auth import AuthSession, User  # noqa: E402
from daytracker.services.ledger import ActivityLedger  # noqa: E402

DAY = date(2026, 1, 15)
OTHER_DAY = date(2026, 1, 16)
USER_ID = "user-1"


def run(coro):
    """Drive a ledger coroutine to completion."""
    return asyncio.run(coro)


def make_activities(*specs, start: Optional[datetime] = None) -> List[Activity]:
    """
    Build activities from (name, category, duration) tuples, one minute apart.
    """
    start = start or datetime(2026, 1, 15, 8, 0)
    return [
        Activity(
            id=f"a{i}",
            name=name,
            category=category,
            duration=duration,
            created_at=start + timedelta(minutes=i),
        )
        for i, (name, category, duration) in enumerate(specs)
    ]


@dataclass
class FakeSubscription:
    user_id: str
    day: date
    on_snapshot: Callable
    on_error: Callable
    active: bool = True

    def deliver(self, activities: List[Activity]):
        """Deliver a snapshot, even after unsubscribe (simulates a late message)."""
        self.on_snapshot(list(activities))

    def fail(self, error: Exception):
        self.on_error(error)


class FakeGateway(SyncGateway):
    """
    Scriptable gateway: snapshots are only delivered when a test says so.
    """

    def __init__(self):
        self.subscriptions: List[FakeSubscription] = []
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    @property
    def latest(self) -> FakeSubscription:
        return self.subscriptions[-1]

    @property
    def active(self) -> List[FakeSubscription]:
        return [s for s in self.subscriptions if s.active]

    def subscribe(self, user_id, day, on_snapshot, on_error):
        subscription = FakeSubscription(user_id, day, on_snapshot, on_error)
        self.subscriptions.append(subscription)

        def unsubscribe():
            subscription.active = False

        return unsubscribe

    async def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def create(self, user_id, day, draft):
        await self._record("create", user_id, day, draft)
        return "new-id"

    async def update(self, user_id, day, activity_id, draft):
        await self._record("update", user_id, day, activity_id, draft)

    async def delete(self, user_id, day, activity_id):
        await self._record("delete", user_id, day, activity_id)


@pytest.fixture
def auth():
    """Auth session with a signed-in user."""
    return AuthSession(User(uid=USER_ID, display_name="Test User"))


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def ledger(gateway, auth):
    """Ledger on DAY backed by the in-memory gateway."""
    ledger = ActivityLedger(gateway, auth)
    ledger.select_day(DAY)
    yield ledger
    ledger.close()


@pytest.fixture
def fake_ledger(fake_gateway, auth):
    """Ledger on DAY backed by the scriptable gateway, loaded with an empty day."""
    ledger = ActivityLedger(fake_gateway, auth)
    ledger.select_day(DAY)
    fake_gateway.latest.deliver([])
    return ledger


class ListSource:
    """Minimal `activities` source for the aggregator."""

    def __init__(self, activities: List[Activity]):
        self.activities = activities
