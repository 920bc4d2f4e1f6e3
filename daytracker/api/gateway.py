"""
Sync gateway contract and an in-process implementation.

A gateway persists activities keyed by (user, day, id) and pushes the full,
ordered activity set of a day to every subscriber whenever it changes.
"""

import uuid
from dataclasses import replace
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from ..models import Activity, ActivityDraft, sort_activities
from ..utils.dates import day_key
from ..logger import setup_logger

logger = setup_logger(__name__)

SnapshotCallback = Callable[[List[Activity]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class GatewayError(Exception):
    """A gateway operation failed (transport, permission, missing record)."""


class SyncGateway(ABC):
    """
    Persistence and live-update contract consumed by the ledger.

    Writes resolve once the store accepted them; subscribers learn about the
    new state through their snapshot callback, never through the write call.
    """

    @abstractmethod
    def subscribe(
        self,
        user_id: str,
        day: date,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """
        Start a live feed of the ordered activity set for (user_id, day).

        The initial load counts as a snapshot. Call the returned function to
        stop the feed.
        """

    @abstractmethod
    async def create(self, user_id: str, day: date, draft: ActivityDraft) -> str:
        """Persist a new activity and return its assigned id."""

    @abstractmethod
    async def update(self, user_id: str, day: date, activity_id: str, draft: ActivityDraft) -> None:
        """Replace name, category and duration of an existing activity."""

    @abstractmethod
    async def delete(self, user_id: str, day: date, activity_id: str) -> None:
        """Remove an activity. Removing a missing record is not an error."""


class SubscriptionRegistry:
    """Fan-out of day snapshots to in-process subscribers."""

    def __init__(self):
        self._subscribers: Dict[Tuple[str, str], Dict[int, Tuple[SnapshotCallback, ErrorCallback]]] = {}
        self._next_token = 0

    def add(self, user_id: str, day: date, on_snapshot: SnapshotCallback, on_error: ErrorCallback) -> Unsubscribe:
        key = (user_id, day_key(day))
        token = self._next_token
        self._next_token += 1
        self._subscribers.setdefault(key, {})[token] = (on_snapshot, on_error)

        def unsubscribe():
            subscribers = self._subscribers.get(key)
            if subscribers is not None:
                subscribers.pop(token, None)
                if not subscribers:
                    del self._subscribers[key]

        return unsubscribe

    def count(self, user_id: str, day: date) -> int:
        return len(self._subscribers.get((user_id, day_key(day)), {}))

    def publish(self, user_id: str, day: date, activities: List[Activity]):
        """Deliver a snapshot to every subscriber of (user_id, day)."""
        subscribers = list(self._subscribers.get((user_id, day_key(day)), {}).values())
        for on_snapshot, _ in subscribers:
            try:
                on_snapshot(list(activities))
            except Exception as e:
                logger.error(f"Snapshot callback failed: {e}")

    def publish_error(self, user_id: str, day: date, error: Exception):
        subscribers = list(self._subscribers.get((user_id, day_key(day)), {}).values())
        for _, on_error in subscribers:
            try:
                on_error(error)
            except Exception as e:
                logger.error(f"Error callback failed: {e}")


def new_activity_id() -> str:
    """Opaque identifier for a new activity."""
    return uuid.uuid4().hex


class InMemoryGateway(SyncGateway):
    """
    Process-local gateway.

    Useful for tests and single-process use. Snapshots are delivered
    synchronously: on subscribe and after every successful write.
    """

    def __init__(self):
        self._records: Dict[Tuple[str, str], Dict[str, Activity]] = {}
        self._registry = SubscriptionRegistry()
        self._last_timestamp: Optional[datetime] = None

    def _now(self) -> datetime:
        # Strictly increasing so creation order survives equal clock readings
        now = datetime.now()
        if self._last_timestamp is not None and now <= self._last_timestamp:
            now = self._last_timestamp + timedelta(microseconds=1)
        self._last_timestamp = now
        return now

    def _day_records(self, user_id: str, day: date) -> Dict[str, Activity]:
        return self._records.setdefault((user_id, day_key(day)), {})

    def snapshot(self, user_id: str, day: date) -> List[Activity]:
        """Current ordered activity set for (user_id, day)."""
        records = self._records.get((user_id, day_key(day)), {})
        return sort_activities(
            replace(activity) for activity in records.values()
        )

    def subscriber_count(self, user_id: str, day: date) -> int:
        return self._registry.count(user_id, day)

    def subscribe(self, user_id, day, on_snapshot, on_error) -> Unsubscribe:
        unsubscribe = self._registry.add(user_id, day, on_snapshot, on_error)
        logger.debug(f"Subscribed to {user_id}/{day_key(day)}")
        on_snapshot(self.snapshot(user_id, day))
        return unsubscribe

    async def create(self, user_id, day, draft) -> str:
        activity_id = new_activity_id()
        self._day_records(user_id, day)[activity_id] = Activity(
            id=activity_id,
            name=draft.name,
            category=draft.category,
            duration=draft.duration,
            created_at=self._now(),
        )
        self._registry.publish(user_id, day, self.snapshot(user_id, day))
        return activity_id

    async def update(self, user_id, day, activity_id, draft) -> None:
        records = self._day_records(user_id, day)
        if activity_id not in records:
            raise GatewayError(f"No document to update: {activity_id}")
        current = records[activity_id]
        current.name = draft.name
        current.category = draft.category
        current.duration = draft.duration
        current.updated_at = self._now()
        self._registry.publish(user_id, day, self.snapshot(user_id, day))

    async def delete(self, user_id, day, activity_id) -> None:
        records = self._day_records(user_id, day)
        if records.pop(activity_id, None) is None:
            logger.debug(f"Delete of missing activity {activity_id} ignored")
            return
        self._registry.publish(user_id, day, self.snapshot(user_id, day))

    def put_external(self, user_id: str, day: date, activity: Activity):
        """
        Store an activity as another session would, without any budget check.
        Subscribers are notified like for any other write.
        """
        stored = replace(activity)
        if stored.created_at is None:
            stored.created_at = self._now()
        self._day_records(user_id, day)[stored.id] = stored
        self._registry.publish(user_id, day, self.snapshot(user_id, day))

    def fail_feed(self, user_id: str, day: date, error: Exception):
        """Report a transport error to the subscribers of (user_id, day)."""
        self._registry.publish_error(user_id, day, error)
