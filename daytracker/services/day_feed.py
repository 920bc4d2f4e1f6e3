"""
Day feed - the live activity set of one selected day.

Owns the gateway subscription for the current day selection. Every
subscription is tagged with the day and a generation number; snapshots or
errors carrying an outdated tag are dropped, so a late delivery for a
previous selection can never overwrite the current one.
"""

from datetime import date
from typing import Any, Callable, List, Optional

from ..api.gateway import SyncGateway, Unsubscribe
from ..errors import SubscriptionFailed
from ..models import Activity, sort_activities
from ..utils.dates import DayLike, day_key, to_day
from ..logger import setup_logger, log_day_stats
from .auth import AuthSession

logger = setup_logger(__name__)


class DayFeed:
    """
    Live, ordered activity set for one day.

    Snapshots from the gateway replace the whole set. Change listeners are
    called with the owner object (or the feed itself) after each replace or
    clear; error listeners receive a SubscriptionFailed.
    """

    def __init__(self, gateway: SyncGateway, auth: AuthSession, owner: Any = None, name: str = "feed"):
        self._gateway = gateway
        self._auth = auth
        self._owner = owner if owner is not None else self
        self._name = name

        self._day: Optional[date] = None
        self._activities: List[Activity] = []
        self._unsubscribe: Optional[Unsubscribe] = None
        self._generation = 0
        self.last_error: Optional[SubscriptionFailed] = None
        self._loaded = False

        self._change_listeners: List[Callable[[Any], None]] = []
        self._error_listeners: List[Callable[[SubscriptionFailed], None]] = []

    @property
    def day(self) -> Optional[date]:
        return self._day

    @property
    def activities(self) -> List[Activity]:
        return list(self._activities)

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    @property
    def is_loaded(self) -> bool:
        """True once a snapshot for the current selection has been applied."""
        return self._loaded

    def select_day(self, day: DayLike):
        """
        Switch the feed to another day.

        Detaches from the previous day before attaching to the new one and
        clears the current set. Without a signed-in user the day is recorded
        but nothing is subscribed.
        """
        new_day = to_day(day)
        self._detach()
        self._generation += 1
        generation = self._generation
        self._day = new_day
        self._activities = []
        self._loaded = False
        self.last_error = None
        self._notify_change()
        if generation != self._generation:
            return

        user_id = self._auth.uid
        if not user_id:
            logger.debug(f"{self._name}: no user bound, not subscribing to {day_key(new_day)}")
            return

        def on_snapshot(activities: List[Activity]):
            self._apply_snapshot(new_day, generation, activities)

        def on_error(error: Exception):
            self._apply_error(new_day, generation, error)

        try:
            unsubscribe = self._gateway.subscribe(user_id, new_day, on_snapshot, on_error)
        except Exception as e:
            logger.error(f"{self._name}: subscribe failed for {day_key(new_day)}: {e}")
            self._apply_error(new_day, generation, e)
            return

        if generation == self._generation:
            self._unsubscribe = unsubscribe
        else:
            # A listener switched the day while we were subscribing
            unsubscribe()

    def refresh(self):
        """Resubscribe to the current day (e.g. after sign-in)."""
        if self._day is not None:
            self.select_day(self._day)

    def close(self):
        """Detach from the gateway and drop the in-memory set."""
        self._detach()
        self._generation += 1
        had_data = bool(self._activities)
        self._activities = []
        self._loaded = False
        if had_data:
            self._notify_change()

    def _detach(self):
        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception as e:
                logger.error(f"{self._name}: unsubscribe failed: {e}")
            self._unsubscribe = None

    def _is_current(self, day: date, generation: int) -> bool:
        return generation == self._generation and day == self._day

    def _apply_snapshot(self, day: date, generation: int, activities: List[Activity]):
        if not self._is_current(day, generation):
            logger.debug(f"{self._name}: discarding stale snapshot for {day_key(day)}")
            return
        self._activities = sort_activities(activities)
        self._loaded = True
        self.last_error = None
        log_day_stats(self._activities, logger, f"{self._name} {day_key(day)}")
        self._notify_change()

    def _apply_error(self, day: date, generation: int, error: Exception):
        if not self._is_current(day, generation):
            logger.debug(f"{self._name}: discarding stale feed error for {day_key(day)}")
            return
        failure = SubscriptionFailed(f"Error loading activities: {error}")
        self.last_error = failure
        logger.error(f"{self._name}: live feed error for {day_key(day)}: {error}")
        for callback in list(self._error_listeners):
            try:
                callback(failure)
            except Exception as e:
                logger.error(f"{self._name}: error callback failed: {e}")

    def add_listener(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register a change listener. Returns a function removing it."""
        self._change_listeners.append(callback)
        return lambda: self._remove(self._change_listeners, callback)

    def add_error_listener(self, callback: Callable[[SubscriptionFailed], None]) -> Callable[[], None]:
        """Register a feed error listener. Returns a function removing it."""
        self._error_listeners.append(callback)
        return lambda: self._remove(self._error_listeners, callback)

    @staticmethod
    def _remove(listeners: list, callback):
        if callback in listeners:
            listeners.remove(callback)

    def _notify_change(self):
        for callback in list(self._change_listeners):
            try:
                callback(self._owner)
            except Exception as e:
                logger.error(f"{self._name}: change callback failed: {e}")
