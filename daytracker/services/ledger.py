"""
Activity ledger - the activities of one selected day and the daily budget.

Writes are validated locally (input, budget) and then handed to the sync
gateway. A write that was accepted has not necessarily reached the ledger
yet: the authoritative state always arrives through the live feed.
"""

from datetime import date
from typing import Any, Awaitable, Callable, List, Optional

from ..api.gateway import SyncGateway
from ..config import MAX_MINUTES_PER_DAY
from ..errors import (
    BudgetExceeded,
    LedgerError,
    LedgerResult,
    NotAuthenticated,
    NotFound,
    NotLoaded,
    PersistenceFailed,
    SubscriptionFailed,
)
from ..models import Activity, ActivityDraft
from ..utils.dates import DayLike, day_key
from ..logger import setup_logger
from .auth import AuthSession
from .day_feed import DayFeed

logger = setup_logger(__name__)


class ActivityLedger:
    """
    Owns the activity set of the selected day and enforces the daily budget.

    Usage:
        ledger = ActivityLedger(gateway, auth)
        ledger.add_listener(lambda l: print(l.total_minutes()))
        ledger.select_day(date.today())
        result = await ledger.add_activity("Deep work", "work", 90)
    """

    def __init__(
        self,
        gateway: SyncGateway,
        auth: AuthSession,
        max_minutes: int = MAX_MINUTES_PER_DAY,
    ):
        self._gateway = gateway
        self._auth = auth
        self.max_minutes = max_minutes
        self._feed = DayFeed(gateway, auth, owner=self, name="ledger")

    # ------------------------------------------------------------------
    # Day selection and live state
    # ------------------------------------------------------------------

    def select_day(self, day: DayLike):
        """Load the given day, dropping the previous day's activities."""
        self._feed.select_day(day)

    def close(self):
        """Stop listening and clear the activity set."""
        self._feed.close()

    @property
    def day(self) -> Optional[date]:
        return self._feed.day

    @property
    def activities(self) -> List[Activity]:
        return self._feed.activities

    @property
    def last_error(self) -> Optional[SubscriptionFailed]:
        return self._feed.last_error

    def add_listener(self, callback: Callable[['ActivityLedger'], Any]) -> Callable[[], None]:
        """Called with the ledger after every snapshot replace or clear."""
        return self._feed.add_listener(callback)

    def add_error_listener(self, callback: Callable[[SubscriptionFailed], Any]) -> Callable[[], None]:
        """Called when the live feed reports an error."""
        return self._feed.add_error_listener(callback)

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        for activity in self._feed.activities:
            if activity.id == activity_id:
                return activity
        return None

    def total_minutes(self) -> int:
        return sum(a.duration for a in self._feed.activities)

    def remaining_minutes(self) -> int:
        """
        Minutes left in the day's budget.
        Negative only if another writer bypassed the budget; not clamped here.
        """
        return self.max_minutes - self.total_minutes()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _require_user(self) -> str:
        user_id = self._auth.uid
        if not user_id:
            raise NotAuthenticated()
        if self.day is None:
            raise NotAuthenticated("No day selected")
        if not self._feed.is_loaded:
            detail = f": {self.last_error.message}" if self.last_error else ""
            raise NotLoaded(f"Activities for {day_key(self.day)} are not loaded{detail}")
        return user_id

    def validate_add(self, name: str, category: str, duration: int) -> ActivityDraft:
        """
        Check a new activity against input rules and the daily budget.

        Raises:
            InvalidInput: Empty name/category or non-positive duration
            BudgetExceeded: The day would exceed its budget
        """
        draft = ActivityDraft(name=name, category=category, duration=duration)
        total = self.total_minutes()
        if total + draft.duration > self.max_minutes:
            raise BudgetExceeded(
                remaining_minutes=self.max_minutes - total,
                requested_minutes=draft.duration,
            )
        return draft

    def validate_update(self, activity_id: str, name: str, category: str, duration: int) -> ActivityDraft:
        """
        Check an edit; the edited activity's current duration does not count
        against the budget.

        Raises:
            InvalidInput: Empty name/category or non-positive duration
            NotFound: activity_id is not in the current day
            BudgetExceeded: The day would exceed its budget
        """
        draft = ActivityDraft(name=name, category=category, duration=duration)
        current = self.get_activity(activity_id)
        if current is None:
            raise NotFound(activity_id)

        other_minutes = self.total_minutes() - current.duration
        if other_minutes + draft.duration > self.max_minutes:
            allowed = self.max_minutes - other_minutes
            raise BudgetExceeded(
                remaining_minutes=allowed,
                requested_minutes=draft.duration,
                message=f"Cannot set {draft.duration} minutes. Maximum allowed is {allowed} minutes.",
            )
        return draft

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def add_activity(self, name: str, category: str, duration: int) -> LedgerResult:
        """
        Log a new activity for the selected day.

        Returns:
            Accepted result, or a failure (NotAuthenticated, NotLoaded, InvalidInput,
            BudgetExceeded, PersistenceFailed)
        """
        try:
            user_id = self._require_user()
            draft = self.validate_add(name, category, duration)
        except LedgerError as e:
            logger.info(f"Add rejected ({e.kind}): {e}")
            return LedgerResult.failed(e)

        day = self.day
        return await self._persist(
            "add", day,
            lambda: self._gateway.create(user_id, day, draft),
        )

    async def update_activity(self, activity_id: str, name: str, category: str, duration: int) -> LedgerResult:
        """
        Edit an activity of the selected day.

        Returns:
            Accepted result, or a failure (NotAuthenticated, NotLoaded, InvalidInput,
            NotFound, BudgetExceeded, PersistenceFailed)
        """
        try:
            user_id = self._require_user()
            draft = self.validate_update(activity_id, name, category, duration)
        except LedgerError as e:
            logger.info(f"Update of {activity_id} rejected ({e.kind}): {e}")
            return LedgerResult.failed(e)

        day = self.day
        return await self._persist(
            "update", day,
            lambda: self._gateway.update(user_id, day, activity_id, draft),
        )

    async def delete_activity(self, activity_id: str) -> LedgerResult:
        """
        Remove an activity of the selected day. No budget check.

        Returns:
            Accepted result, or a failure (NotAuthenticated, NotLoaded, NotFound,
            PersistenceFailed)
        """
        try:
            user_id = self._require_user()
            if self.get_activity(activity_id) is None:
                raise NotFound(activity_id)
        except LedgerError as e:
            logger.info(f"Delete of {activity_id} rejected ({e.kind}): {e}")
            return LedgerResult.failed(e)

        day = self.day
        return await self._persist(
            "delete", day,
            lambda: self._gateway.delete(user_id, day, activity_id),
        )

    async def _persist(self, operation: str, day: date, call: Callable[[], Awaitable[Any]]) -> LedgerResult:
        """Run one gateway round-trip; failures are reported, never retried."""
        try:
            await call()
        except Exception as e:
            logger.error(f"Error during {operation} for {day_key(day)}: {e}")
            return LedgerResult.failed(PersistenceFailed(str(e)))
        return LedgerResult.accepted()
