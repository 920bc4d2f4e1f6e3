"""
Ledger error taxonomy and operation results.

Ledger write operations never raise these to their callers; they come back
wrapped in a LedgerResult so the presentation layer can turn them into
messages.
"""

from dataclasses import dataclass
from typing import Optional


class LedgerError(Exception):
    """Base class for all ledger failures."""
    kind = "error"

    @property
    def message(self) -> str:
        return str(self)


class InvalidInput(LedgerError, ValueError):
    """Empty name or category, or a duration that is not a positive integer."""
    kind = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class BudgetExceeded(LedgerError):
    """The write would push the day's total past the daily budget."""
    kind = "budget_exceeded"

    def __init__(self, remaining_minutes: int, requested_minutes: int, message: Optional[str] = None):
        super().__init__(
            message
            or f"Cannot add {requested_minutes} minutes. "
               f"Only {remaining_minutes} minutes remaining for this day."
        )
        self.remaining_minutes = remaining_minutes
        self.requested_minutes = requested_minutes


class NotFound(LedgerError):
    """The activity id is not part of the current day's set."""
    kind = "not_found"

    def __init__(self, activity_id: str):
        super().__init__(f"Activity {activity_id!r} not found for the selected day")
        self.activity_id = activity_id


class NotAuthenticated(LedgerError):
    """No user bound, or no day selected."""
    kind = "not_authenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotLoaded(LedgerError):
    """The selected day has no applied snapshot, so the budget cannot be checked."""
    kind = "not_loaded"


class PersistenceFailed(LedgerError):
    """The sync gateway rejected a write."""
    kind = "persistence_failed"


class SubscriptionFailed(LedgerError):
    """The live feed reported an error. The last snapshot is kept."""
    kind = "subscription_failed"


@dataclass
class LedgerResult:
    """
    Outcome of a ledger write.

    A successful result means the write was accepted by the gateway, not that
    the ledger already reflects it: the new state arrives via the live feed.
    """
    success: bool
    error: Optional[LedgerError] = None

    @classmethod
    def accepted(cls) -> 'LedgerResult':
        return cls(success=True)

    @classmethod
    def failed(cls, error: LedgerError) -> 'LedgerResult':
        return cls(success=False, error=error)

    @property
    def kind(self) -> str:
        return "accepted" if self.success else self.error.kind

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def raise_for_error(self):
        """Re-raise the wrapped error, if any."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict:
        data = {'success': self.success, 'kind': self.kind}
        if self.error is not None:
            data['error'] = self.error.message
            if isinstance(self.error, BudgetExceeded):
                data['remaining_minutes'] = self.error.remaining_minutes
        return data
