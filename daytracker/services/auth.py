"""
Auth session - binds the signed-in user for ledger and sync operations.
Sign-in itself happens at an external provider; this only tracks the result.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from ..logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class User:
    """An authenticated identity."""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None


AuthListener = Callable[[Optional[User]], None]


class AuthSession:
    """
    Current user plus auth state change notification.

    Usage:
        auth = AuthSession()
        auth.on_auth_state_changed(lambda user: ...)
        auth.sign_in(User(uid="abc"))
    """

    def __init__(self, user: Optional[User] = None):
        self._user = user
        self._listeners: List[AuthListener] = []

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def uid(self) -> Optional[str]:
        return self._user.uid if self._user else None

    def sign_in(self, user: User):
        if not user.uid:
            raise ValueError("User must have a uid")
        self._user = user
        logger.info(f"User signed in: {user.uid}")
        self._notify()

    def sign_out(self):
        if self._user is None:
            return
        logger.info(f"User signed out: {self._user.uid}")
        self._user = None
        self._notify()

    def on_auth_state_changed(self, callback: AuthListener) -> Callable[[], None]:
        """
        Register a callback for sign-in/sign-out.

        Returns:
            Function removing the callback
        """
        self._listeners.append(callback)

        def remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _notify(self):
        for callback in list(self._listeners):
            try:
                callback(self._user)
            except Exception as e:
                logger.error(f"Auth state callback failed: {e}")
