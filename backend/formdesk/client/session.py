"""
Explicit session context: who is signed in and with which role.

Views read the current account from a ``SessionContext`` they are handed
and subscribe to hear about sign-in, sign-out and profile changes.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

import structlog

logger = structlog.get_logger(__name__)

LOGIN_ROUTE = "/login"
DASHBOARD_ROUTE = "/dashboard"

ALL_ROLES = ("user", "admin", "super_admin")

Listener = Callable[["SessionContext"], None]


class SessionContext:
    def __init__(self) -> None:
        self.token: Optional[str] = None
        self.account: Optional[Dict[str, Any]] = None
        self._listeners: List[Listener] = []

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None

    @property
    def role(self) -> Optional[str]:
        return self.account["role"] if self.account else None

    @property
    def profile(self) -> Dict[str, Any]:
        if not self.account:
            return {}
        return {
            "display_name": self.account.get("display_name"),
            "avatar_url": self.account.get("avatar_url"),
        }

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def sign_in(self, token_response: Dict[str, Any]) -> None:
        """Adopt the payload returned by login or register."""
        self.token = token_response["access_token"]
        self.account = dict(token_response["user"])
        logger.info("session_started", user_id=self.account["id"], role=self.role)
        self._notify()

    def update_account(self, account: Dict[str, Any]) -> None:
        """Refresh role and profile after a server-side change."""
        self.account = dict(account)
        self._notify()

    def sign_out(self) -> None:
        self.token = None
        self.account = None
        self._notify()

    def default_route(self) -> str:
        return DASHBOARD_ROUTE if self.is_authenticated else LOGIN_ROUTE

    def guard(self, allowed_roles: Iterable[str] = ALL_ROLES) -> Optional[str]:
        """
        Where to redirect before showing a protected view.

        None means the view may render. Anonymous visitors go to the login
        page and signed-in accounts without a permitted role go to their
        dashboard.
        """
        if not self.is_authenticated:
            return LOGIN_ROUTE
        if self.role not in tuple(allowed_roles):
            return DASHBOARD_ROUTE
        return None
