"""In-process change feed for submission and note writes."""

import asyncio
import threading
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set

import structlog

logger = structlog.get_logger(__name__)

TABLES = ("submissions", "admin_notes")


class Audience:
    """Accounts allowed to hear about a change to one submission."""

    def __init__(self, owner_id: int, owner_is_user: bool, admin_ids: Iterable[int] = ()):
        self.owner_id = owner_id
        self.owner_is_user = owner_is_user
        self.admin_ids = frozenset(admin_ids)

    def includes(self, account_id: int, role: str) -> bool:
        if account_id == self.owner_id:
            return True
        if role == "super_admin":
            return self.owner_is_user
        if role == "admin":
            return account_id in self.admin_ids
        return False


class Subscription:
    """
    One listener's queue of change messages for a set of tables.

    A subscription opened for an account only receives changes whose
    audience includes that account. Without an account it hears everything.
    """

    def __init__(
        self,
        tables: FrozenSet[str],
        loop: asyncio.AbstractEventLoop,
        account_id: Optional[int] = None,
        role: Optional[str] = None,
        maxsize: int = 1000
    ):
        self.tables = tables
        self.account_id = account_id
        self.role = role
        self.queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue(maxsize=maxsize)
        self._loop = loop

    def wants(self, table: str, audience: Optional[Audience]) -> bool:
        if table not in self.tables:
            return False
        if self.account_id is None:
            return True
        return audience is not None and audience.includes(self.account_id, self.role)

    def deliver(self, message: Dict[str, Any]) -> None:
        self._loop.call_soon_threadsafe(self._put, message)

    def _put(self, message: Dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("change_feed_overflow", table=message["table"])

    async def get(self) -> Dict[str, Any]:
        return await self.queue.get()


class ChangeFeed:
    """
    Broadcasts row changes to subscribers.

    Publishing is synchronous and may happen from any thread; each
    subscription is fed on the event loop it was created on. Messages
    carry ids only, listeners re-fetch what they need.
    """

    def __init__(self) -> None:
        self._subscriptions: Set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(
        self,
        tables: Optional[Iterable[str]] = None,
        account_id: Optional[int] = None,
        role: Optional[str] = None
    ) -> Subscription:
        wanted = frozenset(tables or TABLES)
        unknown = wanted - set(TABLES)
        if unknown:
            raise ValueError(f"Unknown tables: {sorted(unknown)}")
        sub = Subscription(wanted, asyncio.get_running_loop(), account_id=account_id, role=role)
        with self._lock:
            self._subscriptions.add(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            self._subscriptions.discard(sub)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(
        self,
        table: str,
        event: str,
        row_id: int,
        submission_id: Optional[int] = None,
        audience: Optional[Audience] = None,
    ) -> None:
        message = {
            "table": table,
            "event": event,
            "id": row_id,
            "submission_id": submission_id,
            "user_id": audience.owner_id if audience else None,
        }
        with self._lock:
            targets = [s for s in self._subscriptions if s.wants(table, audience)]
        for sub in targets:
            try:
                sub.deliver(message)
            except RuntimeError:
                # loop already closed
                self.unsubscribe(sub)
        logger.debug(
            "change_published",
            table=table,
            change=event,
            row_id=row_id,
            listeners=len(targets),
        )


# Global singleton feed
feed = ChangeFeed()
