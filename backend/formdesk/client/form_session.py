"""
Autosaving controller for one user filling one form.

Edits land in local form data and re-arm a debounce timer. When the timer
fires the latest snapshot is saved without a notification. Explicit saves
and the final submit go through the same lock, so a slow autosave can
never overwrite a completed submission.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Set

import httpx
import structlog

from formdesk.client.api import ApiError
from formdesk.client.session import DASHBOARD_ROUTE

logger = structlog.get_logger(__name__)

COMPLETED = "completed"

Listener = Callable[[str, Dict[str, Any]], None]


class SubmissionLocked(Exception):
    """The submission is completed and can no longer be edited."""


class FormSession:
    """
    Local state of a form being filled.

    ``api`` is anything with async ``save_progress(template_id, form_data)``
    and ``submit(template_id, form_data)`` methods, usually a
    ``FormDeskClient``. Listeners receive ``(kind, payload)`` with kind one
    of ``saved``, ``submitted``, ``navigate`` or ``error``.
    """

    def __init__(
        self,
        api: Any,
        template_id: int,
        submission: Optional[Dict[str, Any]] = None,
        autosave_delay: float = 3.0,
    ):
        self.api = api
        self.template_id = template_id
        self.autosave_delay = autosave_delay
        self.submission = submission
        self.status: Optional[str] = submission["status"] if submission else None
        self.form_data: Dict[str, Any] = dict(submission["form_data"]) if submission else {}
        self.last_error: Optional[Exception] = None

        self._listeners: List[Listener] = []
        self._lock = asyncio.Lock()
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()
        self._submitting = False

    @classmethod
    async def open(cls, api: Any, template_id: int, autosave_delay: float = 3.0) -> "FormSession":
        """Start from the caller's existing submission, if there is one."""
        submission = await api.get_submission(template_id)
        return cls(api, template_id, submission=submission, autosave_delay=autosave_delay)

    @property
    def completed(self) -> bool:
        return self.status == COMPLETED

    @property
    def autosave_pending(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: str, **payload) -> None:
        for listener in list(self._listeners):
            listener(kind, payload)

    def edit(self, field_id: str, value: Any) -> None:
        """Set one value locally and re-arm the autosave timer."""
        if self.completed:
            raise SubmissionLocked(f"Submission for template {self.template_id} is completed")
        self.form_data[field_id] = value
        self._arm_timer()

    def _arm_timer(self) -> None:
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.autosave_delay, self._fire_autosave)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire_autosave(self) -> None:
        self._timer = None
        task = asyncio.get_running_loop().create_task(self._autosave())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _autosave(self) -> None:
        if not self.form_data:
            return
        await self._persist(complete=False, notify=False)

    async def save(self) -> bool:
        """Save progress now."""
        self._cancel_timer()
        return await self._persist(complete=False, notify=True)

    async def submit(self) -> bool:
        """
        Save and complete. Calls made while a submit is running, or after
        completion, return False without touching the server.
        """
        if self._submitting or self.completed:
            return False
        self._submitting = True
        self._cancel_timer()
        try:
            return await self._persist(complete=True, notify=True)
        finally:
            self._submitting = False

    async def _persist(self, complete: bool, notify: bool) -> bool:
        async with self._lock:
            if self.completed:
                return False

            snapshot = dict(self.form_data)
            try:
                if complete:
                    result = await self.api.submit(self.template_id, snapshot)
                else:
                    result = await self.api.save_progress(self.template_id, snapshot)
            except (ApiError, httpx.HTTPError) as e:
                self.last_error = e
                if isinstance(e, ApiError) and e.status_code == 409:
                    self.status = COMPLETED
                logger.warning(
                    "form_persist_failed",
                    template_id=self.template_id,
                    complete=complete,
                    error=str(e),
                )
                self._emit("error", message=str(e), complete=complete)
                return False

            self.last_error = None
            self.submission = result
            self.status = result["status"]

        if complete:
            self._emit("submitted", submission=result)
            self._emit("navigate", route=DASHBOARD_ROUTE)
        elif notify:
            self._emit("saved", submission=result)
        return True

    async def flush(self) -> None:
        """Wait for autosaves already running."""
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight))

    async def close(self) -> None:
        """Drop a pending autosave; saves already running finish."""
        self._cancel_timer()
        await self.flush()
