"""Tests for the session context, the autosave controller and the HTTP client."""

import asyncio

import httpx
import pytest

from formdesk.client import ApiError, FormDeskClient, FormSession, SessionContext, SubmissionLocked
from formdesk.main import app


class FakeApi:
    """Records persist calls; optionally slow or failing."""

    def __init__(self, delay=0.0, error=None, existing=None):
        self.calls = []
        self.delay = delay
        self.error = error
        self.existing = existing

    async def get_submission(self, template_id):
        return self.existing

    async def save_progress(self, template_id, form_data):
        return await self._record("save", template_id, form_data, "in_progress")

    async def submit(self, template_id, form_data):
        return await self._record("submit", template_id, form_data, "completed")

    async def _record(self, kind, template_id, form_data, status):
        self.calls.append((kind, dict(form_data)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return {"id": 1, "form_template_id": template_id, "form_data": form_data, "status": status}


def collect(session):
    events = []
    session.subscribe(lambda kind, payload: events.append(kind))
    return events


# SessionContext

def test_session_context_notifies_subscribers():
    ctx = SessionContext()
    seen = []
    unsubscribe = ctx.subscribe(lambda c: seen.append(c.role))

    ctx.sign_in({"access_token": "t", "user": {"id": 1, "role": "admin", "display_name": "Ada"}})
    assert seen == ["admin"]
    assert ctx.profile["display_name"] == "Ada"

    unsubscribe()
    ctx.sign_out()
    assert seen == ["admin"]
    assert ctx.role is None


def test_session_context_guards():
    ctx = SessionContext()
    assert ctx.guard() == "/login"
    assert ctx.default_route() == "/login"

    ctx.sign_in({"access_token": "t", "user": {"id": 1, "role": "user"}})
    assert ctx.guard() is None
    assert ctx.guard(["super_admin"]) == "/dashboard"
    assert ctx.default_route() == "/dashboard"


# FormSession

@pytest.mark.asyncio
async def test_edits_are_debounced_into_one_save():
    api = FakeApi()
    session = FormSession(api, 1, autosave_delay=0.05)
    events = collect(session)

    session.edit("a", 1)
    session.edit("b", 2)
    session.edit("a", 3)
    await asyncio.sleep(0.2)
    await session.flush()

    assert api.calls == [("save", {"a": 3, "b": 2})]
    # Autosave is silent
    assert events == []
    assert session.status == "in_progress"


@pytest.mark.asyncio
async def test_explicit_save_notifies():
    api = FakeApi()
    session = FormSession(api, 1, autosave_delay=10)
    events = collect(session)

    session.edit("a", 1)
    assert await session.save() is True
    assert events == ["saved"]
    assert not session.autosave_pending


@pytest.mark.asyncio
async def test_submit_locks_the_session():
    api = FakeApi()
    session = FormSession(api, 1, autosave_delay=10)
    events = collect(session)

    session.edit("a", 1)
    assert await session.submit() is True
    assert events == ["submitted", "navigate"]
    assert session.completed

    with pytest.raises(SubmissionLocked):
        session.edit("a", 2)
    assert session.form_data == {"a": 1}


@pytest.mark.asyncio
async def test_submit_is_guarded_against_reentry():
    api = FakeApi(delay=0.05)
    session = FormSession(api, 1, autosave_delay=10)
    session.edit("a", 1)

    results = await asyncio.gather(session.submit(), session.submit())
    assert sorted(results) == [False, True]
    assert [c[0] for c in api.calls] == ["submit"]


@pytest.mark.asyncio
async def test_save_after_submit_is_a_noop():
    api = FakeApi(delay=0.05)
    session = FormSession(api, 1, autosave_delay=10)
    session.edit("a", 1)

    saving = asyncio.create_task(session.save())
    await asyncio.sleep(0)
    assert await session.submit() is True
    assert await saving is True

    assert await session.save() is False
    assert [c[0] for c in api.calls] == ["save", "submit"]


@pytest.mark.asyncio
async def test_submit_cancels_pending_autosave():
    api = FakeApi()
    session = FormSession(api, 1, autosave_delay=0.05)
    session.edit("a", 1)
    await session.submit()
    await asyncio.sleep(0.15)
    await session.flush()
    assert [c[0] for c in api.calls] == ["submit"]


@pytest.mark.asyncio
async def test_failure_keeps_local_data():
    api = FakeApi(error=ApiError(500, "boom"))
    session = FormSession(api, 1, autosave_delay=10)
    events = collect(session)

    session.edit("a", 1)
    assert await session.save() is False
    assert session.form_data == {"a": 1}
    assert events == ["error"]
    assert isinstance(session.last_error, ApiError)
    assert not session.completed
    # Not retried
    assert len(api.calls) == 1


@pytest.mark.asyncio
async def test_conflict_marks_session_completed():
    api = FakeApi(error=ApiError(409, "Submission is already completed"))
    session = FormSession(api, 1, autosave_delay=10)
    session.edit("a", 1)
    assert await session.save() is False
    assert session.completed


@pytest.mark.asyncio
async def test_close_drops_pending_autosave():
    api = FakeApi()
    session = FormSession(api, 1, autosave_delay=0.05)
    session.edit("a", 1)
    await session.close()
    await asyncio.sleep(0.15)
    assert api.calls == []


@pytest.mark.asyncio
async def test_open_resumes_existing_submission():
    existing = {"id": 9, "form_data": {"a": "x"}, "status": "completed"}
    session = await FormSession.open(FakeApi(existing=existing), 1)
    assert session.form_data == {"a": "x"}
    with pytest.raises(SubmissionLocked):
        session.edit("a", "y")


# FormDeskClient against the app

@pytest.mark.asyncio
async def test_client_round_trip(client, user, template):
    transport = httpx.ASGITransport(app=app)
    async with FormDeskClient("http://testserver", transport=transport) as api:
        await api.login("user@example.com", "password123")
        assert await api.get_submission(template.id) is None

        session = await FormSession.open(api, template.id, autosave_delay=10)
        session.edit("name", "Ada")
        session.edit("agree", True)
        assert await session.save() is True
        assert session.submission["form_data"] == {"name": "Ada", "agree": True}
        assert await session.submit() is True

        stored = await api.get_submission(template.id)
        assert stored["status"] == "completed"

        with pytest.raises(ApiError) as exc:
            await api.save_progress(template.id, {"name": "Bob"})
        assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_client_reports_missing_fields(client, user, template):
    transport = httpx.ASGITransport(app=app)
    async with FormDeskClient("http://testserver", transport=transport) as api:
        await api.login("user@example.com", "password123")
        with pytest.raises(ApiError) as exc:
            await api.submit(template.id, {"name": "Ada"})
        assert exc.value.status_code == 422
        assert exc.value.detail["missing"] == ["I agree"]


@pytest.mark.asyncio
async def test_client_error_with_non_object_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json=["boom"]))
    async with FormDeskClient("http://testserver", transport=transport) as api:
        with pytest.raises(ApiError) as exc:
            await api.my_submissions()
    assert exc.value.status_code == 500
    assert exc.value.detail == ["boom"]


@pytest.mark.asyncio
async def test_autosave_survives_non_object_error_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))
    async with FormDeskClient("http://testserver", transport=transport) as api:
        session = FormSession(api, 1)
        session.edit("name", "Ada")
        assert await session.save() is False
        assert session.form_data == {"name": "Ada"}
