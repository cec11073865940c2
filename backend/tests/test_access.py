"""Tests for review visibility, redaction and filters."""

import pytest

from formdesk.models import AdminNote, Submission, SubmissionStatus, UserRole
from formdesk.services.render import REDACTED

from tests.conftest import auth_headers, make_account


@pytest.fixture
def submissions(db, user, other_user, template):
    rows = [
        Submission(user_id=user.id, form_template_id=template.id,
                   form_data={"name": "Ada", "ssn": "111"}),
        Submission(user_id=other_user.id, form_template_id=template.id,
                   form_data={"name": "Bob", "ssn": "222", "agree": True},
                   status=SubmissionStatus.COMPLETED.value),
    ]
    db.add_all(rows)
    db.commit()
    return rows


def list_as(client, account, **params):
    return client.get("/api/submissions", params=params, headers=auth_headers(account))


def test_super_admin_sees_all_user_submissions(client, super_admin, submissions):
    rows = list_as(client, super_admin).json()
    assert {r["user_email"] for r in rows} == {"user@example.com", "other@example.com"}
    assert {r["form_data"]["ssn"] for r in rows} == {"111", "222"}


def test_super_admin_does_not_see_admin_owned_submissions(client, db, super_admin, admin, template):
    db.add(Submission(user_id=admin.id, form_template_id=template.id, form_data={}))
    db.commit()
    assert list_as(client, super_admin).json() == []


def test_admin_sees_only_assigned_users(client, admin, user, submissions, assign):
    assert list_as(client, admin).json() == []
    assign(admin, user)
    rows = list_as(client, admin).json()
    assert [r["user_email"] for r in rows] == ["user@example.com"]


def test_partial_admin_gets_redacted_data(client, admin, user, submissions, assign):
    assign(admin, user)
    row = list_as(client, admin).json()[0]
    assert row["form_data"] == {"name": "Ada", "ssn": REDACTED}


def test_full_admin_sees_sensitive_data(client, full_admin, user, submissions, assign):
    assign(full_admin, user)
    row = list_as(client, full_admin).json()[0]
    assert row["form_data"]["ssn"] == "111"


def test_detail_redacts_for_partial_admin(client, admin, user, submissions, assign):
    assign(admin, user)
    body = client.get(
        f"/api/submissions/{submissions[0].id}", headers=auth_headers(admin)
    ).json()
    assert body["can_view_sensitive"] is False
    ssn = next(f for f in body["fields"] if f["id"] == "ssn")
    assert ssn["value"] == REDACTED
    assert ssn["answered"] is True
    assert all(not f["editable"] for f in body["fields"])


def test_unassigned_admin_gets_404(client, admin, submissions):
    response = client.get(f"/api/submissions/{submissions[0].id}", headers=auth_headers(admin))
    assert response.status_code == 404
    response = client.get(
        f"/api/submissions/{submissions[0].id}/render", headers=auth_headers(admin)
    )
    assert response.status_code == 404


def test_users_cannot_use_review_endpoints(client, user, submissions):
    assert list_as(client, user).status_code == 403
    response = client.get(f"/api/submissions/{submissions[0].id}", headers=auth_headers(user))
    assert response.status_code == 403


def test_user_cannot_render_someone_elses_submission(client, user, submissions):
    response = client.get(
        f"/api/submissions/{submissions[1].id}/render", headers=auth_headers(user)
    )
    assert response.status_code == 404


def test_status_filter(client, super_admin, submissions):
    rows = list_as(client, super_admin, status="completed").json()
    assert [r["user_email"] for r in rows] == ["other@example.com"]


def test_reserved_status_filters_match_nothing(client, super_admin, submissions):
    for reserved in ("pending", "submitted", "rejected"):
        response = list_as(client, super_admin, status=reserved)
        assert response.status_code == 200
        assert response.json() == []


def test_unknown_status_filter(client, super_admin, submissions):
    assert list_as(client, super_admin, status="archived").status_code == 400


def test_search_matches_email_or_template(client, super_admin, submissions):
    assert len(list_as(client, super_admin, search="OTHER@").json()) == 1
    assert len(list_as(client, super_admin, search="intake").json()) == 2
    assert list_as(client, super_admin, search="nothing").json() == []


def test_admin_filter_is_super_admin_only(client, admin, super_admin, user, submissions, assign):
    assign(admin, user)
    rows = list_as(client, super_admin, admin_id=admin.id).json()
    assert [r["user_email"] for r in rows] == ["user@example.com"]
    assert list_as(client, admin, admin_id=admin.id).status_code == 403


def test_template_filter(client, super_admin, submissions, template):
    assert len(list_as(client, super_admin, template_id=template.id).json()) == 2
    assert list_as(client, super_admin, template_id=template.id + 1).json() == []


def test_notes_are_appended_newest_first(client, db, admin, user, submissions, assign):
    assign(admin, user)
    sid = submissions[0].id
    for text in ("first", "second"):
        response = client.post(
            f"/api/submissions/{sid}/notes", json={"note": text}, headers=auth_headers(admin)
        )
        assert response.status_code == 201
        assert response.json()["admin_email"] == "admin@example.com"

    notes = client.get(f"/api/submissions/{sid}/notes", headers=auth_headers(admin)).json()
    assert [n["note"] for n in notes] == ["second", "first"]
    assert db.query(AdminNote).count() == 2


def test_blank_note_rejected(client, admin, user, submissions, assign):
    assign(admin, user)
    response = client.post(
        f"/api/submissions/{submissions[0].id}/notes",
        json={"note": "   "},
        headers=auth_headers(admin),
    )
    assert response.status_code == 422


def test_unassigned_admin_cannot_annotate(client, db, submissions):
    stranger = make_account(db, "stranger@example.com", role=UserRole.ADMIN)
    response = client.post(
        f"/api/submissions/{submissions[0].id}/notes",
        json={"note": "hi"},
        headers=auth_headers(stranger),
    )
    assert response.status_code == 404
