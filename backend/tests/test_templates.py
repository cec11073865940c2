"""Tests for template management."""

import pytest

from formdesk.models import AdminNote, FormTemplate, Submission

from tests.conftest import INTAKE_FIELDS, auth_headers

NEW_TEMPLATE = {
    "name": "Feedback",
    "fields": [
        {"id": "rating", "type": "number", "label": "Rating", "required": True},
        {"id": "color", "type": "dropdown", "label": "Color"},
    ],
}


def test_super_admin_creates_template(client, super_admin):
    response = client.post("/api/templates", json=NEW_TEMPLATE, headers=auth_headers(super_admin))
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Feedback"
    assert body["created_by"] == super_admin.id
    assert body["fields"][1]["options"] == [{"label": "Option 1", "value": "option1"}]


def test_only_super_admin_writes_templates(client, admin, user, template):
    for account in (admin, user):
        headers = auth_headers(account)
        assert client.post("/api/templates", json=NEW_TEMPLATE, headers=headers).status_code == 403
        assert client.delete(f"/api/templates/{template.id}", headers=headers).status_code == 403


def test_template_validation(client, super_admin):
    headers = auth_headers(super_admin)
    assert client.post("/api/templates", json={"name": "Empty", "fields": []}, headers=headers).status_code == 422
    bad = {"name": "Bad", "fields": [{"id": "d", "type": "dropdown", "options": []}]}
    assert client.post("/api/templates", json=bad, headers=headers).status_code == 422


def test_everyone_can_read_templates(client, user, template):
    rows = client.get("/api/templates", headers=auth_headers(user)).json()
    assert rows == [{
        "id": template.id,
        "name": "Intake",
        "is_predefined": False,
        "field_count": len(INTAKE_FIELDS),
        "created_at": rows[0]["created_at"],
    }]
    body = client.get(f"/api/templates/{template.id}", headers=auth_headers(user)).json()
    assert [f["id"] for f in body["fields"]] == [f["id"] for f in INTAKE_FIELDS]


def test_predefined_listing(client, db, super_admin, template):
    template.is_predefined = True
    db.commit()
    rows = client.get("/api/templates/predefined", headers=auth_headers(super_admin)).json()
    assert [r["id"] for r in rows] == [template.id]


def test_update_template(client, super_admin, template):
    response = client.put(
        f"/api/templates/{template.id}",
        json={"name": "Intake v2"},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Intake v2"
    assert len(response.json()["fields"]) == len(INTAKE_FIELDS)


@pytest.mark.parametrize("key", ["name", "fields", "is_predefined"])
def test_update_rejects_null_values(client, super_admin, template, key):
    response = client.put(
        f"/api/templates/{template.id}",
        json={key: None},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 422

    unchanged = client.get(f"/api/templates/{template.id}", headers=auth_headers(super_admin))
    assert unchanged.json()["name"] == "Intake"


def test_missing_template(client, super_admin):
    headers = auth_headers(super_admin)
    assert client.get("/api/templates/999", headers=headers).status_code == 404
    assert client.put("/api/templates/999", json={"name": "x"}, headers=headers).status_code == 404


def test_delete_cascades_to_submissions_and_notes(client, db, super_admin, admin, user, template):
    submission = Submission(user_id=user.id, form_template_id=template.id, form_data={"name": "Ada"})
    db.add(submission)
    db.commit()
    db.add(AdminNote(submission_id=submission.id, admin_id=admin.id, note="looks good"))
    db.commit()

    response = client.delete(f"/api/templates/{template.id}", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["submissions_removed"] == 1

    db.expire_all()
    assert db.query(FormTemplate).count() == 0
    assert db.query(Submission).count() == 0
    assert db.query(AdminNote).count() == 0
