"""Tests for the assignment graph, role changes and invites."""

import pytest

from formdesk.models import AdminAssignment, User, UserRole
from formdesk.services.invite import InvalidInviteCode, decode_invite, encode_invite

from tests.conftest import auth_headers


def test_create_and_list_assignment(client, super_admin, admin, user):
    response = client.post(
        "/api/assignments",
        json={"admin_id": admin.id, "user_id": user.id},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 201
    edges = client.get("/api/assignments", headers=auth_headers(super_admin)).json()
    assert [(e["admin_email"], e["user_email"]) for e in edges] == [
        ("admin@example.com", "user@example.com")
    ]


def test_duplicate_assignment_conflicts(client, super_admin, admin, user, assign):
    assign(admin, user)
    response = client.post(
        "/api/assignments",
        json={"admin_id": admin.id, "user_id": user.id},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 409


def test_assignment_needs_admin_and_user(client, super_admin, user, other_user):
    response = client.post(
        "/api/assignments",
        json={"admin_id": user.id, "user_id": other_user.id},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 400


def test_only_super_admin_manages_assignments(client, admin, user):
    response = client.post(
        "/api/assignments",
        json={"admin_id": admin.id, "user_id": user.id},
        headers=auth_headers(admin),
    )
    assert response.status_code == 403


def test_delete_assignment(client, db, super_admin, admin, user, assign):
    edge = assign(admin, user)
    response = client.delete(f"/api/assignments/{edge.id}", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert db.query(AdminAssignment).count() == 0
    response = client.delete(f"/api/assignments/{edge.id}", headers=auth_headers(super_admin))
    assert response.status_code == 404


def test_mine_for_admin_and_user(client, admin, user, assign):
    assign(admin, user)
    users = client.get("/api/assignments/mine", headers=auth_headers(admin)).json()
    assert [u["email"] for u in users] == ["user@example.com"]
    admins = client.get("/api/assignments/mine", headers=auth_headers(user)).json()
    assert [a["email"] for a in admins] == ["admin@example.com"]


def test_promote_user(client, super_admin, user):
    response = client.post(f"/api/users/{user.id}/promote", headers=auth_headers(super_admin))
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "admin"
    assert body["metadata"]["access_level"] == "partial"


def test_demote_removes_assignments(client, db, super_admin, admin, user, other_user, assign):
    assign(admin, user)
    assign(admin, other_user)
    response = client.post(f"/api/users/{admin.id}/demote", headers=auth_headers(super_admin))
    assert response.status_code == 200
    assert response.json()["role"] == "user"
    assert db.query(AdminAssignment).count() == 0


def test_demote_requires_admin(client, super_admin, user):
    response = client.post(f"/api/users/{user.id}/demote", headers=auth_headers(super_admin))
    assert response.status_code == 400


def test_set_access_level(client, db, super_admin, admin):
    response = client.put(
        f"/api/users/{admin.id}/access-level",
        json={"access_level": "full"},
        headers=auth_headers(super_admin),
    )
    assert response.status_code == 200
    assert response.json()["metadata"]["access_level"] == "full"
    db.expire_all()
    assert db.get(User, admin.id).user_metadata["access_level"] == "full"


def test_list_users_is_super_admin_only(client, super_admin, admin, user):
    assert client.get("/api/users", headers=auth_headers(admin)).status_code == 403
    emails = {u["email"] for u in client.get("/api/users", headers=auth_headers(super_admin)).json()}
    assert emails == {"super@example.com", "admin@example.com", "user@example.com"}


def test_invite_code_round_trip():
    assert decode_invite(encode_invite(42)) == 42
    assert "=" not in encode_invite(1)


@pytest.mark.parametrize("code", ["", "!!!", encode_invite(0), "YWJj"])
def test_invalid_invite_codes(code):
    with pytest.raises(InvalidInviteCode):
        decode_invite(code)


def test_invite_link_for_admin(client, admin):
    body = client.get("/api/invites/link", headers=auth_headers(admin)).json()
    assert body["code"] == encode_invite(admin.id)
    assert body["link"].endswith(f"/invite/{body['code']}")


def test_describe_invite(client, admin, user):
    assert client.get(f"/api/invites/{encode_invite(admin.id)}").json() == {
        "valid": True, "admin_id": admin.id, "admin_email": "admin@example.com"
    }
    # Codes for non-admins and garbage are both just invalid
    assert client.get(f"/api/invites/{encode_invite(user.id)}").json()["valid"] is False
    assert client.get("/api/invites/not-a-code").json()["valid"] is False


def test_accept_invite_is_idempotent(client, db, admin, user):
    code = encode_invite(admin.id)
    first = client.post(f"/api/invites/{code}/accept", headers=auth_headers(user))
    second = client.post(f"/api/invites/{code}/accept", headers=auth_headers(user))
    assert first.json()["status"] == "assigned"
    assert second.json()["status"] == "already_assigned"
    assert db.query(AdminAssignment).count() == 1


def test_accept_invalid_invite(client, user):
    response = client.post("/api/invites/bm9wZQ/accept", headers=auth_headers(user))
    assert response.status_code == 404


def test_register_with_invite(client, db, admin):
    response = client.post(
        "/api/auth/register",
        json={
            "email": "new@example.com",
            "password": "password123",
            "invite_code": encode_invite(admin.id),
        },
    )
    assert response.status_code == 201
    assert response.json()["assignment"] == "assigned"
    edge = db.query(AdminAssignment).one()
    assert edge.admin_id == admin.id
