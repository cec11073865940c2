"""Pytest configuration and shared fixtures."""

import os
import tempfile

os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="formdesk-test-"))
os.environ.setdefault("PUBLIC_BASE_URL", "http://testserver")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from formdesk.database import Base, get_db
from formdesk.main import app
from formdesk.models import AdminAssignment, FormTemplate, User, UserRole
from formdesk.services.auth import AuthService

INTAKE_FIELDS = [
    {"id": "intro", "type": "header", "label": "About you", "headerLevel": 3},
    {"id": "name", "type": "text", "label": "Full name", "required": True},
    {"id": "ssn", "type": "text", "label": "SSN", "sensitive": True},
    {"id": "age", "type": "number", "label": "Age"},
    {"id": "sep", "type": "separator", "label": ""},
    {"id": "dept", "type": "dropdown", "label": "Department", "options": [
        {"label": "Engineering", "value": "engineering"},
        {"label": "Sales", "value": "sales"},
    ]},
    {"id": "agree", "type": "boolean", "label": "I agree", "required": True},
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    """FastAPI test client bound to the in-memory database."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides = {}


def make_account(db, email, role=UserRole.USER, metadata=None, password="password123"):
    account = User(
        email=email,
        hashed_password=AuthService.get_password_hash(password),
        role=role,
        user_metadata=metadata or {},
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def auth_headers(account):
    token = AuthService.create_access_token(data={"sub": str(account.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def super_admin(db):
    return make_account(db, "super@example.com", UserRole.SUPER_ADMIN)


@pytest.fixture
def admin(db):
    return make_account(db, "admin@example.com", UserRole.ADMIN, {"access_level": "partial"})


@pytest.fixture
def full_admin(db):
    return make_account(db, "full@example.com", UserRole.ADMIN, {"access_level": "full"})


@pytest.fixture
def user(db):
    return make_account(db, "user@example.com")


@pytest.fixture
def other_user(db):
    return make_account(db, "other@example.com")


@pytest.fixture
def template(db, super_admin):
    tpl = FormTemplate(name="Intake", fields=INTAKE_FIELDS, created_by=super_admin.id)
    db.add(tpl)
    db.commit()
    db.refresh(tpl)
    return tpl


@pytest.fixture
def assign(db):
    def _assign(admin_account, user_account):
        edge = AdminAssignment(admin_id=admin_account.id, user_id=user_account.id)
        db.add(edge)
        db.commit()
        return edge
    return _assign
