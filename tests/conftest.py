"""
Test configuration: an in-memory SQLite database recreated for every test
and a fake identity provider. A bearer token ``alice`` authenticates as
``alice@example.com`` with subject ``sub-alice``.
"""
import os

# Must be set before the app (and its engine) is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ.pop("OPEN_API_KEY", None)
os.environ.pop("RESEND_API_KEY", None)

import pytest
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.testclient import TestClient

from app.main import app
from app.database import Base, engine, SessionLocal
from app.dependencies import (
    bearer,
    optional_bearer,
    get_verified_identity,
    get_optional_identity,
)
from app.models.admin_whitelist import AdminWhitelist


def identity_for(token):
    return {
        "sub": f"sub-{token}",
        "email": f"{token}@example.com",
        "name": token.title(),
        "picture": None,
    }


def fake_identity(credentials: HTTPAuthorizationCredentials = Depends(bearer)):
    return identity_for(credentials.credentials)


def fake_optional_identity(credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer)):
    if credentials is None:
        return None
    return identity_for(credentials.credentials)


def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_verified_identity] = fake_identity
    app.dependency_overrides[get_optional_identity] = fake_optional_identity
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return auth("alice")


@pytest.fixture
def bob():
    return auth("bob")


@pytest.fixture
def admin(db):
    """Headers for a user whose email is on the admin whitelist"""
    db.add(AdminWhitelist(email="admin@example.com"))
    db.commit()
    return auth("admin")


@pytest.fixture
def make_blog(client, alice):
    def _make_blog(title="Hello World", content="Some words here", headers=None, **extra):
        payload = {"title": title, "content": content, **extra}
        response = client.post("/api/blogs", json=payload, headers=headers or alice)
        assert response.status_code == 201, response.text
        return response.json()
    return _make_blog


@pytest.fixture
def approved_blog(client, admin, make_blog, monkeypatch):
    """Factory: create a blog as alice (by default) and approve it as admin"""
    monkeypatch.setattr("app.services.moderation.send_notification_safely", lambda data: None)

    def _approved_blog(**kwargs):
        blog = make_blog(**kwargs)
        response = client.put(
            f"/api/admin/blogs/{blog['id']}/status",
            json={"status": "approved"},
            headers=admin
        )
        assert response.status_code == 200, response.text
        return response.json()["blog"]
    return _approved_blog
