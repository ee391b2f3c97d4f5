import os

# Set before any app import so load_settings() never fails inside the test run.
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-entropy-0123456789")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.models.user import Role
from app.stores import TaskStore, UserStore

SECRET = "test-secret-key-with-enough-entropy-0123456789"
HTML = {"Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"}


@pytest.fixture
def settings():
    # low bcrypt cost keeps the suite fast; plain-http cookies so the client jar resends them
    return Settings(
        secret_key=SECRET,
        database_url="sqlite://",
        bcrypt_rounds=4,
        cookie_secure=False,
        cookie_samesite="lax",
    )


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def page_client(app):
    """Client that keeps redirects visible so tests can assert on Location."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(app, db):
    """Create a user straight through the store, bypassing /auth/register."""

    def _make(email, password="pw1", role=Role.user, name="Someone"):
        return UserStore(db).create(name, email, app.state.hasher.hash(password), role=role)

    return _make


@pytest.fixture
def make_task(db):
    def _make(owner, title, description=""):
        return TaskStore(db).create(title, owner.id, description)

    return _make


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def cookie(token):
    return {"Cookie": f"token={token}"}
