import os
os.environ.setdefault("ENV_FILE", ".env.test")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("TEST_MODE", "true")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")

from dotenv import load_dotenv
load_dotenv(os.environ["ENV_FILE"])

import pytest
from fastapi.testclient import TestClient

from config import get_settings
from database_adapter import DatabaseAdapter
from main import app
from models.users import CurrentUser
from services.auth import Caller
from services.blog_manager import BlogContentManager
from services.database import get_db

ADMIN_EMAIL = os.environ["ADMIN_EMAIL"]


class FakeClock:
    """Deterministic epoch-ms clock; every reading advances one second."""

    def __init__(self, start: int = 1_700_000_000_000, step: int = 1000):
        self.now = start
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class _AuthClient:
    """TestClient wrapper that sends a dev-token Authorization header."""

    def __init__(self, base, user):
        self._base = base
        self._headers = {"Authorization": f"dev-token-{user['id']}"}

    def request(self, method, url, **kwargs):
        headers = kwargs.pop("headers", {}) or {}
        merged = {**self._headers, **headers}
        return self._base.request(method, url, headers=merged, **kwargs)

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def patch(self, url, **kwargs):
        return self.request("PATCH", url, **kwargs)

    def delete(self, url, **kwargs):
        return self.request("DELETE", url, **kwargs)


# ============================================================================
# Database fixtures (SQLite)
# ============================================================================

@pytest.fixture(scope="session")
def test_settings():
    """Load test environment settings from ENV_FILE (defaults to .env.test)."""
    return get_settings(os.environ.get("ENV_FILE", ".env.test"))


@pytest.fixture(scope="session")
def test_db(test_settings):
    """SQLite database for testing (no Supabase required)"""
    db = DatabaseAdapter(test_settings)
    db.init()
    yield db


@pytest.fixture
def clean_database(test_db):
    """Drop and recreate tables before each test"""
    test_db.cleanup()
    yield test_db


@pytest.fixture
def test_admin(clean_database):
    """The configured admin identity"""
    result = clean_database.table("users").insert({
        "email": ADMIN_EMAIL,
        "name": "Test Admin",
    }).execute()
    return result.data[0]


@pytest.fixture
def test_user(clean_database):
    """An authenticated user who is not the admin"""
    result = clean_database.table("users").insert({
        "email": "reader@example.com",
        "name": "Test Reader",
    }).execute()
    return result.data[0]


# ============================================================================
# API clients
# ============================================================================

@pytest.fixture
def client(clean_database):
    """Unauthenticated test client using SQLite."""
    app.dependency_overrides[get_db] = lambda: clean_database
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client, test_admin):
    """Test client authenticated as the admin via Authorization header."""
    return _AuthClient(client, test_admin)


@pytest.fixture
def auth_client(client, test_user):
    """Test client authenticated as a non-admin reader."""
    return _AuthClient(client, test_user)


@pytest.fixture
def auth_headers():
    """Return a factory that builds dev-token Authorization headers for a given user dict."""
    def _make(user: dict):
        return {"Authorization": f"dev-token-{user['id']}"}
    return _make


# ============================================================================
# Manager-level fixtures
# ============================================================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def manager(clean_database, clock):
    return BlogContentManager(clean_database, admin_email=ADMIN_EMAIL, clock=clock)


@pytest.fixture
def admin_caller():
    return Caller(user=CurrentUser(id="admin-1", email=ADMIN_EMAIL, name="Admin"))


@pytest.fixture
def reader_caller():
    return Caller(user=CurrentUser(id="reader-1", email="reader@example.com", name="Reader"))


@pytest.fixture
def anonymous_caller():
    return Caller()
