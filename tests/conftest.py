"""
ReLive - Test Configuration and Fixtures
"""
import os
import tempfile

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["LOG_FILE"] = ""
os.environ["COOKIE_SECURE"] = "False"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="relive-uploads-")
os.environ["MEDIA_BASE_URL"] = "http://testserver/api/v1/media"
os.environ["CLOUDINARY_CLOUD_NAME"] = "demo"

from relive.main import app
from relive.database import Base, get_db
from relive.models.user import User
from relive.routers.auth import get_password_hash, create_access_token
from relive.services import stats_service

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

TEST_PASSWORD = "testpassword123"


class FakeCache:
    """Dict-backed stand-in for the Redis cache helpers."""

    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        return True

    async def delete(self, key):
        return 1 if self.store.pop(key, None) is not None else 0


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def fake_cache(monkeypatch):
    cache = FakeCache()
    monkeypatch.setattr(stats_service, "cache_get", cache.get)
    monkeypatch.setattr(stats_service, "cache_set", cache.set)
    monkeypatch.setattr(stats_service, "cache_delete", cache.delete)
    return cache


@pytest.fixture
def client(db_session, fake_cache):
    """Test client with database and cache overrides"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db_session, email="traveler@example.com", full_name="Test Traveler"):
    user = User(
        email=email,
        full_name=full_name,
        password_hash=get_password_hash(TEST_PASSWORD),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user(db_session):
    return make_user(db_session)


@pytest.fixture
def other_user(db_session):
    return make_user(db_session, email="someone@example.com", full_name="Someone Else")


@pytest.fixture
def auth_headers(test_user):
    return {"Authorization": f"Bearer {create_access_token(test_user)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user)}"}


@pytest.fixture
def create_memory(client, auth_headers):
    """Create a memory through the API and return its JSON"""
    def _create(headers=None, **fields):
        payload = {
            "title": "Coffee with Sarah",
            "content": "<p>Talked about dreams.</p>",
            "date": "2024-03-15",
        }
        payload.update(fields)
        response = client.post("/api/v1/memories/", json=payload, headers=headers or auth_headers)
        assert response.status_code == 201, response.text
        return response.json()["memory"]
    return _create
