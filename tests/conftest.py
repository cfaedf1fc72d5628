import base64

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from files_manager.core.config import Settings
from files_manager.core.sessions import SessionStore
from files_manager.core.storage import LocalContentStore
from files_manager.main import create_app
from files_manager.models.database import Database


class FakeRedis:
    """In-memory stand-in for the few redis commands the session store uses."""

    def __init__(self):
        self.data = {}
        self.now = 0.0
        self.alive = True

    def advance(self, seconds):
        self.now += seconds

    def ping(self):
        return self.alive

    def setex(self, key, ttl, value):
        self.data[key] = (value, self.now + ttl)
        return True

    def get(self, key):
        entry = self.data.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self.now >= expires_at:
            del self.data[key]
            return None
        return value

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


class RecordingQueue:
    def __init__(self):
        self.jobs = []

    def enqueue(self, user_id, file_id):
        self.jobs.append({"userId": user_id, "fileId": file_id})


def basic_auth_header(email, password):
    encoded = base64.b64encode(f"{email}:{password}".encode()).decode()
    return {"Authorization": f"Basic {encoded}"}


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        folder_path=str(tmp_path / "files"),
        log_level="DEBUG",
    )


@pytest.fixture
def database():
    database = Database("sqlite://", poolclass=StaticPool)
    database.create_all()
    return database


@pytest.fixture
def db(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def sessions(fake_redis):
    return SessionStore(fake_redis, ttl=24 * 60 * 60)


@pytest.fixture
def storage(tmp_path):
    return LocalContentStore(tmp_path / "files")


@pytest.fixture
def thumbnail_queue():
    return RecordingQueue()


@pytest.fixture
def app(settings, database, sessions, storage, thumbnail_queue):
    return create_app(
        settings,
        database=database,
        sessions=sessions,
        storage=storage,
        thumbnail_queue=thumbnail_queue,
    )


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def token(client):
    client.post("/users", json={"email": "bob@dylan.com", "password": "password"})
    response = client.get("/connect", headers=basic_auth_header("bob@dylan.com", "password"))
    return response.json()["token"]


@pytest.fixture
def other_token(client):
    client.post("/users", json={"email": "alice@example.com", "password": "secret"})
    response = client.get("/connect", headers=basic_auth_header("alice@example.com", "secret"))
    return response.json()["token"]
