import pytest
from fastapi.testclient import TestClient

from .config import Settings
from .main import create_app

TEST_SECRET = "test-secret-key-for-unit-tests-1234567890"


@pytest.fixture
def settings(tmp_path):
    # point the DB at a temp file so tests don't touch real data
    return Settings(
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # entering the context runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register_and_login(client):
    """Returns a helper that creates a user and returns (user_id, auth headers)."""

    def _make(username="alice", email="alice@example.com", password="pass1234"):
        resp = client.post("/register", json={"username": username, "email": email, "password": password})
        assert resp.status_code == 201
        resp = client.post("/login", json={"email": email, "password": password})
        assert resp.status_code == 200
        data = resp.json()
        return data["user"]["id"], {"Authorization": f"Bearer {data['token']}"}

    return _make
