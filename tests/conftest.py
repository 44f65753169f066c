import os
import tempfile

# Settings are read at import time, so the environment is prepared before
# anything from the application is imported.
_tmp = tempfile.mkdtemp(prefix="journeystack-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEOCODING_ENABLED"] = "false"
os.environ["UPLOAD_DIR"] = os.path.join(_tmp, "uploads")
os.environ["LOG_DIR"] = os.path.join(_tmp, "logs")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["MAX_UPLOAD_MB"] = "1"
os.environ["DEFAULT_TIMEZONE"] = "UTC"
os.environ["FIREBASE_CREDENTIALS_PATH"] = os.path.join(_tmp, "missing-service-account.json")

import pytest
from fastapi.testclient import TestClient

import main
from database import Base, engine

API = "/api/v1"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


def register_and_login(client, username, email, password="secret123"):
    resp = client.post(f"{API}/auth/register", json={"username": username, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "alice", "alice@example.com")


@pytest.fixture
def other_headers(client):
    return register_and_login(client, "bob", "bob@example.com")


@pytest.fixture
def make_trip(client, auth_headers):
    def _make(headers=None, **fields):
        payload = {"title": "Lisbon", "start_date": "2024-05-01", "end_date": "2024-05-05"}
        payload.update(fields)
        resp = client.post(f"{API}/trips/", json=payload, headers=headers or auth_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _make
