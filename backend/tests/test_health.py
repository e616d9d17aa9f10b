import os

from fastapi.testclient import TestClient

os.environ.setdefault("ALLOWED_ORIGINS", "http://testserver")
from gameday.main import app

client = TestClient(app)


def test_unprefixed_healthz():
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_prefixed_healthz_and_root():
    assert client.get("/api/healthz").json() == {"status": "ok"}
    assert "Game Day API" in client.get("/api").json()["message"]
