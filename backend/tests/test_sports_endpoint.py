from fastapi import FastAPI
from fastapi.testclient import TestClient

from gameday.routers import sports

app = FastAPI()
app.include_router(sports.router, prefix="/api/v0")
client = TestClient(app)


def test_list_sports_returns_the_catalog():
    resp = client.get("/api/v0/sports")
    assert resp.status_code == 200
    data = resp.json()
    assert [s["id"] for s in data] == [
        "baseball",
        "basketball",
        "football",
        "hockey",
        "soccer",
        "softball",
        "volleyball",
    ]
    volleyball = data[-1]
    assert volleyball["isSetBased"] is True
    assert volleyball["icon"] == "🏐"
    assert [f["id"] for f in volleyball["formats"]] == [
        "best_of_3",
        "best_of_5",
        "two_sets",
        "rally_scoring",
    ]


def test_list_formats_for_set_based_sport():
    resp = client.get("/api/v0/sports/volleyball/formats")
    assert resp.status_code == 200
    best_of_3 = resp.json()[0]
    assert best_of_3 == {
        "kind": "sets",
        "id": "best_of_3",
        "name": "Best of 3 Sets",
        "description": "Youth/Recreational - First to win 2 sets",
        "setsToWin": 2,
        "maxSets": 3,
        "setTargets": [25, 25, 15],
        "setCaps": [30, 30, 20],
        "winByTwo": True,
        "noMatchWinner": False,
    }


def test_list_formats_for_period_based_sport():
    resp = client.get("/api/v0/sports/Hockey/formats")
    assert resp.status_code == 200
    (fmt,) = resp.json()
    assert fmt["kind"] == "periods"
    assert fmt["periods"] == 3
    assert fmt["periodName"] == "Period"
    assert fmt["hasOvertime"] is True
    assert fmt["allowTie"] is False


def test_unknown_sport_is_404():
    resp = client.get("/api/v0/sports/curling/formats")
    assert resp.status_code == 404
    assert "curling" in resp.json()["detail"]
