import os

from fastapi.testclient import TestClient

os.environ.setdefault("ALLOWED_ORIGINS", "http://testserver")
from gameday.main import app

client = TestClient(app)

URL = "/api/v0/scoring/evaluate"


def test_volleyball_win():
    resp = client.post(
        URL,
        json={
            "sport": "volleyball",
            "formatId": "best_of_3",
            "unitScores": [
                {"our": 25, "their": 20},
                {"our": 22, "their": 25},
                {"our": 15, "their": 10},
            ],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"] == {
        "outcome": "win",
        "ourUnitsWon": 2,
        "theirUnitsWon": 1,
        "ourTotalPoints": 62,
        "theirTotalPoints": 55,
        "pointDifferential": 7,
    }
    assert body["canComplete"] is True
    assert body["pendingReason"] is None
    assert body["visibleUnits"] == 3
    assert body["unitLabels"] == ["Set 1", "Set 2", "Set 3"]


def test_basketball_tie_asks_for_overtime():
    resp = client.post(
        URL,
        json={
            "sport": "basketball",
            "formatId": "four_quarters",
            "unitScores": [{"our": 20, "their": 20}] * 4,
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["outcome"] == "in_progress"
    assert body["overtimeDue"] is True
    assert body["canComplete"] is False
    assert body["pendingReason"] == "overtime_required"
    assert body["unitLabels"] == ["Q1", "Q2", "Q3", "Q4"]


def test_partially_entered_regulation_is_not_overtime():
    resp = client.post(
        URL,
        json={
            "sport": "basketball",
            "formatId": "four_quarters",
            "unitScores": [{"our": 20, "their": 20}] * 4,
            "enteredUnits": [0, 1],
        },
    )
    body = resp.json()
    assert body["overtimeDue"] is False
    assert body["pendingReason"] == "undecided"


def test_soccer_draw_can_complete():
    resp = client.post(
        URL,
        json={
            "sport": "soccer",
            "formatId": "two_halves",
            "unitScores": [{"our": 1, "their": 1}, {"our": 1, "their": 1}],
        },
    )
    body = resp.json()
    assert body["result"]["outcome"] == "tie"
    assert body["canComplete"] is True


def test_unknown_format_is_404():
    resp = client.post(
        URL,
        json={"sport": "soccer", "formatId": "best_of_3", "unitScores": []},
    )
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == "scoring_format_not_found"
    assert resp.headers["content-type"].startswith("application/problem+json")


def test_invalid_scores_are_422():
    resp = client.post(
        URL,
        json={
            "sport": "volleyball",
            "formatId": "best_of_3",
            "unitScores": [{"our": -1, "their": 0}],
        },
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "scoring_validation_error"


def test_too_many_sets_are_422():
    resp = client.post(
        URL,
        json={
            "sport": "volleyball",
            "formatId": "best_of_3",
            "unitScores": [{"our": 1, "their": 0}] * 4,
        },
    )
    assert resp.status_code == 422
    assert "Max allowed is 3" in resp.json()["detail"]
