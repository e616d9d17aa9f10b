import importlib
import sys

import pytest


@pytest.fixture(autouse=True)
def main_import_isolation():
    original = sys.modules.pop("gameday.main", None)
    try:
        yield
    finally:
        sys.modules.pop("gameday.main", None)
        if original is not None:
            sys.modules["gameday.main"] = original


def test_rejects_wildcard_origins(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    monkeypatch.setenv("ALLOW_CREDENTIALS", "true")
    with pytest.raises(ValueError):
        importlib.import_module("gameday.main")


def test_requires_allowed_origins(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    monkeypatch.delenv("ALLOW_CREDENTIALS", raising=False)
    with pytest.raises(ValueError):
        importlib.import_module("gameday.main")


def test_blank_origins_are_rejected(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", " , ,")
    with pytest.raises(ValueError):
        importlib.import_module("gameday.main")


def test_explicit_origins_are_accepted(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://coach.example.com, https://app.example.com")
    monkeypatch.setenv("ALLOW_CREDENTIALS", "false")
    main = importlib.import_module("gameday.main")
    assert main.ALLOWED_ORIGINS == ["https://coach.example.com", "https://app.example.com"]
    assert main.ALLOW_CREDENTIALS is False
