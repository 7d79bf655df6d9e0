from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

import api
from api import GameStore, app, get_store
from leaderboard import Leaderboard
from settings import Settings


@pytest.fixture()
def settings(monkeypatch: pytest.MonkeyPatch) -> Settings:
    config = Settings(rate_limit="10000/minute", log_level="WARNING", max_games=5)
    monkeypatch.setattr(api, "_settings", config)
    return config


@pytest.fixture()
def store(settings: Settings, tmp_path: Path) -> GameStore:
    return GameStore(settings, Leaderboard(tmp_path / "scores.json"))


@pytest.fixture()
def client(store: GameStore) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
