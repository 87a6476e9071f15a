"""Shared fixtures for scorebook HTTP integration tests."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from scorebook.narrative.settings import NarrativeSettings
from scorebook.server.app import create_app
from scorebook.server.settings import ScorebookServerSettings
from scorebook.tests.mocks import StaticNarrator


def build_client(tmp_path, **kwargs) -> TestClient:
    settings_overrides = kwargs.pop("settings", {})
    app = create_app(
        settings=ScorebookServerSettings(bucket_dir=str(tmp_path / "bucket"), **settings_overrides),
        narrative_settings=NarrativeSettings(api_key=""),
        **kwargs,
    )
    return TestClient(app)


@pytest.fixture
def narrator():
    return StaticNarrator("Alice cruised to victory.")


@pytest.fixture
def client(tmp_path, narrator):
    with build_client(tmp_path, narrator=narrator) as c:
        yield c


def create_player(client: TestClient, name: str) -> dict:
    response = client.post("/users", json={"name": name})
    assert response.status_code == 201
    return response.json()
