# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from rehabpro.adapters.memory_repo import InMemorySettingsRepository
from rehabpro.api.http import app, get_settings_repo


@pytest.fixture(scope="session")
def settings_repo():
    return InMemorySettingsRepository()


@pytest.fixture(scope="session")
def client(settings_repo):
    # keep API tests off the sqlite file
    app.dependency_overrides[get_settings_repo] = lambda: settings_repo
    yield TestClient(app)
    app.dependency_overrides.clear()
