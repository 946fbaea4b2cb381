"""
Pytest configuration and fixtures.
Each test gets its own temp data dir with a small seeded rate file.
"""

import json

import pytest
from fastapi.testclient import TestClient

from fxdesk.core.config import Settings
from fxdesk.main import create_app
from fxdesk.services.rates.store import RateStore

SEED_RATES = {"USD": 1, "EUR": 0.9, "JPY": 150}


@pytest.fixture
def rates_path(tmp_path):
    path = tmp_path / "exchange-rates.json"
    path.write_text(json.dumps(SEED_RATES, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def store(rates_path):
    s = RateStore(rates_path)
    assert s.load()
    return s


@pytest.fixture
def settings(tmp_path, rates_path):
    return Settings(data_dir=tmp_path, rates_filename=rates_path.name)


@pytest.fixture
def app(settings):
    return create_app(settings_override=settings)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
