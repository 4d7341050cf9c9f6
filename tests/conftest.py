from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the portal package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from portal.app import create_app  # noqa: E402
from portal.core import config as core_config  # noqa: E402
from portal.db import session as db_session  # noqa: E402

EDITOR_ID, EDITOR_PW = "chief", "chief-pass"
EUROPE_ID, EUROPE_PW = "eu-desk", "eu-pass"
ASIA_ID, ASIA_PW = "asia-desk", "asia-pass"


@pytest.fixture()
def portal_env(tmp_path, monkeypatch):
    """Point every data file at tmp_path, use an in-memory session DB and reset cached settings/engine."""
    monkeypatch.setenv("PORTAL_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("NEWS_DB_PATH", str(tmp_path / "db.json"))
    monkeypatch.setenv("USERS_CSV_PATH", str(tmp_path / "users.csv"))
    monkeypatch.setenv("SESSION_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "1000")
    monkeypatch.delenv("EDITOR_BOOTSTRAP_ID", raising=False)
    monkeypatch.delenv("EDITOR_BOOTSTRAP_PASSWORD", raising=False)
    monkeypatch.delenv("SESSION_TTL_SECONDS", raising=False)
    monkeypatch.delenv("APP_ENV", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    db_session.init_db()

    yield tmp_path

    db_session.get_engine().dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def app(portal_env):
    application = create_app()
    credentials = application.state.credentials
    credentials.create_account(EDITOR_ID, EDITOR_PW, "editor")
    credentials.create_account(EUROPE_ID, EUROPE_PW, "europe")
    credentials.create_account(ASIA_ID, ASIA_PW, "asia")
    return application


def login(app, username: str, password: str) -> TestClient:
    client = TestClient(app)
    res = client.post("/api/login/admin", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return client


@pytest.fixture()
def anon(app) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def editor(app) -> TestClient:
    return login(app, EDITOR_ID, EDITOR_PW)


@pytest.fixture()
def europe(app) -> TestClient:
    return login(app, EUROPE_ID, EUROPE_PW)


@pytest.fixture()
def asia(app) -> TestClient:
    return login(app, ASIA_ID, ASIA_PW)
