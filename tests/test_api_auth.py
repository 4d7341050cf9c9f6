from __future__ import annotations

import csv

import bcrypt
from fastapi.testclient import TestClient

from portal.app import create_app
from portal.core import config as core_config
from tests.conftest import ASIA_ID, EDITOR_ID, EDITOR_PW, EUROPE_ID, EUROPE_PW


def test_wrong_password_is_401(anon):
    res = anon.post("/api/login/admin", json={"username": EUROPE_ID, "password": "nope"})
    assert res.status_code == 401
    assert res.json() == {"message": "Invalid credentials"}


def test_unknown_user_gets_same_answer(anon):
    res = anon.post("/api/login/admin", json={"username": "ghost", "password": "nope"})
    assert res.status_code == 401
    assert res.json() == {"message": "Invalid credentials"}


def test_partition_login_redirects_to_partition_admin(anon):
    res = anon.post("/api/login/admin", json={"username": EUROPE_ID, "password": EUROPE_PW})
    assert res.status_code == 200
    assert res.json() == {"redirectTo": "/europe/admin.html"}
    cookie = res.headers["set-cookie"].lower()
    assert "session=" in cookie
    assert "httponly" in cookie
    assert "max-age=86400" in cookie


def test_editor_login_redirects_to_global_admin(anon):
    res = anon.post("/api/login/admin", json={"username": EDITOR_ID, "password": EDITOR_PW})
    assert res.json() == {"redirectTo": "/admin.html"}


def test_missing_body_is_400(anon):
    res = anon.post("/api/login/admin")
    assert res.status_code == 400
    assert "message" in res.json()


def test_logout_without_session(anon):
    res = anon.post("/api/logout")
    assert res.status_code == 200
    assert res.json() == {"redirectTo": "/"}


def test_logout_ends_session(europe):
    assert europe.post("/api/europe/news", json={"heading": "x"}).status_code == 201
    res = europe.post("/api/logout")
    assert res.json() == {"redirectTo": "/europe/"}
    assert europe.post("/api/europe/news", json={"heading": "y"}).status_code == 401


def test_editor_logout_goes_home(editor):
    assert editor.post("/api/logout").json() == {"redirectTo": "/"}


def test_login_is_throttled(app, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2")
    core_config.get_settings.cache_clear()
    client = TestClient(app)
    for _ in range(2):
        assert client.post("/api/login/admin", json={"username": ASIA_ID, "password": "bad"}).status_code == 401
    res = client.post("/api/login/admin", json={"username": ASIA_ID, "password": "bad"})
    assert res.status_code == 429
    assert "message" in res.json()


def test_successful_login_clears_failed_attempts(app, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2")
    core_config.get_settings.cache_clear()
    client = TestClient(app)
    assert client.post("/api/login/admin", json={"username": EUROPE_ID, "password": "bad"}).status_code == 401
    assert client.post("/api/login/admin", json={"username": EUROPE_ID, "password": EUROPE_PW}).status_code == 200
    for _ in range(2):
        assert client.post("/api/login/admin", json={"username": EUROPE_ID, "password": "bad"}).status_code == 401
    assert client.post("/api/login/admin", json={"username": EUROPE_ID, "password": "bad"}).status_code == 429


def test_short_ttl_is_raised_to_a_minute_for_cookie_too(app, monkeypatch):
    monkeypatch.setenv("SESSION_TTL_SECONDS", "10")
    core_config.get_settings.cache_clear()
    client = TestClient(app)
    res = client.post("/api/login/admin", json={"username": EUROPE_ID, "password": EUROPE_PW})
    assert res.status_code == 200
    assert "max-age=60" in res.headers["set-cookie"].lower()


def test_bcrypt_row_from_older_deployment_can_log_in(portal_env):
    legacy = bcrypt.hashpw(b"secret", bcrypt.gensalt(rounds=4)).decode("ascii")
    users_csv = portal_env / "users.csv"
    users_csv.write_text(f"id,passwordHash,role\nadmin,{legacy},editor\n", encoding="utf-8")

    client = TestClient(create_app())
    res = client.post("/api/login/admin", json={"username": "admin", "password": "secret"})
    assert res.status_code == 200
    assert res.json() == {"redirectTo": "/admin.html"}

    with users_csv.open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["id"] == "admin"
    assert rows[0]["passwordHash"].startswith("argon2$")

    again = TestClient(create_app())
    res = again.post("/api/login/admin", json={"username": "admin", "password": "secret"})
    assert res.status_code == 200
    assert again.post("/api/login/admin", json={"username": "admin", "password": "wrong"}).status_code == 401
