import pytest
from fastapi.testclient import TestClient

from conftest import FakeClient
from core import config
from modules.account.update_login import handler
from server import main


@pytest.fixture
def fake(monkeypatch, settings):
    client = FakeClient()
    monkeypatch.setattr(handler, "AppwriteClient", lambda s: client)
    monkeypatch.setattr(handler, "get_settings", lambda: settings)
    monkeypatch.setattr(main, "get_settings", lambda: settings)
    return client


@pytest.fixture
def http():
    return TestClient(main.app)


def test_health(http):
    assert http.get("/health").json() == {"ok": True}


def test_run_update_login(http, fake):
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "mode": "SINGLE",
                        "input": {"profileId": "p1", "accountId": "a1", "newPhone": "(987) 654-3210"}})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["data"]["account"]["email"] == "9876543210@phone.local"
    assert body["data"]["profile"]["phone"] == "9876543210"


def test_run_validation_failure_is_envelope(http, fake):
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "input": {"profileId": "p1"}})
    assert r.status_code == 200
    assert r.json()["ok"] is False
    assert r.json()["error"]["message"] == "profileId and accountId required"
    assert fake.calls == []


def test_run_schema_violation(http, fake):
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "input": {"profileId": ["p1"], "accountId": "a1"}})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "ERR_SCHEMA"


def test_run_unknown_action_and_module(http, fake):
    r = http.post("/run", params={"name": "modules.account.update_login"}, json={"action": "NOPE"})
    assert r.status_code == 400
    r = http.post("/run", params={"name": "modules.nowhere"}, json={"action": "X"})
    assert r.status_code == 400


def test_run_missing_config(http, monkeypatch):
    def missing():
        raise config.ConfigurationError(["APPWRITE_API_KEY"])
    monkeypatch.setattr(handler, "get_settings", missing)
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "input": {"profileId": "p1", "accountId": "a1"}})
    assert r.json()["error"]["code"] == "ERR_CONFIG"


def test_function_route_accepts_form_encoded_body(http, fake):
    r = http.post("/functions/update-login",
                  content="body=%7B%22profileId%22%3A%22p1%22%2C%22accountId%22%3A%22a1%22%2C%22name%22%3A%22N%22%7D",
                  headers={"Content-Type": "application/x-www-form-urlencoded"})
    assert r.json() == {"ok": True, "account": {"$id": "a1", "name": "N"}, "profile": {"$id": "p1", "name": "N"}}


def test_function_route_empty_body(http, fake):
    r = http.post("/functions/update-login", content=b"")
    assert r.json() == {"ok": False, "message": "profileId and accountId required"}


def test_run_accepts_numeric_ids(http, fake):
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "input": {"profileId": 42, "accountId": 123, "name": "N"}})
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert fake.calls[0] == ("update_user", ("123", {"name": "N"}))


def test_run_bad_timeout_config_is_envelope(http, monkeypatch, env):
    env["APPWRITE_REQUEST_TIMEOUT"] = "ten"
    monkeypatch.setattr(handler, "get_settings", lambda: config.load_settings(env))
    r = http.post("/run", params={"name": "modules.account.update_login"},
                  json={"action": "UPDATE_LOGIN", "input": {"profileId": "p1", "accountId": "a1"}})
    assert r.status_code == 200
    assert r.json()["error"]["code"] == "ERR_CONFIG"
    assert r.json()["error"]["details"]["invalid"] == ["APPWRITE_REQUEST_TIMEOUT"]
