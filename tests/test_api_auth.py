import time

import jwt

from models import storage

from helpers import (
    ALICE_PASSWORD,
    REFRESH_PATH,
    bearer,
    login,
    parse_set_cookie,
    refresh,
)

COOKIE_ATTRS = {"path", "max-age", "httponly", "secure", "samesite"}


def test_login_returns_access_token_and_refresh_cookie(app, client, alice):
    resp = login(client, "alice", ALICE_PASSWORD)
    assert resp.status_code == 200

    access = resp.get_json()
    claims = jwt.decode(access, app.config["JWT_SECRET"], algorithms=["HS256"])
    assert claims["store"] == alice["storage_dir"]
    assert abs(claims["exp"] - (time.time() + 300)) < 5

    cookie = parse_set_cookie(resp)
    attrs = cookie["attrs"]
    assert attrs["path"] == REFRESH_PATH
    assert attrs["max-age"] == "25200"
    assert attrs["httponly"] is True
    assert attrs["secure"] is True
    assert attrs["samesite"] == "Strict"
    assert set(attrs) == COOKIE_ATTRS

    refresh_claims = jwt.decode(cookie["value"], options={"verify_signature": False})
    assert abs(refresh_claims["exp"] - (time.time() + 25200)) < 5
    assert refresh_claims["store"] == alice["storage_dir"]


def test_login_missing_fields_is_400(client, alice):
    assert client.post("/api/account/login", json={"username": "alice"}).status_code == 400
    assert client.post("/api/account/login", json={"password": "x"}).status_code == 400
    assert client.post("/api/account/login", json={"username": "", "password": ""}).status_code == 400
    assert client.post("/api/account/login", data="not json").status_code == 400
    assert client.post("/api/account/login", json=["alice", "pw"]).status_code == 400


def test_bad_credentials_are_indistinguishable(client, alice):
    unknown = login(client, "nobody", ALICE_PASSWORD)
    wrong = login(client, "alice", "not-the-password")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()
    assert unknown.get_json()["message"] == "Unauthorized"
    assert "Set-Cookie" not in unknown.headers
    assert "Set-Cookie" not in wrong.headers


def test_legacy_hash_login_is_401(client, legacy_user):
    assert login(client, "legacy", "whatever").status_code == 401


def test_login_persistence_failure_is_500(client, alice, monkeypatch):
    monkeypatch.setattr(storage, "rotate_token_slot", lambda *args: 0)
    resp = login(client, "alice", ALICE_PASSWORD)
    assert resp.status_code == 500
    assert resp.get_json()["error"] == "INTERNAL_ERROR"
    assert "Set-Cookie" not in resp.headers


def test_logout_expires_cookie_without_a_session(client):
    resp = client.post("/api/account/logout")
    assert resp.status_code == 200
    cookie = parse_set_cookie(resp)
    assert cookie["value"] == ""
    assert cookie["attrs"]["max-age"] == "-1"
    assert cookie["attrs"]["path"] == REFRESH_PATH
    assert set(cookie["attrs"]) == COOKIE_ATTRS


def test_logout_does_not_revoke_server_side(client, alice):
    token = parse_set_cookie(login(client, "alice", ALICE_PASSWORD))["value"]
    client.post("/api/account/logout")
    assert refresh(client, token).status_code == 200


def test_refresh_returns_new_access_token(app, client, alice):
    token = parse_set_cookie(login(client, "alice", ALICE_PASSWORD))["value"]
    resp = refresh(client, token)
    assert resp.status_code == 200
    claims = jwt.decode(resp.get_json(), app.config["JWT_SECRET"], algorithms=["HS256"])
    assert claims["store"] == alice["storage_dir"]
    assert "Set-Cookie" not in resp.headers


def test_refresh_without_cookie_is_401(client):
    resp = client.post(REFRESH_PATH)
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized"


def test_refresh_with_bad_signature_is_401(client, alice):
    token = parse_set_cookie(login(client, "alice", ALICE_PASSWORD))["value"]
    header, payload, signature = token.split(".")
    bad_signature = ("A" if signature[0] != "A" else "B") + signature[1:]
    resp = refresh(client, f"{header}.{payload}.{bad_signature}")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Unauthorized"


def test_refresh_failures_share_one_response(client, alice):
    token = parse_set_cookie(login(client, "alice", ALICE_PASSWORD))["value"]
    header, payload, _ = token.split(".")
    bodies = [
        refresh(client, "garbage").get_json(),
        refresh(client, f"{header}.{payload}.forged").get_json(),
        client.post(REFRESH_PATH).get_json(),
    ]
    assert all(body == bodies[0] for body in bodies)


def test_alice_session_scenario(app, client, alice):
    first = login(client, "alice", ALICE_PASSWORD)
    assert first.status_code == 200
    first_refresh = parse_set_cookie(first)["value"]

    refreshed = refresh(client, first_refresh)
    assert refreshed.status_code == 200
    claims = jwt.decode(refreshed.get_json(), app.config["JWT_SECRET"], algorithms=["HS256"])
    assert claims["store"] == alice["storage_dir"]
    assert abs(claims["exp"] - (time.time() + 300)) < 5

    # The new access token works against a protected route
    assert client.get("/api/rom/list", headers=bearer(refreshed.get_json())).status_code == 200

    second = login(client, "alice", ALICE_PASSWORD)
    assert second.status_code == 200
    assert refresh(client, first_refresh).status_code == 401
    assert refresh(client, parse_set_cookie(second)["value"]).status_code == 200
