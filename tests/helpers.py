"""Request helpers shared by the API tests."""
from __future__ import annotations

REFRESH_PATH = "/api/tokens/refresh"
ALICE_PASSWORD = "correct-password"
BOB_PASSWORD = "bobs-password"


def parse_set_cookie(response, name: str = "refresh-tok") -> dict:
    """Return {'value': ..., 'attrs': {lowercased attr: value or True}}."""
    for header in response.headers.getlist("Set-Cookie"):
        first, *rest = [p.strip() for p in header.split(";")]
        key, _, value = first.partition("=")
        if key != name:
            continue
        attrs = {}
        for part in rest:
            attr, sep, attr_value = part.partition("=")
            attrs[attr.lower()] = attr_value if sep else True
        return {"value": value, "attrs": attrs}
    raise AssertionError(f"no Set-Cookie for {name}")


def login(client, username: str, password: str):
    return client.post("/api/account/login", json={"username": username, "password": password})


def refresh(client, token: str):
    return client.post(REFRESH_PATH, headers={"Cookie": f"refresh-tok={token}"})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
