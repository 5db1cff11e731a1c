"""
Account blueprint:
- POST /api/account/login
- POST /api/account/logout

Login returns the access token as the JSON body and the refresh token in an
HttpOnly cookie scoped to the refresh endpoint. Logout only expires that
cookie; nothing is written server-side.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, abort, current_app, make_response
from marshmallow import ValidationError
from werkzeug.http import dump_cookie

from models.schemas.account import LoginSchema
from utils import session

bp = Blueprint("account", __name__)

login_schema = LoginSchema()


def _refresh_cookie_header(value: str, max_age: int) -> str:
    # Max-Age only; no Expires attribute
    cfg = current_app.config
    return dump_cookie(
        cfg["REFRESH_COOKIE_NAME"],
        value,
        max_age=max_age,
        path=cfg["REFRESH_COOKIE_PATH"],
        httponly=True,
        secure=True,
        samesite="Strict",
        sync_expires=False,
    )


def set_refresh_cookie(response, token: str):
    max_age = int(current_app.config["REFRESH_TOKEN_EXPIRES"].total_seconds())
    response.headers.add("Set-Cookie", _refresh_cookie_header(token, max_age))
    return response


def expire_refresh_cookie(response):
    response.headers.add("Set-Cookie", _refresh_cookie_header("", -1))
    return response


@bp.post("/login")
def login():
    """
    Login: returns an access token, sets the refresh-tok cookie
    ---
    tags:
      - Account
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [username, password]
           properties:
             username: { type: string }
             password: { type: string }
    responses:
      200:
        description: Access token (JSON string); refresh token in Set-Cookie
      400:
        description: Missing credentials
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description="Missing credentials")
    try:
        data = login_schema.load(payload)
    except ValidationError:
        abort(400, description="Missing credentials")

    issued = session.login(data["username"], data["password"])

    response = make_response(jsonify(issued.access_token), 200)
    return set_refresh_cookie(response, issued.refresh_token)


@bp.post("/logout")
def logout():
    """
    Logout: expires the refresh-tok cookie
    ---
    tags:
      - Account
    responses:
      200:
        description: Logged out
    """
    response = make_response("Logged out", 200)
    response.mimetype = "text/plain"
    return expire_refresh_cookie(response)
