from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify, abort, current_app

from utils import session

logger = logging.getLogger(__name__)

bp = Blueprint("tokens", __name__)


@bp.post("/refresh")
def refresh():
    """
    Exchange the refresh-tok cookie for a new access token.
    The refresh token itself is neither rotated nor extended.
    ---
    tags:
      - Tokens
    description: Reads the refresh-tok cookie set by /api/account/login.
    responses:
      200:
        description: New access token (JSON string)
      401:
        description: Unauthorized
    """
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    if not token:
        logger.info("refresh rejected: no refresh cookie")
        abort(401)

    return jsonify(session.refresh(token)), 200
