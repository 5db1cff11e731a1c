from __future__ import annotations

import logging
from functools import wraps

from flask import request, abort, current_app

from utils.tokens import verify_access

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def access_required():
    """
    Require a valid access token in `Authorization: Bearer <token>`.

    The verified `store` claim is passed to the view as the `store` keyword
    argument; views must build storage keys from it alone.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = request.headers.get("Authorization", "")
            if not auth.startswith(BEARER_PREFIX):
                logger.info("request to %s rejected: missing bearer token", request.path)
                abort(401)
            token = auth[len(BEARER_PREFIX):].strip()
            claims = verify_access(token, current_app.config["JWT_SECRET"])
            if claims is None:
                logger.info("request to %s rejected: invalid or expired token", request.path)
                abort(401)
            kwargs["store"] = claims.store
            return fn(*args, **kwargs)

        return wrapper

    return decorator
