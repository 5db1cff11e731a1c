"""
Bearer token codec (PyJWT, HS256).

Access tokens carry {store, exp} and are signed with the process-wide
JWT_SECRET. Refresh tokens carry {sub, store, exp} and are signed with the
token_slug of the user's current rotation slot, so rotating the slot
invalidates them without a blocklist.

Claims are decoded into fixed-shape records; any other claim found in a
token is dropped.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, asdict
from datetime import timedelta
from typing import Any, Dict, Optional, Union

import jwt

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_LIFETIME = timedelta(minutes=5)
REFRESH_TOKEN_LIFETIME = timedelta(hours=7)

Key = Union[str, bytes]


@dataclass(frozen=True)
class AccessClaims:
    store: str
    exp: int


@dataclass(frozen=True)
class RefreshClaims:
    sub: str
    store: str
    exp: int


def _expiry(lifetime: timedelta, now: Optional[float]) -> int:
    issued = time.time() if now is None else now
    return int(issued + lifetime.total_seconds())


def _encode(claims: Dict[str, Any], key: Key) -> str:
    if not key:
        raise ValueError("signing key must not be empty")
    return jwt.encode(claims, key, algorithm=ALGORITHM)


def _decode(token: str, key: Key) -> Optional[Dict[str, Any]]:
    """Signature and expiry check; None on any failure."""
    if not token or not key:
        return None
    try:
        return jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            options={"require": ["exp"], "verify_aud": False, "verify_iss": False},
        )
    except jwt.InvalidTokenError as exc:
        logger.debug("token rejected: %s", exc.__class__.__name__)
        return None


def sign_access(
    store: str,
    secret: Key,
    now: Optional[float] = None,
    lifetime: timedelta = ACCESS_TOKEN_LIFETIME,
) -> str:
    claims = AccessClaims(store=store, exp=_expiry(lifetime, now))
    return _encode(asdict(claims), secret)


def sign_refresh(
    token_id: str,
    store: str,
    slot_secret: Key,
    now: Optional[float] = None,
    lifetime: timedelta = REFRESH_TOKEN_LIFETIME,
) -> str:
    claims = RefreshClaims(sub=token_id, store=store, exp=_expiry(lifetime, now))
    return _encode(asdict(claims), slot_secret)


def verify_access(token: str, secret: Key) -> Optional[AccessClaims]:
    payload = _decode(token, secret)
    if payload is None:
        return None
    store, exp = payload.get("store"), payload.get("exp")
    if not isinstance(store, str) or not store or not isinstance(exp, int):
        return None
    return AccessClaims(store=store, exp=exp)


def verify_refresh(token: str, slot_secret: Key) -> Optional[RefreshClaims]:
    payload = _decode(token, slot_secret)
    if payload is None:
        return None
    sub, store, exp = payload.get("sub"), payload.get("store"), payload.get("exp")
    if not isinstance(sub, str) or not sub:
        return None
    if not isinstance(store, str) or not store or not isinstance(exp, int):
        return None
    return RefreshClaims(sub=sub, store=store, exp=exp)


def peek_refresh_subject(token: str) -> Optional[str]:
    """
    Read the `sub` claim WITHOUT checking the signature.
    Only used to find which slot key the token must then be verified with.
    """
    if not token or token.count(".") != 2:
        return None
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    sub = payload.get("sub") if isinstance(payload, dict) else None
    if not isinstance(sub, str) or not sub:
        return None
    return sub
