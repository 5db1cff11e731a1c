"""
Login and refresh.

Login verifies the password, rotates the user's refresh slot with one atomic
UPDATE, then mints an access token (global secret) and a refresh token
(signed with the new slot's slug). Refresh looks up the slug for the token's
claimed slot, verifies the token with it and mints a new access token for
the token's own `store` claim. Neither operation retries.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from flask import current_app

from models import storage
from utils.security import (
    hash_password,
    verify_password,
    generate_token_id,
    generate_token_slug,
)
from utils.tokens import sign_access, sign_refresh, verify_refresh, peek_refresh_subject

logger = logging.getLogger(__name__)

# Throwaway hash so unknown usernames pay the same KDF cost as wrong passwords
_DUMMY_HASH = hash_password(generate_token_slug())


class SessionError(Exception):
    """Base class for login/refresh failures."""


class InvalidCredentials(SessionError):
    """Unknown user, wrong password or a hash that needs migration."""


class InvalidRefreshToken(SessionError):
    """Malformed, unknown, superseded, forged or expired refresh token."""


class SessionPersistenceError(SessionError):
    """The rotation write did not change any row."""


@dataclass(frozen=True)
class IssuedSession:
    access_token: str
    refresh_token: str


def _burn_password_check(password: str) -> None:
    verify_password(password, _DUMMY_HASH)


def mint_access_token(store: str) -> str:
    return sign_access(
        store,
        current_app.config["JWT_SECRET"],
        lifetime=current_app.config["ACCESS_TOKEN_EXPIRES"],
    )


def login(username: str, password: str) -> IssuedSession:
    user = storage.get_user_by_username(username)
    if user is None:
        _burn_password_check(password)
        logger.info("login rejected: unknown user")
        raise InvalidCredentials()

    if not verify_password(password, user.pass_hash):
        logger.info("login rejected: bad password for user id=%s", user.id)
        raise InvalidCredentials()

    token_id = generate_token_id()
    token_slug = generate_token_slug()
    if storage.rotate_token_slot(user.id, token_id, token_slug) == 0:
        logger.error("refresh slot rotation affected no rows for user id=%s", user.id)
        raise SessionPersistenceError()

    access_token = mint_access_token(user.storage_dir)
    refresh_token = sign_refresh(
        token_id,
        user.storage_dir,
        token_slug,
        lifetime=current_app.config["REFRESH_TOKEN_EXPIRES"],
    )
    logger.info("login succeeded for user id=%s", user.id)
    return IssuedSession(access_token=access_token, refresh_token=refresh_token)


def refresh(refresh_token: str) -> str:
    token_id = peek_refresh_subject(refresh_token)
    if token_id is None:
        logger.info("refresh rejected: malformed token")
        raise InvalidRefreshToken()

    token_slug = storage.get_token_slug(token_id)
    if not token_slug:
        logger.info("refresh rejected: unknown or rotated slot")
        raise InvalidRefreshToken()

    claims = verify_refresh(refresh_token, token_slug)
    if claims is None:
        logger.info("refresh rejected: invalid signature or expired")
        raise InvalidRefreshToken()

    return mint_access_token(claims.store)
