"""
security helpers:
- PBKDF2-SHA256 password hashing stored as "<base64 salt>:<base64 digest>"
- random identifiers for refresh slots and storage partitions
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import uuid
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
DIGEST_BYTES = 32

# Modular-crypt style prefixes ($2a$, $2b$, $argon2id$, ...) from older schemes
LEGACY_HASH_PREFIXES = ("$2a$", "$2b$", "$2y$", "$argon2", "$pbkdf2")


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        PBKDF2_ALGORITHM, password.encode("utf-8"), salt, PBKDF2_ITERATIONS, dklen=DIGEST_BYTES
    )


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    digest = _derive(password, salt)
    return "{}:{}".format(
        base64.b64encode(salt).decode("ascii"), base64.b64encode(digest).decode("ascii")
    )


def is_legacy_hash(stored_hash: str) -> bool:
    return stored_hash.startswith(LEGACY_HASH_PREFIXES)


def _split_hash(stored_hash: str) -> Optional[Tuple[bytes, bytes]]:
    parts = stored_hash.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    try:
        salt = base64.b64decode(parts[0], validate=True)
        digest = base64.b64decode(parts[1], validate=True)
    except (binascii.Error, ValueError):
        return None
    if not salt or len(digest) != DIGEST_BYTES:
        return None
    return salt, digest


def verify_password(password: str, stored_hash: Optional[str]) -> bool:
    """
    Verify a plaintext password against a stored hash.
    Legacy and malformed hashes never verify; this function does not raise
    for bad stored data.
    """
    if not isinstance(stored_hash, str) or not stored_hash:
        return False
    if is_legacy_hash(stored_hash):
        logger.warning("legacy password hash detected; user needs migration")
        return False
    parts = _split_hash(stored_hash)
    if parts is None:
        logger.warning("malformed password hash rejected")
        return False
    salt, expected = parts
    return hmac.compare_digest(_derive(password, salt), expected)


def generate_token_id() -> str:
    """Identifier of a refresh rotation slot."""
    return str(uuid.uuid4())


def generate_token_slug() -> str:
    """Per-slot signing key for refresh tokens."""
    return secrets.token_urlsafe(32)


def generate_storage_dir() -> str:
    """Opaque storage partition, unrelated to the username."""
    return str(uuid.uuid4())
