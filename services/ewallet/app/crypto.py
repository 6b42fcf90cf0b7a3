from __future__ import annotations

import secrets

import bcrypt


def generate_key(length: int) -> str:
    """Random URL-safe key built from `length` random bytes."""
    return secrets.token_urlsafe(length)


def hash_secret(secret: str) -> str:
    return bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_secret(secret: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(secret.encode("utf-8"), hashed.encode("utf-8"))
