from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import accounts, repo, users
from services.ewallet.app.crypto import hash_secret, verify_secret
from services.ewallet.app.schemas import ApiKeyParams, AuthTokenParams, KeyParams
from services.ewallet.app.tables import api_keys, auth_tokens, keys


async def insert_key(session: AsyncSession, params: Mapping[str, Any] | KeyParams) -> Row:
    """Insert an access/secret key pair. Only the hash of the secret key is kept."""
    p = repo.validate(KeyParams, params)
    values = dict(access_key=p.access_key, secret_key_hash=hash_secret(p.secret_key), account_id=p.account_id)
    key = await repo.insert_row(session, keys, values, unique=("access_key",))
    await session.commit()
    return key


async def insert_api_key(session: AsyncSession, params: Mapping[str, Any] | ApiKeyParams) -> Row:
    p = repo.validate(ApiKeyParams, params)
    api_key = await repo.insert_row(session, api_keys, p.model_dump(), unique=("key",))
    await session.commit()
    return api_key


async def insert_auth_token(session: AsyncSession, params: Mapping[str, Any] | AuthTokenParams) -> Row:
    p = repo.validate(AuthTokenParams, params)
    token = await repo.insert_row(session, auth_tokens, p.model_dump(), unique=("token",))
    await session.commit()
    return token


async def authenticate_key(session: AsyncSession, access_key: str, secret_key: str) -> Row | None:
    """Return the account owning the key pair, or None."""
    key = await repo.get_one(session, keys, keys.c.access_key == access_key)
    if key is None or not verify_secret(secret_key, key.secret_key_hash):
        return None
    return await accounts.get(session, key.account_id)


async def authenticate_client(session: AsyncSession, api_key: str, auth_token: str) -> Row | None:
    """Return the user behind an API key + auth token pair, or None."""
    key = await repo.get_one(session, api_keys, api_keys.c.key == api_key, api_keys.c.expired.is_(False))
    if key is None:
        return None
    token = await repo.get_one(
        session,
        auth_tokens,
        auth_tokens.c.token == auth_token,
        auth_tokens.c.owner_app == key.owner_app,
        auth_tokens.c.expired.is_(False),
    )
    if token is None:
        return None
    return await users.get(session, token.user_id)
