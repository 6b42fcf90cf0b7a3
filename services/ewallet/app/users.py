from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import balances, repo
from services.ewallet.app.crypto import hash_secret
from services.ewallet.app.logging import logger
from services.ewallet.app.schemas import UserParams
from services.ewallet.app.tables import users


async def insert(session: AsyncSession, params: Mapping[str, Any] | UserParams) -> Row:
    """
    Insert a user together with its primary balance.

    The plain password is never stored, only its bcrypt hash.
    """
    p = repo.validate(UserParams, params)
    values = p.model_dump(exclude={"password"})
    values["password_hash"] = hash_secret(p.password) if p.password else None
    # A user without its primary balance must never be committed.
    async with session.begin_nested():
        user = await repo.insert_row(session, users, values, unique=("username", "provider_user_id", "email"))
        await balances.insert_primary(session, user_id=user.id)
    await session.commit()
    logger.info("user_inserted", user_id=str(user.id))
    return user


async def get(session: AsyncSession, user_id: Any) -> Row | None:
    return await repo.get_one(session, users, users.c.id == user_id)


async def get_by_email(session: AsyncSession, email: str) -> Row | None:
    return await repo.get_one(session, users, users.c.email == email)


async def get_by_provider_user_id(session: AsyncSession, provider_user_id: str) -> Row | None:
    return await repo.get_one(session, users, users.c.provider_user_id == provider_user_id)


async def get_primary_balance(session: AsyncSession, user: Row) -> Row | None:
    return await balances.get_primary_for_user(session, user.id)
