from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import balances, repo
from services.ewallet.app.logging import logger
from services.ewallet.app.schemas import AccountParams
from services.ewallet.app.tables import accounts


async def insert(session: AsyncSession, params: Mapping[str, Any] | AccountParams) -> Row:
    """Insert an account together with its primary balance."""
    p = repo.validate(AccountParams, params)
    async with session.begin_nested():
        account = await repo.insert_row(session, accounts, p.model_dump(), unique=("name",))
        await balances.insert_primary(session, account_id=account.id)
    await session.commit()
    logger.info("account_inserted", account_id=str(account.id), name=account.name)
    return account


async def get(session: AsyncSession, account_id: Any) -> Row | None:
    return await repo.get_one(session, accounts, accounts.c.id == account_id)


async def get_by_name(session: AsyncSession, name: str) -> Row | None:
    return await repo.get_one(session, accounts, accounts.c.name == name)


async def get_master_account(session: AsyncSession) -> Row | None:
    # The master account is the first account created without a parent.
    q = (
        sa.select(accounts)
        .where(accounts.c.parent_id.is_(None))
        .order_by(accounts.c.inserted_at.asc())
        .limit(1)
    )
    return (await session.execute(q)).first()


async def get_primary_balance(session: AsyncSession, account: Row) -> Row | None:
    return await balances.get_primary_for_account(session, account.id)
