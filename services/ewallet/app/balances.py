from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import repo
from services.ewallet.app.tables import balances


PRIMARY_IDENTIFIER = "primary"


async def insert_primary(
    session: AsyncSession, *, user_id: uuid.UUID | None = None, account_id: uuid.UUID | None = None
) -> Row:
    if (user_id is None) == (account_id is None):
        raise ValueError("a balance belongs to exactly one of a user or an account")
    values: dict[str, Any] = dict(
        address=str(uuid.uuid4()),
        name="primary",
        identifier=PRIMARY_IDENTIFIER,
        user_id=user_id,
        account_id=account_id,
        metadata={},
    )
    return await repo.insert_row(session, balances, values)


async def get(session: AsyncSession, address: str) -> Row | None:
    return await repo.get_one(session, balances, balances.c.address == address)


async def get_primary_for_user(session: AsyncSession, user_id: uuid.UUID) -> Row | None:
    return await repo.get_one(
        session, balances, balances.c.user_id == user_id, balances.c.identifier == PRIMARY_IDENTIFIER
    )


async def get_primary_for_account(session: AsyncSession, account_id: uuid.UUID) -> Row | None:
    return await repo.get_one(
        session, balances, balances.c.account_id == account_id, balances.c.identifier == PRIMARY_IDENTIFIER
    )
