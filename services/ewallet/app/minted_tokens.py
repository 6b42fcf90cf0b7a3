from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import repo
from services.ewallet.app.schemas import MintedTokenParams
from services.ewallet.app.tables import minted_tokens


async def insert(session: AsyncSession, params: Mapping[str, Any] | MintedTokenParams) -> Row:
    p = repo.validate(MintedTokenParams, params)
    token = await repo.insert_row(session, minted_tokens, p.model_dump(), unique=("symbol",))
    await session.commit()
    return token


async def get(session: AsyncSession, token_id: Any) -> Row | None:
    return await repo.get_one(session, minted_tokens, minted_tokens.c.id == token_id)

