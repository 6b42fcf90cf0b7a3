from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import repo
from services.ewallet.app.schemas import RoleParams
from services.ewallet.app.tables import roles


async def insert(session: AsyncSession, params: Mapping[str, Any] | RoleParams) -> Row:
    p = repo.validate(RoleParams, params)
    role = await repo.insert_row(session, roles, p.model_dump(), unique=("name",))
    await session.commit()
    return role


async def get_by_name(session: AsyncSession, name: str) -> Row | None:
    return await repo.get_one(session, roles, roles.c.name == name)
