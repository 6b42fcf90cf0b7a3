from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

import sqlalchemy as sa
from pydantic import BaseModel, ValidationError
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app.errors import ChangesetError


ParamsT = TypeVar("ParamsT", bound=BaseModel)


def now() -> datetime:
    return datetime.now(tz=UTC)


def validate(model: type[ParamsT], params: Mapping[str, Any] | BaseModel) -> ParamsT:
    if isinstance(params, model):
        return params
    if isinstance(params, BaseModel):
        params = params.model_dump()
    try:
        return model.model_validate(dict(params))
    except ValidationError as e:
        raise ChangesetError.from_validation_error(e) from e


async def get_one(session: AsyncSession, table: sa.Table, *where: Any) -> Row | None:
    q = sa.select(table).where(*where).limit(1)
    return (await session.execute(q)).first()


async def insert_row(
    session: AsyncSession,
    table: sa.Table,
    values: dict[str, Any],
    *,
    unique: tuple[str, ...] = (),
) -> Row:
    """
    Insert one row and return it.

    Columns named in `unique` are checked up front so a duplicate surfaces as a field error
    rather than a bare constraint violation.
    """
    errors: dict[str, list[str]] = {}
    for field in unique:
        if values.get(field) is None:
            continue
        if await get_one(session, table, table.c[field] == values[field]) is not None:
            errors.setdefault(field, []).append("has already been taken")
    if errors:
        raise ChangesetError(errors)

    ts = now()
    row_values = {"id": uuid.uuid4(), "inserted_at": ts, "updated_at": ts, **values}
    row_values = {k: v for k, v in row_values.items() if k in table.c}
    try:
        async with session.begin_nested():
            return (await session.execute(sa.insert(table).values(**row_values).returning(table))).one()
    except IntegrityError as e:
        raise ChangesetError({"params": ["violates a database constraint"]}) from e


async def update_row(session: AsyncSession, table: sa.Table, row_id: Any, values: dict[str, Any]) -> Row:
    q = (
        sa.update(table)
        .where(table.c.id == row_id)
        .values(**values, updated_at=now())
        .returning(table)
    )
    return (await session.execute(q)).one()
