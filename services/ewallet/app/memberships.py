from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import repo
from services.ewallet.app.errors import ChangesetError
from services.ewallet.app.logging import logger
from services.ewallet.app.tables import memberships


async def assign(session: AsyncSession, user: Row, account: Row, role: Row) -> Row:
    """
    Give `user` the `role` on `account`.

    A user holds at most one role per account; assigning again replaces the role.
    """
    ts = repo.now()
    stmt = pg_insert(memberships).values(
        id=uuid.uuid4(),
        user_id=user.id,
        account_id=account.id,
        role_id=role.id,
        inserted_at=ts,
        updated_at=ts,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[memberships.c.user_id, memberships.c.account_id],
        set_={"role_id": stmt.excluded.role_id, "updated_at": stmt.excluded.updated_at},
    ).returning(memberships)
    try:
        async with session.begin_nested():
            membership = (await session.execute(stmt)).one()
    except IntegrityError as e:
        raise ChangesetError({"membership": ["references a missing user, account or role"]}) from e
    await session.commit()
    logger.info(
        "membership_assigned",
        user_id=str(user.id),
        account_id=str(account.id),
        role_id=str(role.id),
    )
    return membership


async def list_for_user(session: AsyncSession, user: Row) -> list[Row]:
    q = sa.select(memberships).where(memberships.c.user_id == user.id).order_by(memberships.c.inserted_at)
    return list((await session.execute(q)).all())
