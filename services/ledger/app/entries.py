from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ledger.app.tables import ledger_entries, ledger_transactions


def _now() -> datetime:
    return datetime.now(tz=UTC)


async def record(
    session: AsyncSession,
    *,
    token_id: str,
    idempotency_token: str,
    debits: list[dict[str, Any]],
    credits: list[dict[str, Any]],
    metadata: dict[str, Any] | None = None,
) -> Row:
    """
    Store one ledger transaction with its debit and credit entries.

    Each entry is a dict with `address` and `amount`. A mint has no debits.
    """
    now = _now()
    txn = (
        await session.execute(
            sa.insert(ledger_transactions)
            .values(
                id=uuid.uuid4(),
                idempotency_token=idempotency_token,
                token_id=token_id,
                metadata=metadata or {},
                inserted_at=now,
            )
            .returning(ledger_transactions)
        )
    ).one()

    rows = [
        dict(id=uuid.uuid4(), transaction_id=txn.id, address=e["address"], type=kind, amount=e["amount"], inserted_at=now)
        for kind, entries in (("debit", debits), ("credit", credits))
        for e in entries
    ]
    if rows:
        await session.execute(sa.insert(ledger_entries), rows)
    await session.commit()
    return txn


async def list_entries(session: AsyncSession, transaction_id: uuid.UUID) -> list[Row]:
    q = (
        sa.select(ledger_entries)
        .where(ledger_entries.c.transaction_id == transaction_id)
        .order_by(ledger_entries.c.type.desc(), ledger_entries.c.address)
    )
    return list((await session.execute(q)).all())
