from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import accounts, minted_tokens, repo
from services.ewallet.app.errors import GateError
from services.ewallet.app.logging import logger
from services.ewallet.app.observability import MINT_TOTAL
from services.ewallet.app.schemas import MintParams
from services.ewallet.app.tables import mints
from services.ledger.app import entries


async def insert(
    session: AsyncSession, ledger_session: AsyncSession, params: Mapping[str, Any] | MintParams
) -> tuple[Row, Row]:
    """
    Mint new units of a token into the master account's primary balance.

    The mint row is stored unconfirmed first and confirmed once the ledger recorded it.
    Returns (mint, ledger_transaction).
    """
    p = repo.validate(MintParams, params)

    token = await minted_tokens.get(session, p.token_id)
    if token is None:
        MINT_TOTAL.labels("error").inc()
        raise GateError("minted_token:minted_token_not_found", "The minted token could not be found.")

    master = await accounts.get_master_account(session)
    balance = await accounts.get_primary_balance(session, master) if master is not None else None
    if balance is None:
        MINT_TOTAL.labels("error").inc()
        raise GateError("account:master_account_not_found", "The master account has no primary balance.")

    mint = await repo.insert_row(
        session,
        mints,
        dict(
            idempotency_token=p.idempotency_token,
            minted_token_id=token.id,
            amount=p.amount,
            description=p.description,
            confirmed=False,
            metadata=p.metadata,
        ),
    )
    await session.commit()

    ledger_txn = await entries.record(
        ledger_session,
        token_id=str(token.id),
        idempotency_token=p.idempotency_token,
        debits=[],
        credits=[{"address": balance.address, "amount": p.amount}],
        metadata=p.metadata,
    )

    mint = await repo.update_row(session, mints, mint.id, {"confirmed": True, "ledger_transaction_id": ledger_txn.id})
    await session.commit()

    MINT_TOTAL.labels("confirmed").inc()
    logger.info("mint_confirmed", mint_id=str(mint.id), token=token.symbol, amount=p.amount)
    return mint, ledger_txn
