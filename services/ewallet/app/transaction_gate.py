from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession

from services.ewallet.app import balances, minted_tokens, repo
from services.ewallet.app.errors import GateError
from services.ewallet.app.logging import logger
from services.ewallet.app.observability import TRANSFER_TOTAL
from services.ewallet.app.schemas import TransferParams
from services.ewallet.app.tables import transfers
from services.ledger.app import entries


def _fail(code: str, description: str) -> GateError:
    TRANSFER_TOTAL.labels("error").inc()
    return GateError(code, description)


async def process_with_addresses(
    session: AsyncSession, ledger_session: AsyncSession, params: Mapping[str, Any] | TransferParams
) -> tuple[Row, list[Row], Row]:
    """
    Move `amount` subunits of a token from one balance address to another.

    Returns (transfer, [from_balance, to_balance], minted_token).
    """
    p = repo.validate(TransferParams, params)

    token = await minted_tokens.get(session, p.token_id)
    if token is None:
        raise _fail("minted_token:minted_token_not_found", "The minted token could not be found.")
    if p.from_address == p.to_address:
        raise _fail("transaction:same_address", "The source and destination addresses are the same.")

    from_balance = await balances.get(session, p.from_address)
    if from_balance is None:
        raise _fail("user:from_address_not_found", f"No balance found for address {p.from_address}.")
    to_balance = await balances.get(session, p.to_address)
    if to_balance is None:
        raise _fail("user:to_address_not_found", f"No balance found for address {p.to_address}.")

    transfer = await repo.insert_row(
        session,
        transfers,
        dict(
            idempotency_token=p.idempotency_token,
            from_address=from_balance.address,
            to_address=to_balance.address,
            minted_token_id=token.id,
            amount=p.amount,
            status="pending",
            metadata=p.metadata,
        ),
    )
    await session.commit()

    ledger_txn = await entries.record(
        ledger_session,
        token_id=str(token.id),
        idempotency_token=p.idempotency_token,
        debits=[{"address": from_balance.address, "amount": p.amount}],
        credits=[{"address": to_balance.address, "amount": p.amount}],
        metadata=p.metadata,
    )

    transfer = await repo.update_row(
        session, transfers, transfer.id, {"status": "confirmed", "ledger_transaction_id": ledger_txn.id}
    )
    await session.commit()

    TRANSFER_TOTAL.labels("confirmed").inc()
    logger.info(
        "transfer_confirmed",
        transfer_id=str(transfer.id),
        token=token.symbol,
        amount=p.amount,
    )
    return transfer, [from_balance, to_balance], token
