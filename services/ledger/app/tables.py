from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


METADATA = sa.MetaData()

ledger_transactions = sa.Table(
    "ledger_transactions",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("idempotency_token", sa.Text(), nullable=False),
    sa.Column("token_id", sa.Text(), nullable=False),
    sa.Column("metadata", JSONB, nullable=False),
    sa.Column("inserted_at", sa.DateTime(timezone=True), nullable=False),
)

ledger_entries = sa.Table(
    "ledger_entries",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column(
        "transaction_id", UUID(as_uuid=True), sa.ForeignKey("ledger_transactions.id"), nullable=False
    ),
    sa.Column("address", sa.Text(), nullable=False),
    sa.Column("type", sa.Text(), nullable=False),
    sa.Column("amount", sa.Numeric(), nullable=False),
    sa.Column("inserted_at", sa.DateTime(timezone=True), nullable=False),
)
