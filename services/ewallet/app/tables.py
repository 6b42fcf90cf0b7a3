from __future__ import annotations

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, UUID


METADATA = sa.MetaData()


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("inserted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


accounts = sa.Table(
    "accounts",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("name", sa.Text(), nullable=False, unique=True),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("parent_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)

users = sa.Table(
    "users",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("username", sa.Text(), nullable=True, unique=True),
    sa.Column("provider_user_id", sa.Text(), nullable=True, unique=True),
    sa.Column("email", sa.Text(), nullable=True, unique=True),
    sa.Column("password_hash", sa.Text(), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)

roles = sa.Table(
    "roles",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("name", sa.Text(), nullable=False, unique=True),
    sa.Column("display_name", sa.Text(), nullable=True),
    *_timestamps(),
)

memberships = sa.Table(
    "memberships",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=False),
    sa.Column("role_id", UUID(as_uuid=True), sa.ForeignKey("roles.id"), nullable=False),
    *_timestamps(),
    sa.UniqueConstraint("user_id", "account_id", name="memberships_user_id_account_id_key"),
)

keys = sa.Table(
    "keys",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("access_key", sa.Text(), nullable=False, unique=True),
    sa.Column("secret_key_hash", sa.Text(), nullable=False),
    sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=False),
    *_timestamps(),
)

api_keys = sa.Table(
    "api_keys",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("key", sa.Text(), nullable=False, unique=True),
    sa.Column("owner_app", sa.Text(), nullable=False),
    sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=True),
    sa.Column("expired", sa.Boolean(), nullable=False),
    *_timestamps(),
)

auth_tokens = sa.Table(
    "auth_tokens",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("token", sa.Text(), nullable=False, unique=True),
    sa.Column("owner_app", sa.Text(), nullable=False),
    sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("expired", sa.Boolean(), nullable=False),
    *_timestamps(),
)

minted_tokens = sa.Table(
    "minted_tokens",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("symbol", sa.Text(), nullable=False, unique=True),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("subunit_to_unit", sa.BigInteger(), nullable=False),
    sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)

# A balance is an address owned by exactly one of a user or an account.
balances = sa.Table(
    "balances",
    METADATA,
    sa.Column("address", sa.Text(), primary_key=True),
    sa.Column("name", sa.Text(), nullable=False),
    sa.Column("identifier", sa.Text(), nullable=False),
    sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
    sa.Column("account_id", UUID(as_uuid=True), sa.ForeignKey("accounts.id"), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)

mints = sa.Table(
    "mints",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("idempotency_token", sa.Text(), nullable=False),
    sa.Column("minted_token_id", UUID(as_uuid=True), sa.ForeignKey("minted_tokens.id"), nullable=False),
    sa.Column("amount", sa.Numeric(), nullable=False),
    sa.Column("description", sa.Text(), nullable=True),
    sa.Column("confirmed", sa.Boolean(), nullable=False),
    sa.Column("ledger_transaction_id", UUID(as_uuid=True), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)

transfers = sa.Table(
    "transfers",
    METADATA,
    sa.Column("id", UUID(as_uuid=True), primary_key=True),
    sa.Column("idempotency_token", sa.Text(), nullable=False),
    sa.Column("from_address", sa.Text(), sa.ForeignKey("balances.address"), nullable=False),
    sa.Column("to_address", sa.Text(), sa.ForeignKey("balances.address"), nullable=False),
    sa.Column("minted_token_id", UUID(as_uuid=True), sa.ForeignKey("minted_tokens.id"), nullable=False),
    sa.Column("amount", sa.Numeric(), nullable=False),
    sa.Column("status", sa.Text(), nullable=False),
    sa.Column("ledger_transaction_id", UUID(as_uuid=True), nullable=True),
    sa.Column("metadata", JSONB, nullable=False),
    *_timestamps(),
)
