"""
Seed the admin panel: roles, the account tree, admin/viewer users and their memberships.

Re-running is safe: existing roles, accounts and users are reported and left untouched,
while memberships are (re)assigned on every run.

Usage:
    python -m db.seed [--database-url URL]
"""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict, dataclass
from typing import Any

from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from db.cli import Console
from db.settings import SETTINGS
from services.ewallet.app import accounts, memberships, roles, users
from services.ewallet.app.crypto import generate_key
from services.ewallet.app.errors import ChangesetError
from services.ewallet.app.logging import configure_logging, logger


@dataclass(frozen=True)
class SeedOutcome:
    key: str
    # inserted | exists | assigned | error
    status: str
    detail: str | None = None


ROLE_SEEDS: list[dict[str, Any]] = [
    {"name": "admin", "display_name": "Admin"},
    {"name": "viewer", "display_name": "Viewer"},
]

# Parents are referenced by name and must appear earlier in the list.
ACCOUNT_SEEDS: list[dict[str, Any]] = [
    {"name": "master_account", "description": "Master Account", "parent_name": None},
    {"name": "brand1", "description": "Brand 1", "parent_name": "master_account"},
    {"name": "branch1", "description": "Branch 1", "parent_name": "brand1"},
]

ADMIN_EMAILS: list[str] = [
    # One admin user per account
    "admin_brand1@example.com",
    "admin_branch1@example.com",
    # One viewer user per account
    "viewer_master@example.com",
    "viewer_brand1@example.com",
    "viewer_branch1@example.com",
]

# Accounts are looked up by name since their ids are generated at insert time.
MEMBERSHIP_SEEDS: list[dict[str, str]] = [
    {"email": "admin_brand1@example.com", "role_name": "admin", "account_name": "brand1"},
    {"email": "admin_branch1@example.com", "role_name": "admin", "account_name": "branch1"},
    {"email": "viewer_master@example.com", "role_name": "viewer", "account_name": "master_account"},
    {"email": "viewer_brand1@example.com", "role_name": "viewer", "account_name": "brand1"},
    {"email": "viewer_branch1@example.com", "role_name": "viewer", "account_name": "branch1"},
]

UNPARSEABLE_ERROR = "  Unable to parse the provided error.\n"


def admin_seeds() -> list[dict[str, Any]]:
    # Fresh passwords on every call; they are only shown for newly inserted users.
    return [{"email": email, "password": generate_key(16), "metadata": {}} for email in ADMIN_EMAILS]


def _async_url(url: str) -> str:
    for prefix in ("postgresql+psycopg://", "postgresql+psycopg2://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix) :]
    return url


def _user_lines(email: str, password: str, user_id: Any) -> str:
    return f"  Email    : {email}\n  Password : {password}\n  ID       : {user_id}\n"


async def seed_roles(session: AsyncSession, console: Console) -> list[SeedOutcome]:
    console.subheading("Seeding roles:\n")
    outcomes: list[SeedOutcome] = []
    for data in ROLE_SEEDS:
        role = await roles.get_by_name(session, data["name"])
        if role is not None:
            console.warn(f"  Role {role.name} already exists (ID: {role.id})\n")
            outcomes.append(SeedOutcome(data["name"], "exists"))
            continue
        try:
            role = await roles.insert(session, data)
        except ChangesetError as e:
            console.error(f"  Role {data['name']} could not be inserted:")
            console.print_errors(e.errors)
            outcomes.append(SeedOutcome(data["name"], "error", str(e)))
            continue
        console.success(f"  Role {role.name} inserted (ID: {role.id})\n")
        outcomes.append(SeedOutcome(data["name"], "inserted"))
    return outcomes


async def seed_accounts(session: AsyncSession, console: Console) -> list[SeedOutcome]:
    console.subheading("Seeding accounts:\n")
    outcomes: list[SeedOutcome] = []
    for data in ACCOUNT_SEEDS:
        account = await accounts.get_by_name(session, data["name"])
        if account is not None:
            console.warn(f"  Account {account.name} already exists (ID: {account.id})\n")
            outcomes.append(SeedOutcome(data["name"], "exists"))
            continue

        params = {"name": data["name"], "description": data["description"], "metadata": {}}
        try:
            if data["parent_name"] is not None:
                parent = await accounts.get_by_name(session, data["parent_name"])
                if parent is None:
                    raise ChangesetError({"parent": [f"account {data['parent_name']} does not exist"]})
                params["parent_id"] = parent.id
            account = await accounts.insert(session, params)
        except ChangesetError as e:
            console.error(f"  Account {data['name']} could not be inserted:")
            console.print_errors(e.errors)
            outcomes.append(SeedOutcome(data["name"], "error", str(e)))
            continue
        console.success(f"  Account {account.name} inserted (ID: {account.id})\n")
        outcomes.append(SeedOutcome(data["name"], "inserted"))
    return outcomes


async def seed_admins(
    session: AsyncSession, console: Console, seeds: list[dict[str, Any]] | None = None
) -> list[SeedOutcome]:
    console.subheading("Seeding admin panel users:\n")
    outcomes: list[SeedOutcome] = []
    for data in seeds if seeds is not None else admin_seeds():
        user = await users.get_by_email(session, data["email"])
        if user is not None:
            # The stored password is only known as a hash.
            console.warn(_user_lines(user.email, "<hashed>", user.id))
            logger.info("seed_user_exists", email=user.email)
            outcomes.append(SeedOutcome(data["email"], "exists"))
            continue
        try:
            user = await users.insert(session, data)
        except ChangesetError as e:
            console.error(f"  Admin Panel user {data['email']} could not be inserted:")
            console.print_errors(e.errors)
            logger.warning("seed_user_failed", email=data["email"], errors=e.errors)
            outcomes.append(SeedOutcome(data["email"], "error", str(e)))
            continue
        console.success(_user_lines(user.email, data.get("password") or "<hashed>", user.id))
        logger.info("seed_user_inserted", email=user.email)
        outcomes.append(SeedOutcome(data["email"], "inserted"))
    return outcomes


async def _resolve_membership(session: AsyncSession, data: dict[str, str]) -> tuple[Row, Row, Row] | None:
    user = await users.get_by_email(session, data["email"])
    account = await accounts.get_by_name(session, data["account_name"])
    role = await roles.get_by_name(session, data["role_name"])
    if user is None or account is None or role is None:
        logger.warning(
            "seed_membership_unresolved",
            email=data["email"],
            user_found=user is not None,
            account_found=account is not None,
            role_found=role is not None,
        )
        return None
    return user, account, role


async def assign_memberships(
    session: AsyncSession, console: Console, seeds: list[dict[str, str]] | None = None
) -> list[SeedOutcome]:
    console.subheading("Assigning roles to admin panel users:\n")
    outcomes: list[SeedOutcome] = []
    for data in seeds if seeds is not None else MEMBERSHIP_SEEDS:
        resolved = await _resolve_membership(session, data)
        if resolved is None:
            console.error(f"  Admin Panel user {data['email']} could not be assigned:")
            console.error(UNPARSEABLE_ERROR)
            outcomes.append(SeedOutcome(data["email"], "error", "unresolved user, account or role"))
            continue

        user, account, role = resolved
        try:
            await memberships.assign(session, user, account, role)
        except ChangesetError as e:
            console.error(f"  Admin Panel user {data['email']} could not be assigned:")
            console.print_errors(e.errors)
            outcomes.append(SeedOutcome(data["email"], "error", str(e)))
            continue
        console.success(f"  Email : {user.email}\n  Role  : {role.name} at {account.name}\n")
        outcomes.append(SeedOutcome(data["email"], "assigned"))
    return outcomes


async def run_seeders(session: AsyncSession, console: Console | None = None) -> dict[str, list[SeedOutcome]]:
    console = console or Console()
    return {
        "roles": await seed_roles(session, console),
        "accounts": await seed_accounts(session, console),
        "admins": await seed_admins(session, console),
        "memberships": await assign_memberships(session, console),
    }


async def seed(database_url: str, console: Console | None = None) -> dict[str, list[SeedOutcome]]:
    engine = create_async_engine(_async_url(database_url), poolclass=NullPool)
    try:
        async with async_sessionmaker(engine, expire_on_commit=False)() as session:
            return await run_seeders(session, console)
    finally:
        await engine.dispose()


def summarize(outcomes: dict[str, list[SeedOutcome]]) -> dict[str, dict[str, int]]:
    summary: dict[str, dict[str, int]] = {}
    for group, items in outcomes.items():
        counts: dict[str, int] = {}
        for o in items:
            counts[o.status] = counts.get(o.status, 0) + 1
        summary[group] = counts
    return summary


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed admin panel users, roles and accounts.")
    parser.add_argument("--database-url", default=SETTINGS.database_url)
    parser.add_argument("--log-level", default=SETTINGS.log_level)
    parser.add_argument("--verbose", action="store_true", help="Print every outcome as JSON.")
    args = parser.parse_args()

    configure_logging(args.log_level, service="ewallet_seed")
    outcomes = asyncio.run(seed(args.database_url))
    if args.verbose:
        print(json.dumps({k: [asdict(o) for o in v] for k, v in outcomes.items()}, indent=2))
    print(json.dumps(summarize(outcomes), indent=2))


if __name__ == "__main__":
    main()
