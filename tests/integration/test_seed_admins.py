from __future__ import annotations

import io

import sqlalchemy as sa
import pytest


@pytest.mark.asyncio
async def test_seeding_twice_inserts_once_then_warns(sandbox) -> None:
    from db.cli import Console
    from db.seed import ADMIN_EMAILS, run_seeders

    out = io.StringIO()
    first = await run_seeders(sandbox.session, Console(out))
    second = await run_seeders(sandbox.session, Console(out))

    assert [o.status for o in first["roles"]] == ["inserted", "inserted"]
    assert [o.status for o in first["accounts"]] == ["inserted"] * 3
    assert [o.status for o in first["admins"]] == ["inserted"] * len(ADMIN_EMAILS)
    assert [o.status for o in first["memberships"]] == ["assigned"] * 5

    assert [o.status for o in second["roles"]] == ["exists", "exists"]
    assert [o.status for o in second["accounts"]] == ["exists"] * 3
    assert [o.status for o in second["admins"]] == ["exists"] * len(ADMIN_EMAILS)
    # Role assignment is attempted on every run.
    assert [o.status for o in second["memberships"]] == ["assigned"] * 5

    text = out.getvalue()
    assert text.count("Seeding admin panel users:") == 2
    assert "Role  : admin at brand1" in text


@pytest.mark.asyncio
async def test_admin_brand1_has_a_single_membership(sandbox) -> None:
    from db.cli import Console
    from db.seed import run_seeders
    from services.ewallet.app import accounts, memberships, roles, users
    from services.ewallet.app.tables import users as users_table

    await run_seeders(sandbox.session, Console(io.StringIO()))
    await run_seeders(sandbox.session, Console(io.StringIO()))

    user = await users.get_by_email(sandbox.session, "admin_brand1@example.com")
    brand1 = await accounts.get_by_name(sandbox.session, "brand1")
    admin = await roles.get_by_name(sandbox.session, "admin")

    n_users = (
        await sandbox.session.execute(
            sa.select(sa.func.count()).select_from(users_table).where(users_table.c.email == "admin_brand1@example.com")
        )
    ).scalar_one()
    assert n_users == 1

    rows = await memberships.list_for_user(sandbox.session, user)
    assert len(rows) == 1
    assert rows[0].account_id == brand1.id
    assert rows[0].role_id == admin.id


@pytest.mark.asyncio
async def test_seeded_accounts_form_a_tree(sandbox) -> None:
    from db.cli import Console
    from db.seed import run_seeders
    from services.ewallet.app import accounts

    await run_seeders(sandbox.session, Console(io.StringIO()))

    master = await accounts.get_by_name(sandbox.session, "master_account")
    brand1 = await accounts.get_by_name(sandbox.session, "brand1")
    branch1 = await accounts.get_by_name(sandbox.session, "branch1")

    assert master.parent_id is None
    assert brand1.parent_id == master.id
    assert branch1.parent_id == brand1.id
    assert (await accounts.get_master_account(sandbox.session)).id == master.id


@pytest.mark.asyncio
async def test_seeded_passwords_are_hashed(sandbox) -> None:
    from db.cli import Console
    from db.seed import seed_admins
    from services.ewallet.app import users
    from services.ewallet.app.crypto import verify_secret

    seeds = [{"email": "viewer_master@example.com", "password": "initial-password", "metadata": {}}]
    await seed_admins(sandbox.session, Console(io.StringIO()), seeds)

    user = await users.get_by_email(sandbox.session, "viewer_master@example.com")
    assert user.password_hash != "initial-password"
    assert verify_secret("initial-password", user.password_hash)


@pytest.mark.asyncio
async def test_membership_for_missing_account_reports_error(sandbox) -> None:
    from db.cli import Console
    from db.seed import assign_memberships, seed_admins, seed_roles

    console = Console(io.StringIO())
    await seed_roles(sandbox.session, console)
    await seed_admins(sandbox.session, console)

    out = io.StringIO()
    outcomes = await assign_memberships(
        sandbox.session,
        Console(out),
        [{"email": "admin_brand1@example.com", "role_name": "admin", "account_name": "does_not_exist"}],
    )

    assert [o.status for o in outcomes] == ["error"]
    assert "Unable to parse the provided error." in out.getvalue()


@pytest.mark.asyncio
async def test_duplicate_email_reports_field_error(sandbox) -> None:
    from db.cli import Console
    from services.ewallet.app import users
    from services.ewallet.app.errors import ChangesetError
    from services.ewallet.testing.factory import admin_params

    await users.insert(sandbox.session, admin_params(email="dup@example.com"))
    with pytest.raises(ChangesetError) as exc:
        await users.insert(sandbox.session, admin_params(email="dup@example.com"))
    assert exc.value.errors == {"email": ["has already been taken"]}

    out = io.StringIO()
    Console(out).print_errors(exc.value.errors)
    assert out.getvalue().startswith("  email has already been taken")
