from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from services.ewallet.testing import ConnCase, Sandbox, checkout


@pytest_asyncio.fixture()
async def sandbox(migrated_dbs: tuple[str, str]) -> AsyncIterator[Sandbox]:
    core_url, ledger_url = migrated_dbs
    async with checkout(core_url, ledger_url) as sb:
        yield sb


@pytest.fixture()
def ewallet_app(sandbox: Sandbox):
    from services.ewallet.app.db import get_session
    from services.ewallet.app.main import app
    from services.ledger.app.db import get_ledger_session

    # Route every request through this test's sandbox transactions.
    async def _session():
        yield sandbox.session

    async def _ledger_session():
        yield sandbox.ledger_session

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_ledger_session] = _ledger_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def conn_case(sandbox: Sandbox, ewallet_app) -> AsyncIterator[ConnCase]:
    transport = httpx.ASGITransport(app=ewallet_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        case = ConnCase(client, sandbox.session, sandbox.ledger_session)
        await case.setup()
        yield case
