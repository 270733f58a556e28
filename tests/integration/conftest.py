"""Integration-test fixtures.

Requires running PostgreSQL and Redis with migrations applied
(``alembic upgrade head``). Run with ``pytest -m integration``.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.lr_common.database import engine
from src.main import app
from tests.integration.helpers import bearer, register_and_login

_TABLES = "wal_events, bets, rounds, game_config, ledger_entries, accounts, users"


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client over a freshly truncated schema."""
    async with engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {_TABLES} RESTART IDENTITY CASCADE"))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin(client: AsyncClient) -> tuple[str, str]:
    """The first user to initialize the config becomes its admin."""
    admin_id, token = await register_and_login(client, "admin")
    treasury_id, _ = await register_and_login(client, "treasury")
    resp = await client.post(
        "/api/v1/config",
        json={
            "fee_bps": 250,
            "referrer_fee_bps": 50,
            "min_bet": 1,
            "max_bet": 10**15,
            "treasury": treasury_id,
        },
        headers=bearer(token),
    )
    assert resp.status_code == 201, resp.text
    return admin_id, token
