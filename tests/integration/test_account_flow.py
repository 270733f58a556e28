"""Integration tests for the custody account endpoints (requires PG + Redis)."""

import pytest
from httpx import AsyncClient

from tests.integration.helpers import bearer, register_and_login

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


class TestAccount:
    async def test_unauthenticated_returns_401(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/account/balance")
        assert resp.status_code == 401

    async def test_new_user_has_zero_balance(self, client: AsyncClient) -> None:
        _, token = await register_and_login(client)
        resp = await client.get("/api/v1/account/balance", headers=bearer(token))
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["available_balance"] == 0
        assert data["available_balance_display"] == "0 SOL"

    async def test_deposit_withdraw_and_ledger(self, client: AsyncClient) -> None:
        _, token = await register_and_login(client)
        await client.post("/api/v1/account/deposit", json={"amount": 500}, headers=bearer(token))
        resp = await client.post(
            "/api/v1/account/withdraw", json={"amount": 200}, headers=bearer(token)
        )
        assert resp.json()["data"]["available_balance"] == 300

        resp = await client.get("/api/v1/account/ledger", headers=bearer(token))
        items = resp.json()["data"]["items"]
        assert [(i["entry_type"], i["amount"]) for i in items] == [
            ("WITHDRAW", -200), ("DEPOSIT", 500),
        ]

    async def test_overdraw_rejected(self, client: AsyncClient) -> None:
        _, token = await register_and_login(client)
        resp = await client.post(
            "/api/v1/account/withdraw", json={"amount": 1}, headers=bearer(token)
        )
        assert resp.status_code == 422
        assert resp.json()["code"] == 2001
