"""Helpers shared by integration tests."""

import uuid

from httpx import AsyncClient


async def register_and_login(client: AsyncClient, prefix: str = "lr") -> tuple[str, str]:
    """Register a fresh user; return (user_id, access_token)."""
    uid = uuid.uuid4().hex[:8]
    user = {
        "username": f"{prefix}_{uid}",
        "email": f"{prefix}_{uid}@example.com",
        "password": "TestPass1",
    }
    await client.post("/api/v1/auth/register", json=user)
    resp = await client.post(
        "/api/v1/auth/login",
        json={"username": user["username"], "password": user["password"]},
    )
    token = str(resp.json()["data"]["access_token"])
    balance = await client.get(
        "/api/v1/account/balance", headers={"Authorization": f"Bearer {token}"}
    )
    return str(balance.json()["data"]["user_id"]), token


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
