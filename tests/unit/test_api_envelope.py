"""API-level tests: error envelope, auth guard, request validation."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from src.lr_common.database import get_db_session
from src.lr_common.errors import InsufficientBalanceError, RoundNotOpenError
from src.lr_gateway.auth.dependencies import get_current_user


@pytest.fixture
def signed_in():
    from src.main import app

    async def _db():
        yield AsyncMock()

    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(identity="alice")
    app.dependency_overrides[get_db_session] = _db
    yield app
    app.dependency_overrides.clear()


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_place_bet_requires_token(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/rounds/0/bets", json={"side": 0, "amount": 1000})
    assert resp.status_code == 401


async def test_app_error_uses_envelope(client: AsyncClient, signed_in) -> None:
    service = AsyncMock()
    service.place.side_effect = RoundNotOpenError(3)
    with patch("src.lr_betting.api.router._service", service):
        resp = await client.post(
            "/api/v1/rounds/3/bets",
            json={"side": 0, "amount": 1000},
        )

    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == 4003
    assert body["data"] is None
    assert "3" in body["message"]
    assert body["request_id"].startswith("req_")


async def test_withdraw_uses_signer_identity(client: AsyncClient, signed_in) -> None:
    service = AsyncMock()
    service.withdraw.side_effect = InsufficientBalanceError(5, 0)
    with patch("src.lr_account.api.router._service", service):
        resp = await client.post("/api/v1/account/withdraw", json={"amount": 5})

    assert resp.status_code == 422
    assert resp.json()["code"] == 2001
    assert service.withdraw.await_args.args[1] == "alice"


async def test_amount_above_u64_rejected_before_service(client: AsyncClient, signed_in) -> None:
    service = AsyncMock()
    with patch("src.lr_betting.api.router._service", service):
        resp = await client.post(
            "/api/v1/rounds/0/bets", json={"side": 0, "amount": 2**64}
        )
    assert resp.status_code == 422
    service.place.assert_not_awaited()


async def test_negative_round_id_rejected(client: AsyncClient, signed_in) -> None:
    resp = await client.post("/api/v1/rounds/-1/settle", json={"end_price": 1})
    assert resp.status_code == 422
