"""Unit tests for the Redis-backed rate limit middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

from httpx import AsyncClient

from config.settings import settings
from src.lr_gateway.middleware.rate_limit import _client_ip, _limit_group


def _request(method: str, path: str, headers: dict[str, str] | None = None) -> MagicMock:
    request = MagicMock()
    request.method = method
    request.url.path = path
    request.headers = headers or {}
    request.client.host = "10.0.0.9"
    return request


class TestLimitGroup:
    def test_bet_placement_limited(self) -> None:
        assert _limit_group(_request("POST", "/api/v1/rounds/4/bets")) == (
            "bets", settings.RATE_LIMIT_BETS_PER_MINUTE,
        )

    def test_auth_limited(self) -> None:
        assert _limit_group(_request("POST", "/api/v1/auth/login"))[0] == "auth"

    def test_reads_not_limited(self) -> None:
        assert _limit_group(_request("GET", "/api/v1/rounds/4/bets")) is None

    def test_settle_not_limited(self) -> None:
        assert _limit_group(_request("POST", "/api/v1/rounds/4/settle")) is None


class TestClientIp:
    def test_first_forwarded_hop(self) -> None:
        req = _request("POST", "/", {"x-forwarded-for": "1.2.3.4, 10.0.0.1"})
        assert _client_ip(req) == "1.2.3.4"

    def test_socket_peer(self) -> None:
        assert _client_ip(_request("POST", "/")) == "10.0.0.9"


async def test_over_limit_returns_429(client: AsyncClient) -> None:
    with (
        patch.object(settings, "RATE_LIMIT_ENABLED", True),
        patch(
            "src.lr_gateway.middleware.rate_limit.incr_window",
            AsyncMock(return_value=settings.RATE_LIMIT_AUTH_PER_MINUTE + 1),
        ),
    ):
        resp = await client.post(
            "/api/v1/auth/login", json={"username": "u", "password": "p"}
        )

    assert resp.status_code == 429
    assert resp.json()["code"] == 9001
    assert resp.headers["Retry-After"] == "60"


async def test_disabled_limiter_never_counts(client: AsyncClient) -> None:
    counter = AsyncMock()
    with (
        patch.object(settings, "RATE_LIMIT_ENABLED", False),
        patch("src.lr_gateway.middleware.rate_limit.incr_window", counter),
    ):
        await client.get("/health")
    counter.assert_not_awaited()
