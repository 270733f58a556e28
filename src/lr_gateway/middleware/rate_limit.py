"""Fixed-window rate limiting backed by Redis INCR + EXPIRE.

Rules (per client IP, 60 second window):
  - POST .../bets        RATE_LIMIT_BETS_PER_MINUTE
  - POST /api/v1/auth/*  RATE_LIMIT_AUTH_PER_MINUTE
Everything else passes through untouched.

Key pattern: "ratelimit:{client_ip}:{group}:{window_start}". The client IP is
taken from the first X-Forwarded-For hop when behind a reverse proxy.
"""

import logging
import time

from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from config.settings import settings
from src.lr_common.errors import RateLimitError
from src.lr_common.redis_client import incr_window
from src.lr_common.response import error_response

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _limit_group(request: Request) -> tuple[str, int] | None:
    if request.method != "POST":
        return None
    path = request.url.path
    if path.endswith("/bets"):
        return "bets", settings.RATE_LIMIT_BETS_PER_MINUTE
    if "/auth/" in path:
        return "auth", settings.RATE_LIMIT_AUTH_PER_MINUTE
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        group = _limit_group(request) if settings.RATE_LIMIT_ENABLED else None
        if group is None:
            return await call_next(request)

        name, limit = group
        ip = _client_ip(request)
        window = int(time.time()) // WINDOW_SECONDS
        count = await incr_window(f"ratelimit:{ip}:{name}:{window}", WINDOW_SECONDS)
        if count > limit:
            logger.warning("rate limit hit: ip=%s group=%s count=%d", ip, name, count)
            err = RateLimitError()
            return JSONResponse(
                status_code=err.http_status,
                content=error_response(err.code, err.message, request).model_dump(),
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )
        return await call_next(request)
