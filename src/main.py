"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.lr_account.api.router import router as account_router
from src.lr_admin.api.router import router as admin_router
from src.lr_betting.api.router import leaderboard_router
from src.lr_betting.api.router import router as bets_router
from src.lr_common.database import engine
from src.lr_common.errors import AppError
from src.lr_common.redis_client import close_redis, get_redis
from src.lr_common.response import error_response
from src.lr_config.api.router import router as config_router
from src.lr_gateway.api.router import router as auth_router
from src.lr_gateway.middleware.rate_limit import RateLimitMiddleware
from src.lr_gateway.middleware.request_log import RequestLogMiddleware
from src.lr_round.api.router import router as rounds_router
from src.lr_settlement.api.router import router as settlement_router

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis connections. Shutdown: dispose."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

# Last added runs first: request ids exist before rate limiting answers.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(config_router, prefix="/api/v1")
app.include_router(rounds_router, prefix="/api/v1")
app.include_router(bets_router, prefix="/api/v1")
app.include_router(settlement_router, prefix="/api/v1")
app.include_router(leaderboard_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
