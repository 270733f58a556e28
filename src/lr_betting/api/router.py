"""Bet and leaderboard REST endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_betting.application.schemas import PlaceBetRequest
from src.lr_betting.application.service import BettingApplicationService
from src.lr_common.database import get_db_session
from src.lr_common.response import ApiResponse, success_response
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel

router = APIRouter(tags=["bets"])
leaderboard_router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

_service = BettingApplicationService()


@router.post("/rounds/{round_id}/bets", status_code=status.HTTP_201_CREATED)
async def place_bet(
    body: PlaceBetRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
) -> ApiResponse:
    result = await _service.place(db, current_user.identity, round_id, body)
    return success_response(result.model_dump(), request)


@router.get("/rounds/{round_id}/bets")
async def list_round_bets(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
    cursor: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_round_bets(db, round_id, cursor, limit)
    return success_response(result.model_dump(), request)


@router.get("/bets/me")
async def list_my_bets(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    result = await _service.list_user_bets(db, current_user.identity, cursor, limit)
    return success_response(result.model_dump(), request)


@leaderboard_router.get("")
async def leaderboard(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(20, ge=1, le=100),
) -> ApiResponse:
    entries = await _service.leaderboard(db, limit)
    return success_response([e.model_dump() for e in entries], request)
