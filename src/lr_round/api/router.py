"""Round REST endpoints.

POST /rounds                     — admin: open a round
GET  /rounds                     — history, newest first
GET  /rounds/current             — latest OPEN round (data=null if none)
GET  /rounds/{round_id}          — one round
GET  /rounds/{round_id}/quote    — estimated payout for a hypothetical bet
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.amounts import U64_MAX
from src.lr_common.database import get_db_session
from src.lr_common.enums import RoundStatus
from src.lr_common.response import ApiResponse, success_response
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel
from src.lr_round.application.schemas import StartRoundRequest
from src.lr_round.application.service import RoundApplicationService

router = APIRouter(prefix="/rounds", tags=["rounds"])

_service = RoundApplicationService()

RoundId = Annotated[int, Path(ge=0, description="Round id")]


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_round(
    body: StartRoundRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.start(db, current_user.identity, body)
    return success_response(result.model_dump(), request)


@router.get("")
async def list_rounds(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    round_status: RoundStatus | None = Query(None, alias="status"),
) -> ApiResponse:
    result = await _service.list_rounds(db, cursor, limit, round_status)
    return success_response(result.model_dump(), request)


@router.get("/current")
async def current_round(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_current(db)
    return success_response(result.model_dump() if result else None, request)


@router.get("/{round_id}")
async def get_round(
    round_id: RoundId,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_round(db, round_id)
    return success_response(result.model_dump(), request)


@router.get("/{round_id}/quote")
async def quote(
    round_id: RoundId,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    side: int = Query(..., description="0 = LEFT, 1 = RIGHT"),
    amount: int = Query(..., gt=0, le=U64_MAX, description="Gross lamports"),
    with_referrer: bool = Query(False),
) -> ApiResponse:
    result = await _service.quote(db, round_id, side, amount, with_referrer)
    return success_response(result.model_dump(), request)
