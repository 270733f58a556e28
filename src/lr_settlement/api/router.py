"""Settlement REST endpoints.

POST /rounds/{round_id}/settle                     — admin: record end price
POST /rounds/{round_id}/bets/{bet_index}/payout    — anyone: pay one bet to its owner
POST /rounds/{round_id}/payouts                    — admin: drive all pending payouts
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.database import get_db_session
from src.lr_common.response import ApiResponse, success_response
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel
from src.lr_settlement.application.schemas import PayoutRunRequest, SettleRoundRequest
from src.lr_settlement.application.service import SettlementApplicationService

router = APIRouter(prefix="/rounds", tags=["settlement"])

_service = SettlementApplicationService()


@router.post("/{round_id}/settle")
async def settle_round(
    body: SettleRoundRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
) -> ApiResponse:
    result = await _service.settle(db, current_user.identity, round_id, body.end_price)
    return success_response(result.model_dump(), request)


@router.post("/{round_id}/bets/{bet_index}/payout")
async def process_payout(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
    bet_index: int = Path(..., ge=0),
) -> ApiResponse:
    result = await _service.process_payout(db, round_id, bet_index)
    return success_response(result.model_dump(), request)


@router.post("/{round_id}/payouts")
async def process_all_payouts(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
    body: PayoutRunRequest = Body(default_factory=PayoutRunRequest),
) -> ApiResponse:
    result = await _service.process_all_payouts(
        db, current_user.identity, round_id, body.max_bets
    )
    return success_response(result.model_dump(), request)
