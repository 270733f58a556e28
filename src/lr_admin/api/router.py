"""Admin REST API. Admin identity is checked against config.admin."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_admin.application.service import AdminService
from src.lr_common.database import get_db_session
from src.lr_common.response import ApiResponse, success_response
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel

router = APIRouter(prefix="/admin", tags=["admin"])
_service = AdminService()


@router.get("/invariants")
async def verify_invariants(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_all_invariants(db, current_user.identity)
    return success_response(result, request)


@router.get("/rounds/{round_id}/stats")
async def round_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    round_id: int = Path(..., ge=0),
) -> ApiResponse:
    result = await _service.get_round_stats(db, current_user.identity, round_id)
    return success_response(result, request)
