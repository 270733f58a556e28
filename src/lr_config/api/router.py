"""Game config REST endpoints.

POST  /config   — initialize (caller becomes admin)
GET   /config   — current config
PATCH /config   — admin-only partial update
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.database import get_db_session
from src.lr_common.response import ApiResponse, success_response
from src.lr_config.application.schemas import InitializeConfigRequest, UpdateConfigRequest
from src.lr_config.application.service import ConfigApplicationService
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel

router = APIRouter(prefix="/config", tags=["config"])

_service = ConfigApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def initialize(
    body: InitializeConfigRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.initialize(db, current_user.identity, body)
    return success_response(result.model_dump(), request)


@router.get("")
async def get_config(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_config(db)
    return success_response(result.model_dump(), request)


@router.patch("")
async def update_config(
    body: UpdateConfigRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.update(db, current_user.identity, body)
    return success_response(result.model_dump(), request)
