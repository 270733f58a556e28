"""Account REST endpoints; all require a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.application.schemas import AmountRequest
from src.lr_account.application.service import AccountApplicationService
from src.lr_common.database import get_db_session
from src.lr_common.enums import LedgerEntryType
from src.lr_common.response import ApiResponse, success_response
from src.lr_gateway.auth.dependencies import get_current_user
from src.lr_gateway.user.db_models import UserModel

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/balance")
async def get_balance(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_balance(db, current_user.identity)
    return success_response(data.model_dump(), request)


@router.post("/deposit")
async def deposit(
    body: AmountRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.deposit(db, current_user.identity, body.amount)
    return success_response(data.model_dump(), request)


@router.post("/withdraw")
async def withdraw(
    body: AmountRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.withdraw(db, current_user.identity, body.amount)
    return success_response(data.model_dump(), request)


@router.get("/ledger")
async def list_ledger(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None, description="Opaque pagination cursor"),
    limit: int = Query(20, ge=1, le=100),
    entry_type: LedgerEntryType | None = Query(None),
) -> ApiResponse:
    data = await _service.list_ledger(
        db,
        current_user.identity,
        cursor,
        limit,
        entry_type.value if entry_type else None,
    )
    return success_response(data.model_dump(), request)
