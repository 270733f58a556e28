"""AccountApplicationService — balance, deposit, withdraw, ledger history."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    MovementResponse,
    cursor_decode,
    cursor_encode,
)
from src.lr_account.domain.repository import AccountRepositoryProtocol
from src.lr_account.infrastructure.persistence import AccountRepository
from src.lr_common.errors import AccountNotFoundError


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        account = await self._repo.get_account(db, user_id)
        if account is None:
            raise AccountNotFoundError(user_id)
        return BalanceResponse.from_lamports(user_id, account.available_balance)

    async def deposit(self, db: AsyncSession, user_id: str, amount: int) -> MovementResponse:
        try:
            account, entry = await self._repo.deposit(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MovementResponse.from_result(account.available_balance, amount, entry.id)

    async def withdraw(self, db: AsyncSession, user_id: str, amount: int) -> MovementResponse:
        try:
            account, entry = await self._repo.withdraw(db, user_id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return MovementResponse.from_result(account.available_balance, amount, entry.id)

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        entry_type: str | None,
    ) -> LedgerResponse:
        # limit+1 detects has_more without a COUNT(*)
        entries = await self._repo.list_ledger_entries(
            db, user_id, cursor_decode(cursor), limit + 1, entry_type
        )
        has_more = len(entries) > limit
        page = entries[:limit]
        return LedgerResponse(
            items=[LedgerEntryItem.from_domain(e) for e in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )
