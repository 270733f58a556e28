"""Repository Protocol for rounds."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.enums import RoundStatus
from src.lr_round.domain.models import Round


class RoundRepositoryProtocol(Protocol):
    async def get_round(
        self, db: AsyncSession, round_id: int, for_update: bool = False
    ) -> Round | None: ...

    async def insert_round(self, db: AsyncSession, round_: Round) -> None: ...

    async def save_round(self, db: AsyncSession, round_: Round) -> None: ...

    async def list_rounds(
        self,
        db: AsyncSession,
        cursor_id: int | None,
        limit: int,
        status: RoundStatus | None,
    ) -> list[Round]: ...

    async def get_current_round(self, db: AsyncSession) -> Round | None: ...

    async def list_all_rounds(self, db: AsyncSession) -> list[Round]: ...
