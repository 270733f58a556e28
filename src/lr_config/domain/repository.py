"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_config.domain.models import GameConfig


class ConfigRepositoryProtocol(Protocol):
    async def get_config(
        self, db: AsyncSession, for_update: bool = False
    ) -> GameConfig | None: ...

    async def insert_config(self, db: AsyncSession, config: GameConfig) -> None: ...

    async def save_config(self, db: AsyncSession, config: GameConfig) -> None: ...
