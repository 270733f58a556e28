"""ConfigApplicationService — initialize, read and update the game config.

Mutations commit on success and roll back on any exception.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.errors import ConfigAlreadyInitializedError, ConfigNotInitializedError
from src.lr_common.event_log import write_event
from src.lr_config.application.schemas import (
    ConfigResponse,
    InitializeConfigRequest,
    UpdateConfigRequest,
)
from src.lr_config.domain.models import GameConfig
from src.lr_config.domain.repository import ConfigRepositoryProtocol
from src.lr_config.domain.service import initialize_config, update_config
from src.lr_config.infrastructure.persistence import ConfigRepository


class ConfigApplicationService:
    def __init__(self, repo: ConfigRepositoryProtocol | None = None) -> None:
        self._repo: ConfigRepositoryProtocol = repo or ConfigRepository()

    async def load(self, db: AsyncSession, for_update: bool = False) -> GameConfig:
        config = await self._repo.get_config(db, for_update=for_update)
        if config is None:
            raise ConfigNotInitializedError()
        return config

    async def get_config(self, db: AsyncSession) -> ConfigResponse:
        return ConfigResponse.from_domain(await self.load(db))

    async def initialize(
        self, db: AsyncSession, caller: str, body: InitializeConfigRequest
    ) -> ConfigResponse:
        try:
            if await self._repo.get_config(db, for_update=True) is not None:
                raise ConfigAlreadyInitializedError()
            config, event = initialize_config(
                admin=caller,
                treasury=body.treasury,
                fee_bps=body.fee_bps,
                referrer_fee_bps=body.referrer_fee_bps,
                min_bet=body.min_bet,
                max_bet=body.max_bet,
            )
            await self._repo.insert_config(db, config)
            await write_event(event, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ConfigResponse.from_domain(config)

    async def update(
        self, db: AsyncSession, caller: str, body: UpdateConfigRequest
    ) -> ConfigResponse:
        try:
            config = await self.load(db, for_update=True)
            event = update_config(
                config,
                caller,
                fee_bps=body.fee_bps,
                referrer_fee_bps=body.referrer_fee_bps,
                min_bet=body.min_bet,
                max_bet=body.max_bet,
                treasury=body.treasury,
            )
            await self._repo.save_config(db, config)
            await write_event(event, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ConfigResponse.from_domain(config)
