"""ConfigRepository — concrete implementation of ConfigRepositoryProtocol.

game_config is a singleton row (id = 1). Raw text() SQL, no ORM.
save_config is guarded by the version the caller read, so a concurrent
update that slipped in between read and write is rejected.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.errors import InternalError
from src.lr_config.domain.models import GameConfig

_COLUMNS = """
    admin, fee_bps, referrer_fee_bps, min_bet, max_bet, treasury,
    round_counter, version, created_at, updated_at
"""

_GET_CONFIG_SQL = text(f"SELECT {_COLUMNS} FROM game_config WHERE id = 1")
_GET_CONFIG_FOR_UPDATE_SQL = text(f"SELECT {_COLUMNS} FROM game_config WHERE id = 1 FOR UPDATE")

_INSERT_CONFIG_SQL = text("""
    INSERT INTO game_config
        (id, admin, fee_bps, referrer_fee_bps, min_bet, max_bet, treasury,
         round_counter, version)
    VALUES
        (1, :admin, :fee_bps, :referrer_fee_bps, :min_bet, :max_bet, :treasury,
         :round_counter, :version)
""")

_SAVE_CONFIG_SQL = text("""
    UPDATE game_config
    SET fee_bps = :fee_bps,
        referrer_fee_bps = :referrer_fee_bps,
        min_bet = :min_bet,
        max_bet = :max_bet,
        treasury = :treasury,
        round_counter = :round_counter,
        version = :version,
        updated_at = NOW()
    WHERE id = 1 AND version <= :version
""")


def _row_to_config(row: object) -> GameConfig:
    return GameConfig(
        admin=row.admin,  # type: ignore[attr-defined]
        fee_bps=row.fee_bps,  # type: ignore[attr-defined]
        referrer_fee_bps=row.referrer_fee_bps,  # type: ignore[attr-defined]
        min_bet=int(row.min_bet),  # type: ignore[attr-defined]
        max_bet=int(row.max_bet),  # type: ignore[attr-defined]
        treasury=row.treasury,  # type: ignore[attr-defined]
        round_counter=int(row.round_counter),  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class ConfigRepository:
    async def get_config(
        self, db: AsyncSession, for_update: bool = False
    ) -> GameConfig | None:
        sql = _GET_CONFIG_FOR_UPDATE_SQL if for_update else _GET_CONFIG_SQL
        row = (await db.execute(sql)).fetchone()
        return _row_to_config(row) if row else None

    async def insert_config(self, db: AsyncSession, config: GameConfig) -> None:
        await db.execute(
            _INSERT_CONFIG_SQL,
            {
                "admin": config.admin,
                "fee_bps": config.fee_bps,
                "referrer_fee_bps": config.referrer_fee_bps,
                "min_bet": config.min_bet,
                "max_bet": config.max_bet,
                "treasury": config.treasury,
                "round_counter": config.round_counter,
                "version": config.version,
            },
        )

    async def save_config(self, db: AsyncSession, config: GameConfig) -> None:
        result = await db.execute(
            _SAVE_CONFIG_SQL,
            {
                "fee_bps": config.fee_bps,
                "referrer_fee_bps": config.referrer_fee_bps,
                "min_bet": config.min_bet,
                "max_bet": config.max_bet,
                "treasury": config.treasury,
                "round_counter": config.round_counter,
                "version": config.version,
            },
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise InternalError("game_config was modified concurrently")
