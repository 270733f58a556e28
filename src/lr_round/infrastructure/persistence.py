"""RoundRepository — raw SQL over the rounds table.

Pools are NUMERIC(20,0) (u64); asyncpg hands them back as Decimal, so the
row mapper converts to int.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.enums import RoundStatus, Side
from src.lr_common.errors import InternalError
from src.lr_round.domain.models import Round

_COLUMNS = """
    round_id, asset_symbol, start_price, end_price, start_time,
    betting_end_time, end_time, status, left_pool, right_pool,
    left_weighted_pool, right_weighted_pool, bet_count, payouts_processed,
    winning_side, created_at, updated_at
"""

_GET_ROUND_SQL = text(f"SELECT {_COLUMNS} FROM rounds WHERE round_id = :round_id")
_GET_ROUND_FOR_UPDATE_SQL = text(
    f"SELECT {_COLUMNS} FROM rounds WHERE round_id = :round_id FOR UPDATE"
)

_INSERT_ROUND_SQL = text("""
    INSERT INTO rounds
        (round_id, asset_symbol, start_price, end_price, start_time,
         betting_end_time, end_time, status, left_pool, right_pool,
         left_weighted_pool, right_weighted_pool, bet_count, payouts_processed,
         winning_side)
    VALUES
        (:round_id, :asset_symbol, :start_price, :end_price, :start_time,
         :betting_end_time, :end_time, :status, :left_pool, :right_pool,
         :left_weighted_pool, :right_weighted_pool, :bet_count, :payouts_processed,
         :winning_side)
""")

# SETTLED is terminal: the guard makes a write to a settled round a no-op.
_SAVE_ROUND_SQL = text("""
    UPDATE rounds
    SET status = :status,
        end_price = :end_price,
        left_pool = :left_pool,
        right_pool = :right_pool,
        left_weighted_pool = :left_weighted_pool,
        right_weighted_pool = :right_weighted_pool,
        bet_count = :bet_count,
        payouts_processed = :payouts_processed,
        winning_side = :winning_side,
        updated_at = NOW()
    WHERE round_id = :round_id AND status <> 'SETTLED'
""")

_LIST_ROUNDS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM rounds
    WHERE (CAST(:cursor_id AS BIGINT) IS NULL OR round_id < :cursor_id)
      AND (CAST(:status AS VARCHAR) IS NULL OR status = :status)
    ORDER BY round_id DESC
    LIMIT :limit
""")

_LIST_ALL_ROUNDS_SQL = text(f"SELECT {_COLUMNS} FROM rounds ORDER BY round_id")

_CURRENT_ROUND_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM rounds
    WHERE status = 'OPEN'
    ORDER BY round_id DESC
    LIMIT 1
""")


def _row_to_round(row: object) -> Round:
    winning = row.winning_side  # type: ignore[attr-defined]
    return Round(
        round_id=int(row.round_id),  # type: ignore[attr-defined]
        asset_symbol=row.asset_symbol,  # type: ignore[attr-defined]
        start_price=int(row.start_price),  # type: ignore[attr-defined]
        end_price=int(row.end_price),  # type: ignore[attr-defined]
        start_time=int(row.start_time),  # type: ignore[attr-defined]
        betting_end_time=int(row.betting_end_time),  # type: ignore[attr-defined]
        end_time=int(row.end_time),  # type: ignore[attr-defined]
        status=RoundStatus(row.status),  # type: ignore[attr-defined]
        left_pool=int(row.left_pool),  # type: ignore[attr-defined]
        right_pool=int(row.right_pool),  # type: ignore[attr-defined]
        left_weighted_pool=int(row.left_weighted_pool),  # type: ignore[attr-defined]
        right_weighted_pool=int(row.right_weighted_pool),  # type: ignore[attr-defined]
        bet_count=int(row.bet_count),  # type: ignore[attr-defined]
        payouts_processed=int(row.payouts_processed),  # type: ignore[attr-defined]
        winning_side=Side(winning) if winning is not None else None,
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _round_params(r: Round) -> dict[str, object]:
    return {
        "round_id": r.round_id,
        "asset_symbol": r.asset_symbol,
        "start_price": r.start_price,
        "end_price": r.end_price,
        "start_time": r.start_time,
        "betting_end_time": r.betting_end_time,
        "end_time": r.end_time,
        "status": r.status.value,
        "left_pool": r.left_pool,
        "right_pool": r.right_pool,
        "left_weighted_pool": r.left_weighted_pool,
        "right_weighted_pool": r.right_weighted_pool,
        "bet_count": r.bet_count,
        "payouts_processed": r.payouts_processed,
        "winning_side": int(r.winning_side) if r.winning_side is not None else None,
    }


class RoundRepository:
    async def get_round(
        self, db: AsyncSession, round_id: int, for_update: bool = False
    ) -> Round | None:
        sql = _GET_ROUND_FOR_UPDATE_SQL if for_update else _GET_ROUND_SQL
        row = (await db.execute(sql, {"round_id": round_id})).fetchone()
        return _row_to_round(row) if row else None

    async def insert_round(self, db: AsyncSession, round_: Round) -> None:
        await db.execute(_INSERT_ROUND_SQL, _round_params(round_))

    async def save_round(self, db: AsyncSession, round_: Round) -> None:
        result = await db.execute(_SAVE_ROUND_SQL, _round_params(round_))
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise InternalError(f"Round {round_.round_id} not updated")

    async def list_rounds(
        self,
        db: AsyncSession,
        cursor_id: int | None,
        limit: int,
        status: RoundStatus | None,
    ) -> list[Round]:
        rows = (
            await db.execute(
                _LIST_ROUNDS_SQL,
                {
                    "cursor_id": cursor_id,
                    "status": status.value if status else None,
                    "limit": limit,
                },
            )
        ).fetchall()
        return [_row_to_round(r) for r in rows]

    async def get_current_round(self, db: AsyncSession) -> Round | None:
        row = (await db.execute(_CURRENT_ROUND_SQL)).fetchone()
        return _row_to_round(row) if row else None

    async def list_all_rounds(self, db: AsyncSession) -> list[Round]:
        rows = (await db.execute(_LIST_ALL_ROUNDS_SQL)).fetchall()
        return [_row_to_round(r) for r in rows]
