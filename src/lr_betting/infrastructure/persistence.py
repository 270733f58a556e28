"""BetRepository — raw SQL over the bets table.

Bets are addressed by (round_id, bet_index); the surrogate BIGSERIAL id only
orders a user's history for cursor pagination.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_betting.domain.models import Bet
from src.lr_betting.domain.repository import LeaderboardRow
from src.lr_common.enums import Side
from src.lr_common.errors import InternalError

_COLUMNS = """
    id, round_id, bet_index, bettor, side, amount, original_amount,
    bet_time, weight, paid_out, referrer, payout, created_at
"""

_INSERT_BET_SQL = text("""
    INSERT INTO bets
        (round_id, bet_index, bettor, side, amount, original_amount,
         bet_time, weight, paid_out, referrer, payout)
    VALUES
        (:round_id, :bet_index, :bettor, :side, :amount, :original_amount,
         :bet_time, :weight, :paid_out, :referrer, :payout)
""")

_GET_BET_SQL = text(
    f"SELECT {_COLUMNS} FROM bets WHERE round_id = :round_id AND bet_index = :bet_index"
)
_GET_BET_FOR_UPDATE_SQL = text(
    f"SELECT {_COLUMNS} FROM bets"
    " WHERE round_id = :round_id AND bet_index = :bet_index FOR UPDATE"
)

# paid_out flips false -> true exactly once.
_SAVE_PAYOUT_SQL = text("""
    UPDATE bets
    SET paid_out = TRUE, payout = :payout
    WHERE round_id = :round_id AND bet_index = :bet_index AND paid_out = FALSE
""")

_LIST_ROUND_BETS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM bets
    WHERE round_id = :round_id
      AND (CAST(:after_index AS BIGINT) IS NULL OR bet_index > :after_index)
    ORDER BY bet_index
    LIMIT :limit
""")

_LIST_ALL_ROUND_BETS_SQL = text(
    f"SELECT {_COLUMNS} FROM bets WHERE round_id = :round_id ORDER BY bet_index"
)

_LIST_USER_BETS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM bets
    WHERE bettor = :bettor
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
    ORDER BY id DESC
    LIMIT :limit
""")

_LIST_UNPAID_SQL = text("""
    SELECT bet_index
    FROM bets
    WHERE round_id = :round_id AND paid_out = FALSE
    ORDER BY bet_index
    LIMIT :limit
""")

_LEADERBOARD_SQL = text("""
    SELECT b.bettor,
           COALESCE(SUM(b.original_amount), 0) AS total_bet,
           COALESCE(SUM(b.payout), 0) AS total_winnings,
           COUNT(*) FILTER (WHERE b.side = r.winning_side) AS wins,
           COUNT(*) FILTER (WHERE b.side <> r.winning_side) AS losses
    FROM bets b
    JOIN rounds r ON r.round_id = b.round_id
    WHERE b.paid_out = TRUE
    GROUP BY b.bettor
    ORDER BY COALESCE(SUM(b.payout), 0) - COALESCE(SUM(b.original_amount), 0) DESC,
             b.bettor
    LIMIT :limit
""")


def _row_to_bet(row: object) -> Bet:
    return Bet(
        round_id=int(row.round_id),  # type: ignore[attr-defined]
        bet_index=int(row.bet_index),  # type: ignore[attr-defined]
        bettor=row.bettor,  # type: ignore[attr-defined]
        side=Side(row.side),  # type: ignore[attr-defined]
        amount=int(row.amount),  # type: ignore[attr-defined]
        original_amount=int(row.original_amount),  # type: ignore[attr-defined]
        bet_time=int(row.bet_time),  # type: ignore[attr-defined]
        weight=row.weight,  # type: ignore[attr-defined]
        paid_out=row.paid_out,  # type: ignore[attr-defined]
        referrer=row.referrer,  # type: ignore[attr-defined]
        payout=int(row.payout),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class BetRepository:
    async def insert_bet(self, db: AsyncSession, bet: Bet) -> None:
        await db.execute(
            _INSERT_BET_SQL,
            {
                "round_id": bet.round_id,
                "bet_index": bet.bet_index,
                "bettor": bet.bettor,
                "side": int(bet.side),
                "amount": bet.amount,
                "original_amount": bet.original_amount,
                "bet_time": bet.bet_time,
                "weight": bet.weight,
                "paid_out": bet.paid_out,
                "referrer": bet.referrer,
                "payout": bet.payout,
            },
        )

    async def get_bet(
        self, db: AsyncSession, round_id: int, bet_index: int, for_update: bool = False
    ) -> Bet | None:
        sql = _GET_BET_FOR_UPDATE_SQL if for_update else _GET_BET_SQL
        row = (
            await db.execute(sql, {"round_id": round_id, "bet_index": bet_index})
        ).fetchone()
        return _row_to_bet(row) if row else None

    async def save_payout(self, db: AsyncSession, bet: Bet) -> None:
        result = await db.execute(
            _SAVE_PAYOUT_SQL,
            {"round_id": bet.round_id, "bet_index": bet.bet_index, "payout": bet.payout},
        )
        if result.rowcount != 1:  # type: ignore[attr-defined]
            raise InternalError(f"Bet {bet.round_id}:{bet.bet_index} not updated")

    async def list_round_bets(
        self, db: AsyncSession, round_id: int, after_index: int | None, limit: int
    ) -> list[Bet]:
        rows = (
            await db.execute(
                _LIST_ROUND_BETS_SQL,
                {"round_id": round_id, "after_index": after_index, "limit": limit},
            )
        ).fetchall()
        return [_row_to_bet(r) for r in rows]

    async def list_user_bets(
        self, db: AsyncSession, bettor: str, cursor_id: int | None, limit: int
    ) -> list[tuple[int, Bet]]:
        rows = (
            await db.execute(
                _LIST_USER_BETS_SQL,
                {"bettor": bettor, "cursor_id": cursor_id, "limit": limit},
            )
        ).fetchall()
        return [(int(r.id), _row_to_bet(r)) for r in rows]

    async def list_unpaid_indices(
        self, db: AsyncSession, round_id: int, limit: int
    ) -> list[int]:
        rows = (
            await db.execute(_LIST_UNPAID_SQL, {"round_id": round_id, "limit": limit})
        ).fetchall()
        return [int(r.bet_index) for r in rows]

    async def list_all_round_bets(self, db: AsyncSession, round_id: int) -> list[Bet]:
        rows = (
            await db.execute(_LIST_ALL_ROUND_BETS_SQL, {"round_id": round_id})
        ).fetchall()
        return [_row_to_bet(r) for r in rows]

    async def leaderboard(self, db: AsyncSession, limit: int) -> list[LeaderboardRow]:
        rows = (await db.execute(_LEADERBOARD_SQL, {"limit": limit})).fetchall()
        return [
            LeaderboardRow(
                bettor=r.bettor,
                total_bet=int(r.total_bet),
                total_winnings=int(r.total_winnings),
                wins=int(r.wins),
                losses=int(r.losses),
            )
            for r in rows
        ]
