"""Admin application service — invariant verification and round statistics.

Per round: INV-R1..R6 (see lr_settlement.domain.invariants).
Global:
    INV-V: every vault balance == its round's pools - winnings already paid
    INV-G: sum of all account balances == net deposits (transfers are zero-sum)
"""

import logging
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.domain.models import VAULT_PREFIX
from src.lr_betting.domain.repository import BetRepositoryProtocol
from src.lr_betting.infrastructure.persistence import BetRepository
from src.lr_common.errors import ConfigNotInitializedError, RoundNotFoundError
from src.lr_config.domain.repository import ConfigRepositoryProtocol
from src.lr_config.domain.service import require_admin
from src.lr_config.infrastructure.persistence import ConfigRepository
from src.lr_round.domain.repository import RoundRepositoryProtocol
from src.lr_round.infrastructure.persistence import RoundRepository
from src.lr_settlement.domain.invariants import check_round_invariants

logger = logging.getLogger(__name__)

_VAULT_BALANCES_SQL = text("""
    SELECT r.round_id,
           r.left_pool + r.right_pool AS pool,
           COALESCE((SELECT SUM(b.payout) FROM bets b WHERE b.round_id = r.round_id), 0)
               AS paid,
           COALESCE(a.available_balance, 0) AS vault
    FROM rounds r
    LEFT JOIN accounts a ON a.user_id = :prefix || r.round_id::text
    ORDER BY r.round_id
""")
_TOTAL_BALANCE_SQL = text("SELECT COALESCE(SUM(available_balance), 0) FROM accounts")
_NET_DEPOSIT_SQL = text("""
    SELECT COALESCE(SUM(amount), 0)
    FROM ledger_entries
    WHERE entry_type IN ('DEPOSIT', 'WITHDRAW')
""")
_ROUND_STATS_SQL = text("""
    SELECT COUNT(*) AS bets,
           COUNT(DISTINCT bettor) AS unique_bettors,
           COUNT(*) FILTER (WHERE side = 0) AS left_bets,
           COUNT(*) FILTER (WHERE side = 1) AS right_bets,
           COALESCE(SUM(original_amount), 0) AS gross_volume,
           COALESCE(SUM(original_amount - amount), 0) AS fees,
           COALESCE(SUM(payout), 0) AS paid
    FROM bets
    WHERE round_id = :round_id
""")


class AdminService:
    def __init__(
        self,
        config_repo: ConfigRepositoryProtocol | None = None,
        round_repo: RoundRepositoryProtocol | None = None,
        bet_repo: BetRepositoryProtocol | None = None,
    ) -> None:
        self._config_repo: ConfigRepositoryProtocol = config_repo or ConfigRepository()
        self._round_repo: RoundRepositoryProtocol = round_repo or RoundRepository()
        self._bet_repo: BetRepositoryProtocol = bet_repo or BetRepository()

    async def _require_admin(self, db: AsyncSession, caller: str) -> None:
        config = await self._config_repo.get_config(db)
        if config is None:
            raise ConfigNotInitializedError()
        require_admin(config, caller)

    async def verify_global_invariants(self, db: AsyncSession) -> list[str]:
        violations: list[str] = []
        for row in (await db.execute(_VAULT_BALANCES_SQL, {"prefix": VAULT_PREFIX})).fetchall():
            expected = int(row.pool) - int(row.paid)
            if int(row.vault) != expected:
                violations.append(
                    f"INV-V violated: round={row.round_id} vault={int(row.vault)} "
                    f"!= pool({int(row.pool)}) - paid({int(row.paid)}) = {expected}"
                )
        total = int((await db.execute(_TOTAL_BALANCE_SQL)).scalar_one())
        net_deposits = int((await db.execute(_NET_DEPOSIT_SQL)).scalar_one())
        if total != net_deposits:
            violations.append(
                f"INV-G violated: account balances={total} != net_deposits={net_deposits}"
            )
        for msg in violations:
            logger.error(msg)
        return violations

    async def verify_all_invariants(self, db: AsyncSession, caller: str) -> dict[str, Any]:
        await self._require_admin(db, caller)
        violations: list[str] = []
        rounds = await self._round_repo.list_all_rounds(db)
        for round_ in rounds:
            bets = await self._bet_repo.list_all_round_bets(db, round_.round_id)
            for msg in check_round_invariants(round_, bets):
                logger.error(msg)
                violations.append(msg)
        violations.extend(await self.verify_global_invariants(db))
        return {
            "ok": not violations,
            "rounds_checked": len(rounds),
            "violations": violations,
        }

    async def get_round_stats(
        self, db: AsyncSession, caller: str, round_id: int
    ) -> dict[str, Any]:
        await self._require_admin(db, caller)
        round_ = await self._round_repo.get_round(db, round_id)
        if round_ is None:
            raise RoundNotFoundError(round_id)
        stats = (await db.execute(_ROUND_STATS_SQL, {"round_id": round_id})).fetchone()
        return {
            "round_id": round_id,
            "status": round_.status.value,
            "bets": int(stats.bets) if stats else 0,
            "unique_bettors": int(stats.unique_bettors) if stats else 0,
            "left_bets": int(stats.left_bets) if stats else 0,
            "right_bets": int(stats.right_bets) if stats else 0,
            "gross_volume": int(stats.gross_volume) if stats else 0,
            "fees_collected": int(stats.fees) if stats else 0,
            "total_pool": round_.total_pool,
            "total_paid": int(stats.paid) if stats else 0,
            "payouts_pending": round_.payouts_pending,
        }
