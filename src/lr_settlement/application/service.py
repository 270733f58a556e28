"""SettlementApplicationService — settle rounds and drive payouts.

settle() and process_payout() each run in one transaction with the round
row locked FOR UPDATE. process_all_payouts() is the external driver: it
walks unpaid bet indices and pays each in its own transaction, so a run
that stops early (limit, crash) can simply be started again.
"""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.lr_account.domain.repository import AccountRepositoryProtocol
from src.lr_account.infrastructure.persistence import AccountRepository
from src.lr_betting.domain.repository import BetRepositoryProtocol
from src.lr_betting.infrastructure.persistence import BetRepository
from src.lr_common.datetime_utils import unix_now
from src.lr_common.enums import RoundStatus
from src.lr_common.errors import (
    BetNotFoundError,
    ConfigNotInitializedError,
    PayoutAlreadyProcessedError,
    RoundNotFoundError,
    RoundNotSettlingError,
)
from src.lr_common.event_log import write_event, write_events
from src.lr_config.domain.models import GameConfig
from src.lr_config.domain.repository import ConfigRepositoryProtocol
from src.lr_config.domain.service import require_admin
from src.lr_config.infrastructure.persistence import ConfigRepository
from src.lr_round.domain.models import Round
from src.lr_round.domain.repository import RoundRepositoryProtocol
from src.lr_round.infrastructure.persistence import RoundRepository
from src.lr_settlement.application.schemas import (
    PayoutResponse,
    PayoutRunResponse,
    SettleRoundResponse,
)
from src.lr_settlement.domain.payout import check_payable, finalize_round, process_payout
from src.lr_settlement.domain.settlement import settle_round

logger = logging.getLogger(__name__)


class SettlementApplicationService:
    def __init__(
        self,
        config_repo: ConfigRepositoryProtocol | None = None,
        round_repo: RoundRepositoryProtocol | None = None,
        bet_repo: BetRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        clock: Callable[[], int] = unix_now,
    ) -> None:
        self._config_repo: ConfigRepositoryProtocol = config_repo or ConfigRepository()
        self._round_repo: RoundRepositoryProtocol = round_repo or RoundRepository()
        self._bet_repo: BetRepositoryProtocol = bet_repo or BetRepository()
        self._account_repo: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._clock = clock

    async def _load_config(self, db: AsyncSession) -> GameConfig:
        config = await self._config_repo.get_config(db)
        if config is None:
            raise ConfigNotInitializedError()
        return config

    async def _lock_round(self, db: AsyncSession, round_id: int) -> Round:
        round_ = await self._round_repo.get_round(db, round_id, for_update=True)
        if round_ is None:
            raise RoundNotFoundError(round_id)
        return round_

    async def settle(
        self, db: AsyncSession, caller: str, round_id: int, end_price: int
    ) -> SettleRoundResponse:
        try:
            config = await self._load_config(db)
            round_ = await self._lock_round(db, round_id)
            event = settle_round(round_, config, end_price, caller, self._clock())
            await self._round_repo.save_round(db, round_)
            await write_event(event, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Round %d settled: winner=%s pool=%d bets=%d",
            round_id, round_.winning_side.name if round_.winning_side is not None else None,
            round_.total_pool, round_.bet_count,
        )
        return SettleRoundResponse(
            round_id=round_id,
            status=round_.status.value,
            start_price=event.start_price,
            end_price=event.end_price,
            winning_side=event.winning_side,
            total_pool=event.total_pool,
            winning_pool=event.winning_pool,
            bet_count=round_.bet_count,
        )

    async def process_payout(
        self, db: AsyncSession, round_id: int, bet_index: int
    ) -> PayoutResponse:
        try:
            round_ = await self._lock_round(db, round_id)
            check_payable(round_)
            bet = await self._bet_repo.get_bet(db, round_id, bet_index, for_update=True)
            if bet is None:
                raise BetNotFoundError(round_id, bet_index)
            result = process_payout(round_, bet)
            if result.transfer is not None:
                await self._account_repo.transfer(db, result.transfer)
            await self._bet_repo.save_payout(db, bet)
            await self._round_repo.save_round(db, round_)
            await write_events(result.events, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        if result.round_settled:
            logger.info("Round %d fully paid out", round_id)
        return PayoutResponse(
            round_id=round_id,
            bet_index=bet_index,
            bettor=bet.bettor,
            payout=result.payout,
            round_status=round_.status.value,
            payouts_processed=round_.payouts_processed,
            bet_count=round_.bet_count,
        )

    async def _finalize_empty(self, db: AsyncSession, round_id: int) -> PayoutRunResponse:
        await db.rollback()
        try:
            round_ = await self._lock_round(db, round_id)
            finalize_round(round_)
            await self._round_repo.save_round(db, round_)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Round %d had no bets, closed", round_id)
        return PayoutRunResponse(
            round_id=round_id, processed=0, skipped=0, total_paid=0,
            remaining=0, round_status=round_.status.value,
        )

    async def process_all_payouts(
        self,
        db: AsyncSession,
        caller: str,
        round_id: int,
        max_bets: int | None = None,
    ) -> PayoutRunResponse:
        """Pay every unpaid bet of a SETTLING round, up to max_bets per run."""
        limit = settings.PAYOUT_DRIVER_MAX_BETS if max_bets is None else max_bets
        config = await self._load_config(db)
        require_admin(config, caller)
        round_ = await self._round_repo.get_round(db, round_id)
        if round_ is None:
            raise RoundNotFoundError(round_id)
        if round_.status == RoundStatus.SETTLED:
            return PayoutRunResponse(
                round_id=round_id, processed=0, skipped=0, total_paid=0,
                remaining=0, round_status=round_.status.value,
            )
        if round_.status != RoundStatus.SETTLING:
            raise RoundNotSettlingError(round_id)
        if round_.bet_count == 0:
            return await self._finalize_empty(db, round_id)

        indices = await self._bet_repo.list_unpaid_indices(db, round_id, limit)
        # Release the read snapshot before per-bet transactions.
        await db.rollback()

        processed = skipped = total_paid = 0
        last: PayoutResponse | None = None
        for bet_index in indices:
            try:
                last = await self.process_payout(db, round_id, bet_index)
            except PayoutAlreadyProcessedError:
                # Paid concurrently by another driver or a direct call.
                skipped += 1
                continue
            processed += 1
            total_paid += last.payout

        if last is not None:
            remaining = last.bet_count - last.payouts_processed
            status = last.round_status
        else:
            refreshed = await self._round_repo.get_round(db, round_id)
            remaining = refreshed.payouts_pending if refreshed else 0
            status = refreshed.status.value if refreshed else round_.status.value
        logger.info(
            "Payout run round=%d processed=%d skipped=%d paid=%d remaining=%d",
            round_id, processed, skipped, total_paid, remaining,
        )
        return PayoutRunResponse(
            round_id=round_id,
            processed=processed,
            skipped=skipped,
            total_paid=total_paid,
            remaining=remaining,
            round_status=status,
        )
