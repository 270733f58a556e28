"""BettingApplicationService — place bets, list bets, leaderboard.

place() runs in one transaction: round row locked FOR UPDATE, fee and stake
transfers applied in order, bet inserted, round saved, events appended.
Any failure rolls all of it back.
"""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.application.schemas import cursor_decode, cursor_encode
from src.lr_account.domain.repository import AccountRepositoryProtocol
from src.lr_account.infrastructure.persistence import AccountRepository
from src.lr_betting.application.schemas import (
    BetListResponse,
    BetResponse,
    LeaderboardEntry,
    PlaceBetRequest,
    PlaceBetResponse,
)
from src.lr_betting.domain.repository import BetRepositoryProtocol
from src.lr_betting.domain.service import place_bet
from src.lr_betting.infrastructure.persistence import BetRepository
from src.lr_common.datetime_utils import unix_now
from src.lr_common.errors import ConfigNotInitializedError, RoundNotFoundError
from src.lr_common.event_log import write_events
from src.lr_config.domain.repository import ConfigRepositoryProtocol
from src.lr_config.infrastructure.persistence import ConfigRepository
from src.lr_round.domain.repository import RoundRepositoryProtocol
from src.lr_round.infrastructure.persistence import RoundRepository

logger = logging.getLogger(__name__)


class BettingApplicationService:
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

    async def _known_referrer(self, db: AsyncSession, referrer: str | None) -> str | None:
        """Referrer ids without a custody account are dropped like self-referrals."""
        if referrer is None:
            return None
        if await self._account_repo.get_account(db, referrer) is None:
            logger.info("Unknown referrer %s dropped", referrer)
            return None
        return referrer

    async def place(
        self, db: AsyncSession, bettor: str, round_id: int, body: PlaceBetRequest
    ) -> PlaceBetResponse:
        try:
            config = await self._config_repo.get_config(db)
            if config is None:
                raise ConfigNotInitializedError()
            round_ = await self._round_repo.get_round(db, round_id, for_update=True)
            if round_ is None:
                raise RoundNotFoundError(round_id)
            referrer = await self._known_referrer(db, body.referrer)

            placement = place_bet(
                round_, config, body.side, body.amount, bettor, referrer, self._clock()
            )
            for transfer in placement.transfers:
                await self._account_repo.transfer(db, transfer)
            await self._bet_repo.insert_bet(db, placement.bet)
            await self._round_repo.save_round(db, round_)
            await write_events(placement.events, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        bet = placement.bet
        logger.info(
            "Bet %d:%d placed by %s side=%s net=%d weight=%d",
            bet.round_id, bet.bet_index, bettor, bet.side.name, bet.amount, bet.weight,
        )
        return PlaceBetResponse.from_result(bet, placement.fees)

    async def list_round_bets(
        self, db: AsyncSession, round_id: int, cursor: str | None, limit: int
    ) -> BetListResponse:
        if await self._round_repo.get_round(db, round_id) is None:
            raise RoundNotFoundError(round_id)
        bets = await self._bet_repo.list_round_bets(
            db, round_id, cursor_decode(cursor), limit + 1
        )
        has_more = len(bets) > limit
        page = bets[:limit]
        return BetListResponse(
            items=[BetResponse.from_domain(b) for b in page],
            next_cursor=cursor_encode(page[-1].bet_index) if has_more and page else None,
            has_more=has_more,
        )

    async def list_user_bets(
        self, db: AsyncSession, bettor: str, cursor: str | None, limit: int
    ) -> BetListResponse:
        rows = await self._bet_repo.list_user_bets(
            db, bettor, cursor_decode(cursor), limit + 1
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        return BetListResponse(
            items=[BetResponse.from_domain(b) for _, b in page],
            next_cursor=cursor_encode(page[-1][0]) if has_more and page else None,
            has_more=has_more,
        )

    async def leaderboard(self, db: AsyncSession, limit: int) -> list[LeaderboardEntry]:
        rows = await self._bet_repo.leaderboard(db, limit)
        return [LeaderboardEntry.from_row(i, row) for i, row in enumerate(rows, start=1)]
