"""RoundApplicationService — start, read, list rounds and quote payouts."""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_account.application.schemas import cursor_decode, cursor_encode
from src.lr_common.amounts import lamports_to_display
from src.lr_common.datetime_utils import unix_now
from src.lr_common.enums import RoundStatus, Side, parse_side
from src.lr_common.errors import ConfigNotInitializedError, RoundNotFoundError
from src.lr_common.event_log import write_event
from src.lr_config.domain.repository import ConfigRepositoryProtocol
from src.lr_config.infrastructure.persistence import ConfigRepository
from src.lr_round.application.schemas import (
    QuoteResponse,
    RoundListResponse,
    RoundResponse,
    StartRoundRequest,
)
from src.lr_round.domain.lifecycle import start_round
from src.lr_round.domain.models import Round
from src.lr_round.domain.repository import RoundRepositoryProtocol
from src.lr_round.infrastructure.persistence import RoundRepository
from src.lr_settlement.domain.payout import estimate_payout, implied_odds_bps

logger = logging.getLogger(__name__)


class RoundApplicationService:
    def __init__(
        self,
        config_repo: ConfigRepositoryProtocol | None = None,
        round_repo: RoundRepositoryProtocol | None = None,
        clock: Callable[[], int] = unix_now,
    ) -> None:
        self._config_repo: ConfigRepositoryProtocol = config_repo or ConfigRepository()
        self._round_repo: RoundRepositoryProtocol = round_repo or RoundRepository()
        self._clock = clock

    async def _require_round(self, db: AsyncSession, round_id: int) -> Round:
        round_ = await self._round_repo.get_round(db, round_id)
        if round_ is None:
            raise RoundNotFoundError(round_id)
        return round_

    async def start(
        self, db: AsyncSession, caller: str, body: StartRoundRequest
    ) -> RoundResponse:
        try:
            # Row lock on the config serialises round id allocation.
            config = await self._config_repo.get_config(db, for_update=True)
            if config is None:
                raise ConfigNotInitializedError()
            round_, event = start_round(
                config, caller, body.asset_symbol, body.start_price, self._clock()
            )
            await self._round_repo.insert_round(db, round_)
            await self._config_repo.save_config(db, config)
            await write_event(event, db)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Round %d started: %s", round_.round_id, round_.asset_symbol)
        return RoundResponse.from_domain(round_)

    async def get_round(self, db: AsyncSession, round_id: int) -> RoundResponse:
        return RoundResponse.from_domain(await self._require_round(db, round_id))

    async def get_current(self, db: AsyncSession) -> RoundResponse | None:
        round_ = await self._round_repo.get_current_round(db)
        return RoundResponse.from_domain(round_) if round_ else None

    async def list_rounds(
        self,
        db: AsyncSession,
        cursor: str | None,
        limit: int,
        status: RoundStatus | None,
    ) -> RoundListResponse:
        rounds = await self._round_repo.list_rounds(
            db, cursor_decode(cursor), limit + 1, status
        )
        has_more = len(rounds) > limit
        page = rounds[:limit]
        return RoundListResponse(
            items=[RoundResponse.from_domain(r) for r in page],
            next_cursor=cursor_encode(page[-1].round_id) if has_more and page else None,
            has_more=has_more,
        )

    async def quote(
        self,
        db: AsyncSession,
        round_id: int,
        side: int,
        amount: int,
        with_referrer: bool = False,
    ) -> QuoteResponse:
        config = await self._config_repo.get_config(db)
        if config is None:
            raise ConfigNotInitializedError()
        round_ = await self._require_round(db, round_id)
        chosen = parse_side(side)
        estimate = estimate_payout(
            round_, config, chosen, amount, with_referrer, self._clock()
        )
        return QuoteResponse(
            round_id=round_id,
            side=int(chosen),
            gross_amount=amount,
            net_amount=estimate.net_amount,
            treasury_fee=estimate.treasury_fee,
            referrer_fee=estimate.referrer_fee,
            weight=estimate.weight,
            weighted_amount=estimate.weighted_amount,
            payout_if_win=estimate.payout_if_win,
            payout_if_win_display=lamports_to_display(estimate.payout_if_win),
            left_odds_bps=implied_odds_bps(round_, Side.LEFT),
            right_odds_bps=implied_odds_bps(round_, Side.RIGHT),
        )
