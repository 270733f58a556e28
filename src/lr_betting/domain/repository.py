"""Repository Protocol for bets and bet aggregates."""

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_betting.domain.models import Bet


@dataclass
class LeaderboardRow:
    bettor: str
    total_bet: int        # gross lamports staked on processed bets
    total_winnings: int   # lamports paid out
    wins: int
    losses: int

    @property
    def profit(self) -> int:
        return self.total_winnings - self.total_bet

    @property
    def win_rate_bps(self) -> int:
        played = self.wins + self.losses
        return self.wins * 10_000 // played if played else 0


class BetRepositoryProtocol(Protocol):
    async def insert_bet(self, db: AsyncSession, bet: Bet) -> None: ...

    async def get_bet(
        self, db: AsyncSession, round_id: int, bet_index: int, for_update: bool = False
    ) -> Bet | None: ...

    async def save_payout(self, db: AsyncSession, bet: Bet) -> None: ...

    async def list_round_bets(
        self, db: AsyncSession, round_id: int, after_index: int | None, limit: int
    ) -> list[Bet]: ...

    async def list_user_bets(
        self, db: AsyncSession, bettor: str, cursor_id: int | None, limit: int
    ) -> list[tuple[int, Bet]]: ...

    async def list_unpaid_indices(
        self, db: AsyncSession, round_id: int, limit: int
    ) -> list[int]: ...

    async def list_all_round_bets(self, db: AsyncSession, round_id: int) -> list[Bet]: ...

    async def leaderboard(self, db: AsyncSession, limit: int) -> list[LeaderboardRow]: ...
