"""Pydantic schemas for bets and the leaderboard."""

from pydantic import BaseModel, Field

from src.lr_betting.domain.models import Bet, FeeSplit
from src.lr_betting.domain.repository import LeaderboardRow
from src.lr_common.amounts import U64_MAX, lamports_to_display


class PlaceBetRequest(BaseModel):
    # Range-checked by the core so a bad side surfaces as InvalidSide.
    side: int = Field(..., description="0 = LEFT, 1 = RIGHT")
    amount: int = Field(..., ge=0, le=U64_MAX, description="Gross lamports")
    referrer: str | None = Field(None, min_length=1, max_length=64)


class BetResponse(BaseModel):
    round_id: int
    bet_index: int
    bettor: str
    side: int
    amount: int
    original_amount: int
    original_amount_display: str
    bet_time: int
    weight: int
    weighted_amount: int
    referrer: str | None
    paid_out: bool
    payout: int

    @classmethod
    def from_domain(cls, b: Bet) -> "BetResponse":
        return cls(
            round_id=b.round_id,
            bet_index=b.bet_index,
            bettor=b.bettor,
            side=int(b.side),
            amount=b.amount,
            original_amount=b.original_amount,
            original_amount_display=lamports_to_display(b.original_amount),
            bet_time=b.bet_time,
            weight=b.weight,
            weighted_amount=b.weighted_amount,
            referrer=b.referrer,
            paid_out=b.paid_out,
            payout=b.payout,
        )


class PlaceBetResponse(BaseModel):
    bet: BetResponse
    treasury_fee: int
    referrer_fee: int
    net_amount: int

    @classmethod
    def from_result(cls, bet: Bet, fees: FeeSplit) -> "PlaceBetResponse":
        return cls(
            bet=BetResponse.from_domain(bet),
            treasury_fee=fees.treasury_fee,
            referrer_fee=fees.referrer_fee,
            net_amount=fees.net_amount,
        )


class BetListResponse(BaseModel):
    items: list[BetResponse]
    next_cursor: str | None
    has_more: bool


class LeaderboardEntry(BaseModel):
    rank: int
    bettor: str
    total_bet: int
    total_winnings: int
    total_winnings_display: str
    profit: int
    wins: int
    losses: int
    win_rate_bps: int

    @classmethod
    def from_row(cls, rank: int, row: LeaderboardRow) -> "LeaderboardEntry":
        return cls(
            rank=rank,
            bettor=row.bettor,
            total_bet=row.total_bet,
            total_winnings=row.total_winnings,
            total_winnings_display=lamports_to_display(row.total_winnings),
            profit=row.profit,
            wins=row.wins,
            losses=row.losses,
            win_rate_bps=row.win_rate_bps,
        )
