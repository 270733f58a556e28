"""Pydantic schemas for the rounds API."""

from pydantic import BaseModel, Field

from src.lr_common.amounts import I64_MAX, I64_MIN, lamports_to_display
from src.lr_round.domain.lifecycle import MAX_ASSET_SYMBOL_LEN
from src.lr_round.domain.models import Round


class StartRoundRequest(BaseModel):
    asset_symbol: str = Field(..., min_length=1, max_length=MAX_ASSET_SYMBOL_LEN)
    start_price: int = Field(..., ge=I64_MIN, le=I64_MAX, description="Fixed-point price")


class RoundResponse(BaseModel):
    round_id: int
    asset_symbol: str
    status: str
    start_price: int
    end_price: int
    start_time: int
    betting_end_time: int
    end_time: int
    left_pool: int
    right_pool: int
    left_weighted_pool: int
    right_weighted_pool: int
    total_pool: int
    total_pool_display: str
    bet_count: int
    payouts_processed: int
    winning_side: int | None

    @classmethod
    def from_domain(cls, r: Round) -> "RoundResponse":
        return cls(
            round_id=r.round_id,
            asset_symbol=r.asset_symbol,
            status=r.status.value,
            start_price=r.start_price,
            end_price=r.end_price,
            start_time=r.start_time,
            betting_end_time=r.betting_end_time,
            end_time=r.end_time,
            left_pool=r.left_pool,
            right_pool=r.right_pool,
            left_weighted_pool=r.left_weighted_pool,
            right_weighted_pool=r.right_weighted_pool,
            total_pool=r.total_pool,
            total_pool_display=lamports_to_display(r.total_pool),
            bet_count=r.bet_count,
            payouts_processed=r.payouts_processed,
            winning_side=int(r.winning_side) if r.winning_side is not None else None,
        )


class RoundListResponse(BaseModel):
    items: list[RoundResponse]
    next_cursor: str | None
    has_more: bool


class QuoteResponse(BaseModel):
    round_id: int
    side: int
    gross_amount: int
    net_amount: int
    treasury_fee: int
    referrer_fee: int
    weight: int
    weighted_amount: int
    payout_if_win: int
    payout_if_win_display: str
    left_odds_bps: int
    right_odds_bps: int
