"""Pydantic schemas for settlement and payouts."""

from pydantic import BaseModel, Field

from src.lr_common.amounts import I64_MAX, I64_MIN


class SettleRoundRequest(BaseModel):
    end_price: int = Field(..., ge=I64_MIN, le=I64_MAX, description="Fixed-point price")


class SettleRoundResponse(BaseModel):
    round_id: int
    status: str
    start_price: int
    end_price: int
    winning_side: int
    total_pool: int
    winning_pool: int
    bet_count: int


class PayoutResponse(BaseModel):
    round_id: int
    bet_index: int
    bettor: str
    payout: int
    round_status: str
    payouts_processed: int
    bet_count: int


class PayoutRunRequest(BaseModel):
    max_bets: int | None = Field(None, ge=1, le=10_000)


class PayoutRunResponse(BaseModel):
    round_id: int
    processed: int
    skipped: int
    total_paid: int
    remaining: int
    round_status: str
