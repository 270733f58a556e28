"""Pydantic schemas for the game config API."""

from pydantic import BaseModel, Field

from src.lr_common.amounts import BPS_DENOMINATOR, U64_MAX, lamports_to_display
from src.lr_config.domain.models import GameConfig


class InitializeConfigRequest(BaseModel):
    fee_bps: int = Field(..., ge=0, le=BPS_DENOMINATOR, description="Treasury fee, bps")
    referrer_fee_bps: int = Field(..., ge=0, le=BPS_DENOMINATOR, description="Referrer fee, bps")
    min_bet: int = Field(..., ge=0, le=U64_MAX, description="Minimum bet in lamports")
    max_bet: int = Field(..., ge=0, le=U64_MAX, description="Maximum bet in lamports")
    treasury: str = Field(..., min_length=1, max_length=64)


class UpdateConfigRequest(BaseModel):
    fee_bps: int | None = Field(None, ge=0, le=BPS_DENOMINATOR)
    referrer_fee_bps: int | None = Field(None, ge=0, le=BPS_DENOMINATOR)
    min_bet: int | None = Field(None, ge=0, le=U64_MAX)
    max_bet: int | None = Field(None, ge=0, le=U64_MAX)
    treasury: str | None = Field(None, min_length=1, max_length=64)


class ConfigResponse(BaseModel):
    admin: str
    treasury: str
    fee_bps: int
    referrer_fee_bps: int
    min_bet: int
    min_bet_display: str
    max_bet: int
    max_bet_display: str
    round_counter: int
    version: int

    @classmethod
    def from_domain(cls, c: GameConfig) -> "ConfigResponse":
        return cls(
            admin=c.admin,
            treasury=c.treasury,
            fee_bps=c.fee_bps,
            referrer_fee_bps=c.referrer_fee_bps,
            min_bet=c.min_bet,
            min_bet_display=lamports_to_display(c.min_bet),
            max_bet=c.max_bet,
            max_bet_display=lamports_to_display(c.max_bet),
            round_counter=c.round_counter,
            version=c.version,
        )
