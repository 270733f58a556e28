"""Domain model for the global game config — pure dataclass."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class GameConfig:
    admin: str                 # user id allowed to start and settle rounds
    fee_bps: int               # total treasury fee, basis points
    referrer_fee_bps: int      # referrer cut, basis points, <= fee_bps
    min_bet: int               # lamports, inclusive
    max_bet: int               # lamports, inclusive
    treasury: str              # account id receiving treasury fees
    round_counter: int = 0     # next round id
    version: int = 0           # bumped on every update
    created_at: datetime | None = None
    updated_at: datetime | None = None
