"""Domain model for a betting round — pure dataclass plus pool accessors."""

from dataclasses import dataclass
from datetime import datetime

from src.lr_common.enums import RoundStatus, Side


@dataclass
class Round:
    round_id: int
    asset_symbol: str
    start_price: int           # signed fixed-point ticks (price * 1e8)
    start_time: int            # unix seconds
    betting_end_time: int      # start_time + 12h
    end_time: int              # start_time + 24h
    status: RoundStatus = RoundStatus.OPEN
    end_price: int = 0         # 0 until settlement
    left_pool: int = 0         # lamports, after fees
    right_pool: int = 0
    left_weighted_pool: int = 0
    right_weighted_pool: int = 0
    bet_count: int = 0
    payouts_processed: int = 0
    winning_side: Side | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_pool(self) -> int:
        return self.left_pool + self.right_pool

    @property
    def total_weighted_pool(self) -> int:
        return self.left_weighted_pool + self.right_weighted_pool

    def pool(self, side: Side) -> int:
        if side is Side.LEFT:
            return self.left_pool
        return self.right_pool

    def weighted_pool(self, side: Side) -> int:
        if side is Side.LEFT:
            return self.left_weighted_pool
        return self.right_weighted_pool

    def is_betting_open(self, now: int) -> bool:
        return self.status == RoundStatus.OPEN and now < self.betting_end_time

    def is_ready_to_settle(self, now: int) -> bool:
        return now >= self.end_time

    @property
    def payouts_pending(self) -> int:
        return self.bet_count - self.payouts_processed
