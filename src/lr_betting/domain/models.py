"""Domain models for lr_betting — pure dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime

from src.lr_account.domain.models import Transfer
from src.lr_common.enums import Side
from src.lr_common.events import DomainEvent
from src.lr_round.domain.weight import WEIGHT_SCALE


@dataclass
class Bet:
    round_id: int
    bettor: str
    side: Side
    amount: int              # lamports credited to the pool (after fees)
    original_amount: int     # lamports submitted (before fees), display only
    bet_time: int            # unix seconds
    weight: int              # x100, fixed at placement
    bet_index: int
    paid_out: bool = False
    referrer: str | None = None
    payout: int = 0          # lamports paid when processed; 0 for losers
    created_at: datetime | None = None

    @property
    def weighted_amount(self) -> int:
        return self.amount * self.weight // WEIGHT_SCALE


@dataclass(frozen=True)
class FeeSplit:
    treasury_fee: int
    referrer_fee: int
    net_amount: int


@dataclass
class BetPlacement:
    """Everything place_bet decided; the host persists it atomically."""

    bet: Bet
    fees: FeeSplit
    transfers: list[Transfer] = field(default_factory=list)
    events: list[DomainEvent] = field(default_factory=list)
