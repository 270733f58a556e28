"""Domain events emitted by the wagering core.

Core functions return these instead of publishing them; the application
layer appends them to wal_events inside the same transaction as the state
change they describe, so an event is visible if and only if its change is.
"""

from dataclasses import asdict, dataclass
from typing import ClassVar

from src.lr_common.enums import EventType


@dataclass(frozen=True)
class DomainEvent:
    event_type: ClassVar[EventType]

    @property
    def round_id_ref(self) -> int | None:
        return getattr(self, "round_id", None)

    def to_payload(self) -> dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class ConfigUpdated(DomainEvent):
    event_type: ClassVar[EventType] = EventType.CONFIG_UPDATED

    fee_bps: int
    referrer_fee_bps: int
    min_bet: int
    max_bet: int
    version: int


@dataclass(frozen=True)
class RoundStarted(DomainEvent):
    event_type: ClassVar[EventType] = EventType.ROUND_STARTED

    round_id: int
    asset_symbol: str
    start_price: int
    start_time: int
    end_time: int


@dataclass(frozen=True)
class BetPlaced(DomainEvent):
    event_type: ClassVar[EventType] = EventType.BET_PLACED

    round_id: int
    bettor: str
    side: int
    amount: int            # credited to the pool (after fees)
    original_amount: int   # submitted by the bettor (before fees)
    treasury_fee: int
    referrer_fee: int
    bet_index: int
    weight: int
    referrer: str | None


@dataclass(frozen=True)
class ReferrerPaid(DomainEvent):
    event_type: ClassVar[EventType] = EventType.REFERRER_PAID

    round_id: int
    referrer: str
    amount: int


@dataclass(frozen=True)
class RoundSettled(DomainEvent):
    event_type: ClassVar[EventType] = EventType.ROUND_SETTLED

    round_id: int
    start_price: int
    end_price: int
    winning_side: int
    total_pool: int
    winning_pool: int


@dataclass(frozen=True)
class PayoutProcessed(DomainEvent):
    event_type: ClassVar[EventType] = EventType.PAYOUT_PROCESSED

    round_id: int
    bet_index: int
    bettor: str
    amount: int
