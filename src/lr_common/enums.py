"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum, IntEnum

from src.lr_common.errors import InvalidSideError


class RoundStatus(str, Enum):
    OPEN = "OPEN"
    # Reserved: no transition enters LOCKED; settlement still accepts it.
    LOCKED = "LOCKED"
    SETTLING = "SETTLING"
    SETTLED = "SETTLED"


class Side(IntEnum):
    """Bet side. LEFT wins when the end price closes below the start price."""

    LEFT = 0
    RIGHT = 1


def parse_side(value: object) -> Side:
    """Map a raw discriminant to Side, rejecting anything but 0 and 1."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSideError(value)
    try:
        return Side(value)
    except ValueError:
        raise InvalidSideError(value) from None


class LedgerEntryType(str, Enum):
    # Deposit/Withdraw
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
    # Bet placement (bettor + vault paired)
    BET_STAKE = "BET_STAKE"
    VAULT_IN = "VAULT_IN"
    # Fees (bettor + recipient paired)
    TREASURY_FEE = "TREASURY_FEE"
    TREASURY_FEE_REVENUE = "TREASURY_FEE_REVENUE"
    REFERRER_FEE = "REFERRER_FEE"
    REFERRER_FEE_REVENUE = "REFERRER_FEE_REVENUE"
    # Payout (vault + bettor paired)
    VAULT_OUT = "VAULT_OUT"
    PAYOUT = "PAYOUT"


class EventType(str, Enum):
    CONFIG_UPDATED = "CONFIG_UPDATED"
    ROUND_STARTED = "ROUND_STARTED"
    BET_PLACED = "BET_PLACED"
    REFERRER_PAID = "REFERRER_PAID"
    ROUND_SETTLED = "ROUND_SETTLED"
    PAYOUT_PROCESSED = "PAYOUT_PROCESSED"
