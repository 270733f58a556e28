"""Round lifecycle: creation and the status transitions the core allows.

    OPEN ──settle──> SETTLING ──last payout──> SETTLED

LOCKED is part of the status domain but nothing transitions into it;
settlement accepts it alongside OPEN. SETTLED is terminal and every
mutating operation rejects it.
"""

from src.lr_common.amounts import I64_MAX, I64_MIN, checked_add
from src.lr_common.enums import RoundStatus
from src.lr_common.errors import InvalidAssetSymbolError, MathOverflowError
from src.lr_common.events import RoundStarted
from src.lr_config.domain.models import GameConfig
from src.lr_config.domain.service import require_admin
from src.lr_round.domain.models import Round

BETTING_DURATION = 12 * 60 * 60
WAITING_DURATION = 12 * 60 * 60
ROUND_DURATION = BETTING_DURATION + WAITING_DURATION

MAX_ASSET_SYMBOL_LEN = 16

SETTLEABLE_STATUSES = frozenset({RoundStatus.OPEN, RoundStatus.LOCKED})


def validate_asset_symbol(asset_symbol: str) -> None:
    if not asset_symbol or len(asset_symbol) > MAX_ASSET_SYMBOL_LEN:
        raise InvalidAssetSymbolError(asset_symbol)


def validate_price(price: int) -> None:
    if not (I64_MIN <= price <= I64_MAX):
        raise MathOverflowError(f"Price out of i64 range: {price}")


def start_round(
    config: GameConfig,
    caller: str,
    asset_symbol: str,
    start_price: int,
    now: int,
) -> tuple[Round, RoundStarted]:
    """Open a new round with id = config.round_counter, then bump the counter.

    Admin only. config is mutated only after every check has passed.
    """
    require_admin(config, caller)
    validate_asset_symbol(asset_symbol)
    validate_price(start_price)
    next_counter = checked_add(config.round_counter, 1)

    round_ = Round(
        round_id=config.round_counter,
        asset_symbol=asset_symbol,
        start_price=start_price,
        start_time=now,
        betting_end_time=now + BETTING_DURATION,
        end_time=now + ROUND_DURATION,
        status=RoundStatus.OPEN,
    )
    config.round_counter = next_counter

    event = RoundStarted(
        round_id=round_.round_id,
        asset_symbol=round_.asset_symbol,
        start_price=round_.start_price,
        start_time=round_.start_time,
        end_time=round_.end_time,
    )
    return round_, event
