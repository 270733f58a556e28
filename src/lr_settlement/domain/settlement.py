"""SettlementEngine — fix the outcome of an ended round. No funds move here.

The round always moves to SETTLING; only the payout side moves it to SETTLED.
"""

from src.lr_common.enums import RoundStatus, Side
from src.lr_common.errors import RoundAlreadySettledError, RoundNotEndedError
from src.lr_common.events import RoundSettled
from src.lr_config.domain.models import GameConfig
from src.lr_config.domain.service import require_admin
from src.lr_round.domain.lifecycle import SETTLEABLE_STATUSES, validate_price
from src.lr_round.domain.models import Round


def winning_side_for(start_price: int, end_price: int) -> Side:
    """LEFT only on a strictly lower close; a tie goes to RIGHT."""
    if end_price < start_price:
        return Side.LEFT
    return Side.RIGHT


def settle_round(
    round_: Round,
    config: GameConfig,
    end_price: int,
    caller: str,
    now: int,
) -> RoundSettled:
    require_admin(config, caller)
    if round_.status not in SETTLEABLE_STATUSES:
        raise RoundAlreadySettledError(round_.round_id)
    if now < round_.end_time:
        raise RoundNotEndedError(round_.round_id, round_.end_time)
    validate_price(end_price)

    winning_side = winning_side_for(round_.start_price, end_price)
    round_.end_price = end_price
    round_.winning_side = winning_side
    round_.status = RoundStatus.SETTLING

    return RoundSettled(
        round_id=round_.round_id,
        start_price=round_.start_price,
        end_price=end_price,
        winning_side=int(winning_side),
        total_pool=round_.total_pool,
        winning_pool=round_.pool(winning_side),
    )
