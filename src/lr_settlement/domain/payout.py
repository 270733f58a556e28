"""PayoutEngine — settle exactly one bet of a SETTLING round.

Winners get their stake back plus a share of the losing pool proportional
to their weighted stake:

    payout = amount + floor(weighted_amount * lose_pool / win_weighted_pool)

Losers get 0 but still count as processed, so the round can reach SETTLED.
A round without bets has nothing to pay; finalize_round closes it.
Driving every bet is the caller's job; see SettlementApplicationService.
"""

from dataclasses import dataclass, field

from src.lr_account.domain.models import Transfer, vault_account_id
from src.lr_betting.domain.fee import split_fees
from src.lr_betting.domain.models import Bet
from src.lr_betting.domain.service import BET_REFERENCE_TYPE, bet_reference_id
from src.lr_common.amounts import U32_MAX, checked_add, mul_div
from src.lr_common.enums import LedgerEntryType, RoundStatus, Side
from src.lr_common.errors import (
    BetNotFoundError,
    NoBetsToSettleError,
    PayoutAlreadyProcessedError,
    RoundNotSettlingError,
)
from src.lr_common.events import DomainEvent, PayoutProcessed
from src.lr_config.domain.models import GameConfig
from src.lr_round.domain.models import Round
from src.lr_round.domain.weight import WEIGHT_SCALE, calculate_weight


@dataclass
class PayoutResult:
    payout: int
    transfer: Transfer | None = None
    events: list[DomainEvent] = field(default_factory=list)
    round_settled: bool = False


def _opposite(side: Side) -> Side:
    return Side.RIGHT if side is Side.LEFT else Side.LEFT


def winner_payout(
    amount: int, weighted_amount: int, lose_pool: int, win_weighted_pool: int
) -> int:
    bonus = 0
    if lose_pool > 0 and win_weighted_pool > 0:
        bonus = mul_div(weighted_amount, lose_pool, win_weighted_pool)
    return checked_add(amount, bonus)


def calculate_payout(round_: Round, bet: Bet) -> int:
    """Amount owed to ``bet`` under the round's recorded outcome."""
    if round_.winning_side is None or bet.side != round_.winning_side:
        return 0
    win = round_.winning_side
    return winner_payout(
        bet.amount,
        bet.weighted_amount,
        round_.pool(_opposite(win)),
        round_.weighted_pool(win),
    )


def check_payable(round_: Round) -> None:
    if round_.status != RoundStatus.SETTLING:
        raise RoundNotSettlingError(round_.round_id)
    if round_.bet_count == 0:
        raise NoBetsToSettleError(round_.round_id)


def finalize_round(round_: Round) -> bool:
    """Move a SETTLING round with nothing left to pay to SETTLED.

    Returns False and leaves the round alone while payouts are pending.
    """
    if round_.status != RoundStatus.SETTLING:
        raise RoundNotSettlingError(round_.round_id)
    if round_.payouts_pending > 0:
        return False
    round_.status = RoundStatus.SETTLED
    return True


def process_payout(round_: Round, bet: Bet) -> PayoutResult:
    check_payable(round_)
    if bet.round_id != round_.round_id:
        raise BetNotFoundError(round_.round_id, bet.bet_index)
    if bet.paid_out:
        raise PayoutAlreadyProcessedError(round_.round_id, bet.bet_index)

    payout = calculate_payout(round_, bet)
    processed = checked_add(round_.payouts_processed, 1, limit=U32_MAX)

    bet.paid_out = True
    bet.payout = payout
    round_.payouts_processed = processed
    settled = processed >= round_.bet_count
    if settled:
        round_.status = RoundStatus.SETTLED

    result = PayoutResult(payout=payout, round_settled=settled)
    if payout > 0:
        result.transfer = Transfer(
            from_id=vault_account_id(round_.round_id),
            to_id=bet.bettor,
            amount=payout,
            debit_type=LedgerEntryType.VAULT_OUT,
            credit_type=LedgerEntryType.PAYOUT,
            reference_type=BET_REFERENCE_TYPE,
            reference_id=bet_reference_id(bet.round_id, bet.bet_index),
        )
        result.events.append(PayoutProcessed(
            round_id=round_.round_id,
            bet_index=bet.bet_index,
            bettor=bet.bettor,
            amount=payout,
        ))
    return result


@dataclass(frozen=True)
class PayoutEstimate:
    net_amount: int
    treasury_fee: int
    referrer_fee: int
    weight: int
    weighted_amount: int
    payout_if_win: int


def estimate_payout(
    round_: Round,
    config: GameConfig,
    side: Side,
    gross_amount: int,
    has_referrer: bool,
    now: int,
) -> PayoutEstimate:
    """What a bet placed now would pay if its side wins and pools stay as they are."""
    fees = split_fees(
        gross_amount, config.fee_bps, config.referrer_fee_bps, has_referrer
    )
    weight = calculate_weight(round_.start_time, now)
    weighted_amount = mul_div(fees.net_amount, weight, WEIGHT_SCALE)
    win_weighted_pool = checked_add(round_.weighted_pool(side), weighted_amount)
    payout = winner_payout(
        fees.net_amount,
        weighted_amount,
        round_.pool(_opposite(side)),
        win_weighted_pool,
    )
    return PayoutEstimate(
        net_amount=fees.net_amount,
        treasury_fee=fees.treasury_fee,
        referrer_fee=fees.referrer_fee,
        weight=weight,
        weighted_amount=weighted_amount,
        payout_if_win=payout,
    )


def implied_odds_bps(round_: Round, side: Side) -> int:
    """Gross return multiple for ``side`` in basis points (10000 = 1x); 0 for an empty side."""
    pool = round_.pool(side)
    if pool == 0:
        return 0
    return mul_div(round_.total_pool, 10_000, pool)
