"""BettingEngine — place one bet on an open round.

Pure: every new value is computed and range-checked before ``round_`` is
mutated, so a raised error leaves the round untouched. The caller applies
the returned transfers and persists the bet in one transaction.
"""

from src.lr_account.domain.models import Transfer, vault_account_id
from src.lr_betting.domain.fee import resolve_referrer, split_fees
from src.lr_betting.domain.models import Bet, BetPlacement
from src.lr_common.amounts import U32_MAX, checked_add, mul_div
from src.lr_common.enums import LedgerEntryType, RoundStatus, Side, parse_side
from src.lr_common.errors import (
    BetTooLargeError,
    BetTooSmallError,
    BettingPeriodEndedError,
    RoundNotOpenError,
)
from src.lr_common.events import BetPlaced, DomainEvent, ReferrerPaid
from src.lr_config.domain.models import GameConfig
from src.lr_round.domain.models import Round
from src.lr_round.domain.weight import WEIGHT_SCALE, calculate_weight

BET_REFERENCE_TYPE = "BET"


def bet_reference_id(round_id: int, bet_index: int) -> str:
    return f"{round_id}:{bet_index}"


def place_bet(
    round_: Round,
    config: GameConfig,
    side: object,
    gross_amount: int,
    bettor: str,
    referrer: str | None,
    now: int,
) -> BetPlacement:
    side = parse_side(side)
    if round_.status != RoundStatus.OPEN:
        raise RoundNotOpenError(round_.round_id)
    if now >= round_.betting_end_time:
        raise BettingPeriodEndedError(round_.round_id)
    if gross_amount < config.min_bet:
        raise BetTooSmallError(gross_amount, config.min_bet)
    if gross_amount > config.max_bet:
        raise BetTooLargeError(gross_amount, config.max_bet)

    referrer = resolve_referrer(referrer, bettor)
    fees = split_fees(
        gross_amount, config.fee_bps, config.referrer_fee_bps, referrer is not None
    )

    weight = calculate_weight(round_.start_time, now)
    weighted_amount = mul_div(fees.net_amount, weight, WEIGHT_SCALE)

    new_pool = checked_add(round_.pool(side), fees.net_amount)
    new_weighted_pool = checked_add(round_.weighted_pool(side), weighted_amount)
    new_bet_count = checked_add(round_.bet_count, 1, limit=U32_MAX)

    bet = Bet(
        round_id=round_.round_id,
        bettor=bettor,
        side=side,
        amount=fees.net_amount,
        original_amount=gross_amount,
        bet_time=now,
        weight=weight,
        bet_index=round_.bet_count,
        referrer=referrer,
    )

    # All checks passed; mutate.
    if side is Side.LEFT:
        round_.left_pool = new_pool
        round_.left_weighted_pool = new_weighted_pool
    else:
        round_.right_pool = new_pool
        round_.right_weighted_pool = new_weighted_pool
    round_.bet_count = new_bet_count

    ref_id = bet_reference_id(bet.round_id, bet.bet_index)
    transfers: list[Transfer] = []
    if fees.treasury_fee > 0:
        transfers.append(Transfer(
            from_id=bettor,
            to_id=config.treasury,
            amount=fees.treasury_fee,
            debit_type=LedgerEntryType.TREASURY_FEE,
            credit_type=LedgerEntryType.TREASURY_FEE_REVENUE,
            reference_type=BET_REFERENCE_TYPE,
            reference_id=ref_id,
        ))
    if referrer is not None and fees.referrer_fee > 0:
        transfers.append(Transfer(
            from_id=bettor,
            to_id=referrer,
            amount=fees.referrer_fee,
            debit_type=LedgerEntryType.REFERRER_FEE,
            credit_type=LedgerEntryType.REFERRER_FEE_REVENUE,
            reference_type=BET_REFERENCE_TYPE,
            reference_id=ref_id,
        ))
    if fees.net_amount > 0:
        transfers.append(Transfer(
            from_id=bettor,
            to_id=vault_account_id(round_.round_id),
            amount=fees.net_amount,
            debit_type=LedgerEntryType.BET_STAKE,
            credit_type=LedgerEntryType.VAULT_IN,
            reference_type=BET_REFERENCE_TYPE,
            reference_id=ref_id,
        ))

    events: list[DomainEvent] = [
        BetPlaced(
            round_id=bet.round_id,
            bettor=bettor,
            side=int(side),
            amount=bet.amount,
            original_amount=gross_amount,
            treasury_fee=fees.treasury_fee,
            referrer_fee=fees.referrer_fee,
            bet_index=bet.bet_index,
            weight=weight,
            referrer=referrer,
        )
    ]
    if referrer is not None and fees.referrer_fee > 0:
        events.append(ReferrerPaid(
            round_id=bet.round_id, referrer=referrer, amount=fees.referrer_fee
        ))

    return BetPlacement(bet=bet, fees=fees, transfers=transfers, events=events)
