"""Per-round accounting invariants. Returns violation strings, never raises.

INV-R1: left_pool / right_pool == sum(bet.amount) per side
INV-R2: weighted pools == sum(bet.weighted_amount) per side
INV-R3: bet_count == number of bets, indices 0..bet_count-1
INV-R4: payouts_processed == number of paid bets
INV-R5: sum(bet.payout) <= left_pool + right_pool
INV-R6: SETTLED implies payouts_processed == bet_count
"""

from collections.abc import Sequence

from src.lr_betting.domain.models import Bet
from src.lr_common.enums import RoundStatus, Side
from src.lr_round.domain.models import Round


def check_round_invariants(round_: Round, bets: Sequence[Bet]) -> list[str]:
    rid = round_.round_id
    violations: list[str] = []

    for side in (Side.LEFT, Side.RIGHT):
        side_bets = [b for b in bets if b.side == side]
        amount = sum(b.amount for b in side_bets)
        weighted = sum(b.weighted_amount for b in side_bets)
        if amount != round_.pool(side):
            violations.append(
                f"INV-R1 violated: round={rid} {side.name} pool={round_.pool(side)} "
                f"!= sum(bet.amount)={amount}"
            )
        if weighted != round_.weighted_pool(side):
            violations.append(
                f"INV-R2 violated: round={rid} {side.name} "
                f"weighted_pool={round_.weighted_pool(side)} != sum={weighted}"
            )

    indices = sorted(b.bet_index for b in bets)
    if indices != list(range(round_.bet_count)):
        violations.append(
            f"INV-R3 violated: round={rid} bet_count={round_.bet_count} "
            f"but {len(bets)} bets stored"
        )

    paid = sum(1 for b in bets if b.paid_out)
    if paid != round_.payouts_processed:
        violations.append(
            f"INV-R4 violated: round={rid} payouts_processed="
            f"{round_.payouts_processed} != paid bets={paid}"
        )

    total_paid = sum(b.payout for b in bets)
    if total_paid > round_.total_pool:
        violations.append(
            f"INV-R5 violated: round={rid} paid={total_paid} > pool={round_.total_pool}"
        )

    if (
        round_.status == RoundStatus.SETTLED
        and round_.payouts_processed != round_.bet_count
    ):
        violations.append(
            f"INV-R6 violated: round={rid} SETTLED with "
            f"{round_.payouts_processed}/{round_.bet_count} payouts"
        )
    return violations
