"""Unit tests for the per-bet payout, including the full round scenario."""

import pytest

from src.lr_betting.domain.models import Bet
from src.lr_betting.domain.service import place_bet
from src.lr_common.enums import LedgerEntryType, RoundStatus, Side
from src.lr_common.errors import (
    BetNotFoundError,
    NoBetsToSettleError,
    PayoutAlreadyProcessedError,
    RoundNotSettlingError,
)
from src.lr_common.events import PayoutProcessed
from src.lr_round.domain.models import Round
from src.lr_settlement.domain.payout import (
    calculate_payout,
    estimate_payout,
    finalize_round,
    implied_odds_bps,
    process_payout,
)
from src.lr_settlement.domain.settlement import settle_round
from tests.factories import ADMIN, HOUR, make_bet, make_config, make_round


def _scenario() -> tuple[Round, list[Bet]]:
    """A: 1000 LEFT at t=0; B: 1000 RIGHT at t=4h; fee 250 bps; no referrers."""
    config = make_config(fee_bps=250, referrer_fee_bps=0)
    round_ = make_round(start_time=0, start_price=100)
    a = place_bet(round_, config, Side.LEFT, 1000, "A", None, 0).bet
    b = place_bet(round_, config, Side.RIGHT, 1000, "B", None, 4 * HOUR).bet
    settle_round(round_, config, 90, ADMIN, 24 * HOUR)
    return round_, [a, b]


class TestScenario:
    def test_end_to_end(self) -> None:
        round_, (a, b) = _scenario()
        assert (a.amount, a.weight) == (975, 150)
        assert (b.amount, b.weight) == (975, 130)
        assert round_.winning_side is Side.LEFT
        assert round_.left_weighted_pool == 1462

        first = process_payout(round_, a)
        assert first.payout == 1950
        assert round_.status == RoundStatus.SETTLING

        second = process_payout(round_, b)
        assert second.payout == 0
        assert second.round_settled is True
        assert round_.status == RoundStatus.SETTLED
        assert round_.payouts_processed == round_.bet_count == 2

    def test_winner_transfer_and_event(self) -> None:
        round_, (a, _) = _scenario()
        result = process_payout(round_, a)
        assert result.transfer is not None
        assert result.transfer.from_id == "VAULT:0"
        assert result.transfer.to_id == "A"
        assert result.transfer.amount == 1950
        assert result.transfer.credit_type == LedgerEntryType.PAYOUT
        assert result.events == [PayoutProcessed(round_id=0, bet_index=0, bettor="A", amount=1950)]

    def test_loser_has_no_transfer_but_progresses(self) -> None:
        round_, (_, b) = _scenario()
        result = process_payout(round_, b)
        assert result.transfer is None
        assert result.events == []
        assert b.paid_out is True
        assert round_.payouts_processed == 1

    def test_payout_order_does_not_matter(self) -> None:
        round_, (a, b) = _scenario()
        process_payout(round_, b)
        assert process_payout(round_, a).payout == 1950
        assert round_.status == RoundStatus.SETTLED


class TestPreconditions:
    def test_second_call_fails_and_changes_nothing(self) -> None:
        round_, (a, _) = _scenario()
        process_payout(round_, a)
        with pytest.raises(PayoutAlreadyProcessedError):
            process_payout(round_, a)
        assert round_.payouts_processed == 1
        assert a.payout == 1950

    def test_round_must_be_settling(self) -> None:
        round_ = make_round()
        with pytest.raises(RoundNotSettlingError):
            process_payout(round_, make_bet())

    def test_settled_round_rejects_payout(self) -> None:
        round_, (a, b) = _scenario()
        process_payout(round_, a)
        process_payout(round_, b)
        with pytest.raises(RoundNotSettlingError):
            process_payout(round_, a)

    def test_bet_from_other_round(self) -> None:
        round_, _ = _scenario()
        with pytest.raises(BetNotFoundError):
            process_payout(round_, make_bet(round_id=99))

    def test_empty_round_has_nothing_to_pay(self) -> None:
        round_ = make_round()
        settle_round(round_, make_config(), 90, ADMIN, 24 * HOUR)
        with pytest.raises(NoBetsToSettleError):
            process_payout(round_, make_bet())
        assert round_.status == RoundStatus.SETTLING
        assert round_.payouts_processed == 0


class TestFinalizeRound:
    def test_closes_empty_round(self) -> None:
        round_ = make_round()
        settle_round(round_, make_config(), 90, ADMIN, 24 * HOUR)
        assert finalize_round(round_) is True
        assert round_.status == RoundStatus.SETTLED

    def test_leaves_round_with_pending_payouts(self) -> None:
        round_, (a, _) = _scenario()
        process_payout(round_, a)
        assert finalize_round(round_) is False
        assert round_.status == RoundStatus.SETTLING

    def test_requires_settling(self) -> None:
        with pytest.raises(RoundNotSettlingError):
            finalize_round(make_round())


class TestCalculatePayout:
    def test_no_losers_returns_principal(self) -> None:
        config = make_config()
        round_ = make_round()
        bet = place_bet(round_, config, 0, 1000, "a", None, 0).bet
        settle_round(round_, config, 50, ADMIN, 24 * HOUR)
        assert calculate_payout(round_, bet) == 975

    def test_zero_weighted_pool_pays_principal_only(self) -> None:
        round_ = make_round()
        round_.status = RoundStatus.SETTLING
        round_.winning_side = Side.LEFT
        round_.left_pool = 10
        round_.right_pool = 500
        bet = make_bet(amount=10, weight=0)
        assert calculate_payout(round_, bet) == 10

    def test_conservation_with_rounding(self) -> None:
        config = make_config(fee_bps=250, referrer_fee_bps=0)
        round_ = make_round()
        bets = [
            place_bet(round_, config, 0, 1000, "A", None, 0).bet,
            place_bet(round_, config, 1, 777, "B", None, HOUR).bet,
            place_bet(round_, config, 0, 333, "C", None, 5 * HOUR).bet,
        ]
        settle_round(round_, config, 1, ADMIN, 24 * HOUR)
        paid = [process_payout(round_, b).payout for b in bets]

        assert paid == [975 + 588, 0, 325 + 169]
        total = round_.total_pool
        assert sum(paid) <= total
        # floor dust is at most one lamport per winning bet
        assert total - sum(paid) < 2
        assert round_.status == RoundStatus.SETTLED


class TestQuote:
    def test_estimate_matches_real_payout_for_first_bettor(self) -> None:
        config = make_config(fee_bps=250, referrer_fee_bps=0)
        round_ = make_round()
        place_bet(round_, config, 1, 1000, "B", None, 0)

        estimate = estimate_payout(round_, config, Side.LEFT, 1000, False, 0)
        assert estimate.net_amount == 975
        assert estimate.weight == 150
        assert estimate.payout_if_win == 1950

    def test_implied_odds(self) -> None:
        round_ = make_round()
        round_.left_pool = 1000
        round_.right_pool = 3000
        assert implied_odds_bps(round_, Side.LEFT) == 40_000
        assert implied_odds_bps(round_, Side.RIGHT) == 13_333

    def test_implied_odds_empty_side(self) -> None:
        assert implied_odds_bps(make_round(), Side.LEFT) == 0
