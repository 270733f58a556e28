"""Unit tests for place_bet: preconditions, pool accounting, transfers, events."""

import pytest

from src.lr_betting.domain.service import place_bet
from src.lr_common.amounts import U32_MAX, U64_MAX
from src.lr_common.enums import LedgerEntryType, RoundStatus, Side
from src.lr_common.errors import (
    BetTooLargeError,
    BetTooSmallError,
    BettingPeriodEndedError,
    InvalidSideError,
    MathOverflowError,
    RoundNotOpenError,
)
from src.lr_common.events import BetPlaced, ReferrerPaid
from tests.factories import HOUR, TREASURY, make_config, make_round


class TestPreconditions:
    def test_invalid_side_checked_first(self) -> None:
        round_ = make_round()
        round_.status = RoundStatus.SETTLED
        with pytest.raises(InvalidSideError):
            place_bet(round_, make_config(), 2, 0, "alice", None, 99 * HOUR)

    @pytest.mark.parametrize("side", [-1, 2, True, "0", None])
    def test_rejects_non_side_values(self, side: object) -> None:
        with pytest.raises(InvalidSideError):
            place_bet(make_round(), make_config(), side, 1000, "alice", None, 0)

    @pytest.mark.parametrize(
        "status", [RoundStatus.LOCKED, RoundStatus.SETTLING, RoundStatus.SETTLED]
    )
    def test_round_must_be_open(self, status: RoundStatus) -> None:
        round_ = make_round()
        round_.status = status
        # betting window also closed and amount too small: status wins
        with pytest.raises(RoundNotOpenError):
            place_bet(round_, make_config(min_bet=10), 0, 1, "alice", None, 13 * HOUR)

    def test_betting_window_is_exclusive_at_end(self) -> None:
        round_ = make_round()
        with pytest.raises(BettingPeriodEndedError):
            place_bet(round_, make_config(), 0, 1000, "alice", None, round_.betting_end_time)

    def test_last_second_of_window_accepted(self) -> None:
        round_ = make_round()
        placement = place_bet(
            round_, make_config(), 0, 1000, "alice", None, round_.betting_end_time - 1
        )
        assert placement.bet.weight == 100

    def test_bet_too_small(self) -> None:
        with pytest.raises(BetTooSmallError):
            place_bet(make_round(), make_config(min_bet=100), 0, 99, "alice", None, 0)

    def test_bet_too_large(self) -> None:
        with pytest.raises(BetTooLargeError):
            place_bet(make_round(), make_config(max_bet=1000), 0, 1001, "alice", None, 0)

    def test_limits_are_inclusive(self) -> None:
        config = make_config(min_bet=100, max_bet=1000)
        place_bet(make_round(), config, 0, 100, "alice", None, 0)
        place_bet(make_round(), config, 1, 1000, "alice", None, 0)


class TestAccounting:
    def test_pools_and_bet_record(self) -> None:
        round_ = make_round()
        placement = place_bet(round_, make_config(), Side.LEFT, 1000, "alice", None, 0)

        bet = placement.bet
        assert bet.amount == 975
        assert bet.original_amount == 1000
        assert bet.weight == 150
        assert bet.weighted_amount == 1462
        assert bet.bet_index == 0
        assert bet.paid_out is False
        assert round_.left_pool == 975
        assert round_.left_weighted_pool == 1462
        assert round_.right_pool == 0
        assert round_.bet_count == 1

    def test_bet_index_is_sequential(self) -> None:
        round_ = make_round()
        config = make_config()
        indices = [
            place_bet(round_, config, i % 2, 1000, f"u{i}", None, 4 * HOUR).bet.bet_index
            for i in range(4)
        ]
        assert indices == [0, 1, 2, 3]
        assert round_.bet_count == 4
        assert round_.left_pool == round_.right_pool == 2 * 975
        assert round_.right_weighted_pool == 2 * (975 * 130 // 100)

    def test_transfers_fee_first_then_vault(self) -> None:
        round_ = make_round(round_id=7)
        placement = place_bet(round_, make_config(), 1, 1000, "alice", "bob", 0)

        kinds = [(t.to_id, t.amount, t.debit_type) for t in placement.transfers]
        assert kinds == [
            (TREASURY, 25, LedgerEntryType.TREASURY_FEE),
            ("bob", 5, LedgerEntryType.REFERRER_FEE),
            ("VAULT:7", 970, LedgerEntryType.BET_STAKE),
        ]
        assert all(t.from_id == "alice" for t in placement.transfers)
        assert sum(t.amount for t in placement.transfers) == 1000

    def test_events(self) -> None:
        placement = place_bet(make_round(), make_config(), 0, 1000, "alice", "bob", 0)
        placed, paid = placement.events
        assert isinstance(placed, BetPlaced)
        assert (placed.original_amount, placed.amount) == (1000, 970)
        assert (placed.treasury_fee, placed.referrer_fee) == (25, 5)
        assert placed.referrer == "bob"
        assert isinstance(paid, ReferrerPaid)
        assert (paid.referrer, paid.amount) == ("bob", 5)

    def test_self_referral_keeps_fee_in_stake(self) -> None:
        round_ = make_round()
        placement = place_bet(round_, make_config(), 0, 1000, "alice", "alice", 0)

        assert placement.fees.referrer_fee == 0
        assert placement.bet.referrer is None
        assert placement.bet.amount == 975
        assert [t.to_id for t in placement.transfers] == [TREASURY, "VAULT:0"]
        # treasury still gets exactly its own rate, nothing more
        assert placement.transfers[0].amount == 25
        assert not any(isinstance(e, ReferrerPaid) for e in placement.events)

    def test_vault_referrer_keeps_fee_in_stake(self) -> None:
        round_ = make_round()
        placement = place_bet(round_, make_config(), 0, 10_000, "alice", "VAULT:0", 0)

        assert [t.to_id for t in placement.transfers] == [TREASURY, "VAULT:0"]
        assert placement.transfers[1].amount == 9750
        assert round_.left_pool == 9750
        assert placement.bet.referrer is None
        assert not any(isinstance(e, ReferrerPaid) for e in placement.events)

    def test_zero_fee_config_moves_only_stake(self) -> None:
        placement = place_bet(
            make_round(), make_config(fee_bps=0, referrer_fee_bps=0), 0, 1000, "a", "b", 0
        )
        assert [t.amount for t in placement.transfers] == [1000]
        assert len(placement.events) == 1


class TestAtomicity:
    def test_pool_overflow_leaves_round_untouched(self) -> None:
        round_ = make_round()
        round_.left_pool = U64_MAX - 10
        with pytest.raises(MathOverflowError):
            place_bet(round_, make_config(), 0, 1000, "alice", None, 0)
        assert round_.left_pool == U64_MAX - 10
        assert round_.left_weighted_pool == 0
        assert round_.bet_count == 0

    def test_weighted_pool_overflow_leaves_round_untouched(self) -> None:
        round_ = make_round()
        round_.right_weighted_pool = U64_MAX
        with pytest.raises(MathOverflowError):
            place_bet(round_, make_config(), 1, 1000, "alice", None, 0)
        assert round_.right_pool == 0
        assert round_.bet_count == 0

    def test_bet_count_is_u32(self) -> None:
        round_ = make_round()
        round_.bet_count = U32_MAX
        with pytest.raises(MathOverflowError):
            place_bet(round_, make_config(), 0, 1000, "alice", None, 0)
        assert round_.left_pool == 0
