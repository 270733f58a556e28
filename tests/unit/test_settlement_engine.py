"""Unit tests for settle_round."""

import pytest

from src.lr_betting.domain.service import place_bet
from src.lr_common.enums import RoundStatus, Side
from src.lr_common.errors import (
    RoundAlreadySettledError,
    RoundNotEndedError,
    UnauthorizedError,
)
from src.lr_settlement.domain.settlement import settle_round, winning_side_for
from tests.factories import ADMIN, HOUR, make_config, make_round


def _round_with_bets():
    round_ = make_round(start_price=100)
    config = make_config()
    place_bet(round_, config, 0, 1000, "alice", None, 0)
    place_bet(round_, config, 1, 2000, "bob", None, HOUR)
    return round_, config


class TestWinningSide:
    def test_lower_close_is_left(self) -> None:
        assert winning_side_for(100, 99) is Side.LEFT

    def test_higher_close_is_right(self) -> None:
        assert winning_side_for(100, 101) is Side.RIGHT

    def test_tie_goes_right(self) -> None:
        assert winning_side_for(100, 100) is Side.RIGHT
        assert winning_side_for(-5, -5) is Side.RIGHT


class TestSettleRound:
    def test_moves_to_settling_and_records_outcome(self) -> None:
        round_, config = _round_with_bets()
        event = settle_round(round_, config, 90, ADMIN, 24 * HOUR)

        assert round_.status == RoundStatus.SETTLING
        assert round_.end_price == 90
        assert round_.winning_side is Side.LEFT
        assert event.winning_side == int(Side.LEFT)
        assert event.total_pool == 975 + 1950
        assert event.winning_pool == 975

    def test_tie_settles_right(self) -> None:
        round_, config = _round_with_bets()
        settle_round(round_, config, 100, ADMIN, 24 * HOUR)
        assert round_.winning_side is Side.RIGHT

    def test_no_funds_move(self) -> None:
        round_, config = _round_with_bets()
        pools = (round_.left_pool, round_.right_pool, round_.payouts_processed)
        settle_round(round_, config, 90, ADMIN, 24 * HOUR)
        assert (round_.left_pool, round_.right_pool, round_.payouts_processed) == pools

    def test_admin_only(self) -> None:
        round_, config = _round_with_bets()
        with pytest.raises(UnauthorizedError):
            settle_round(round_, config, 90, "mallory", 24 * HOUR)
        assert round_.status == RoundStatus.OPEN

    def test_too_early(self) -> None:
        round_, config = _round_with_bets()
        with pytest.raises(RoundNotEndedError):
            settle_round(round_, config, 90, ADMIN, 24 * HOUR - 1)
        assert round_.winning_side is None

    @pytest.mark.parametrize("status", [RoundStatus.SETTLING, RoundStatus.SETTLED])
    def test_only_once(self, status: RoundStatus) -> None:
        round_, config = _round_with_bets()
        round_.status = status
        with pytest.raises(RoundAlreadySettledError):
            settle_round(round_, config, 90, ADMIN, 24 * HOUR)

    def test_locked_round_is_settleable(self) -> None:
        round_, config = _round_with_bets()
        round_.status = RoundStatus.LOCKED
        settle_round(round_, config, 90, ADMIN, 24 * HOUR)
        assert round_.status == RoundStatus.SETTLING

    def test_empty_round_still_moves_to_settling(self) -> None:
        round_ = make_round()
        event = settle_round(round_, make_config(), 90, ADMIN, 24 * HOUR)
        assert round_.status == RoundStatus.SETTLING
        assert round_.winning_side is Side.LEFT
        assert event.total_pool == 0
