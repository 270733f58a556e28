"""Tests for lr_common.enums — values must match DB CHECK constraints."""

import pytest

from src.lr_common.enums import (
    EventType,
    LedgerEntryType,
    RoundStatus,
    Side,
    parse_side,
)
from src.lr_common.errors import InvalidSideError


class TestRoundStatus:
    def test_is_str(self) -> None:
        assert isinstance(RoundStatus.OPEN, str)
        assert RoundStatus.SETTLING == "SETTLING"

    def test_all_values(self) -> None:
        expected = {"OPEN", "LOCKED", "SETTLING", "SETTLED"}
        assert {s.value for s in RoundStatus} == expected


class TestSide:
    def test_discriminants(self) -> None:
        assert int(Side.LEFT) == 0
        assert int(Side.RIGHT) == 1

    @pytest.mark.parametrize(("raw", "side"), [(0, Side.LEFT), (1, Side.RIGHT)])
    def test_parse(self, raw: int, side: Side) -> None:
        assert parse_side(raw) is side

    @pytest.mark.parametrize("raw", [2, -1, 255, False, 1.0, "LEFT", None])
    def test_parse_rejects(self, raw: object) -> None:
        with pytest.raises(InvalidSideError):
            parse_side(raw)


class TestLedgerEntryType:
    def test_all_values(self) -> None:
        expected = {
            "DEPOSIT", "WITHDRAW",
            "BET_STAKE", "VAULT_IN",
            "TREASURY_FEE", "TREASURY_FEE_REVENUE",
            "REFERRER_FEE", "REFERRER_FEE_REVENUE",
            "VAULT_OUT", "PAYOUT",
        }
        assert {t.value for t in LedgerEntryType} == expected


class TestEventType:
    def test_all_values(self) -> None:
        expected = {
            "CONFIG_UPDATED", "ROUND_STARTED", "BET_PLACED",
            "REFERRER_PAID", "ROUND_SETTLED", "PAYOUT_PROCESSED",
        }
        assert {t.value for t in EventType} == expected
