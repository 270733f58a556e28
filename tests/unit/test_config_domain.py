"""Unit tests for config validation, initialization and updates."""

import pytest

from src.lr_common.errors import (
    InvalidBetLimitsError,
    InvalidFeeBpsError,
    UnauthorizedError,
)
from src.lr_config.domain.service import initialize_config, update_config, validate_params
from tests.factories import ADMIN, make_config


class TestValidateParams:
    @pytest.mark.parametrize(
        ("fee", "ref"), [(0, 0), (250, 50), (250, 250), (10_000, 10_000)]
    )
    def test_valid_fees(self, fee: int, ref: int) -> None:
        validate_params(fee, ref, 1, 2)

    @pytest.mark.parametrize(("fee", "ref"), [(10_001, 0), (100, 101), (-1, 0), (100, -1)])
    def test_invalid_fees(self, fee: int, ref: int) -> None:
        with pytest.raises(InvalidFeeBpsError):
            validate_params(fee, ref, 1, 2)

    @pytest.mark.parametrize(("lo", "hi"), [(5, 5), (6, 5), (-1, 5)])
    def test_invalid_limits(self, lo: int, hi: int) -> None:
        with pytest.raises(InvalidBetLimitsError):
            validate_params(250, 50, lo, hi)

    def test_zero_min_bet_allowed(self) -> None:
        validate_params(250, 50, 0, 1)


class TestInitialize:
    def test_caller_becomes_admin(self) -> None:
        config, event = initialize_config("boss", "vault-treasury", 250, 50, 1, 1000)
        assert config.admin == "boss"
        assert config.treasury == "vault-treasury"
        assert config.round_counter == 0
        assert event.fee_bps == 250
        assert event.version == 1


class TestUpdate:
    def test_partial_update(self) -> None:
        config = make_config()
        event = update_config(config, ADMIN, min_bet=10, treasury="t2")
        assert config.min_bet == 10
        assert config.treasury == "t2"
        assert config.fee_bps == 250
        assert config.version == 2
        assert event.min_bet == 10

    def test_non_admin(self) -> None:
        config = make_config()
        with pytest.raises(UnauthorizedError):
            update_config(config, "mallory", fee_bps=0)
        assert config.fee_bps == 250

    def test_merged_result_validated_before_mutation(self) -> None:
        config = make_config(fee_bps=250, referrer_fee_bps=50)
        # lowering fee below the existing referrer cut is invalid
        with pytest.raises(InvalidFeeBpsError):
            update_config(config, ADMIN, fee_bps=10)
        assert config.fee_bps == 250
        assert config.version == 1

    def test_round_counter_untouched(self) -> None:
        config = make_config(round_counter=9)
        update_config(config, ADMIN, max_bet=5_000)
        assert config.round_counter == 9
