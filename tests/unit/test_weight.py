"""Unit tests for the early-bird weight tiers."""

import pytest

from src.lr_round.domain.weight import calculate_weight, elapsed_hours


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, 150),
        (int(2.999 * 3600), 150),
        (3 * 3600, 130),
        (int(5.999 * 3600), 130),
        (6 * 3600, 115),
        (int(8.999 * 3600), 115),
        (9 * 3600, 100),
        (100 * 3600, 100),
    ],
)
def test_tier_boundaries(seconds: int, expected: int) -> None:
    assert calculate_weight(1_000, 1_000 + seconds) == expected


def test_bet_before_start_counts_as_hour_zero() -> None:
    assert elapsed_hours(10_000, 9_000) == 0
    assert calculate_weight(10_000, 9_000) == 150


def test_one_second_before_boundary_stays_in_upper_tier() -> None:
    assert calculate_weight(0, 3 * 3600 - 1) == 150
    assert calculate_weight(0, 9 * 3600 - 1) == 115
