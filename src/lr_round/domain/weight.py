"""Early-bird weight for a bet, scaled by 100 (150 = 1.5x).

Tiers by whole hours elapsed since the round started:

    [0, 3)  -> 150
    [3, 6)  -> 130
    [6, 9)  -> 115
    [9, ∞)  -> 100

Bets stamped before start_time count as hour 0. Step tiers instead of a
continuous decay keep payout arithmetic in plain integers.
"""

SECONDS_PER_HOUR = 3600
WEIGHT_SCALE = 100

# (upper bound in whole hours, exclusive; weight)
WEIGHT_TIERS: tuple[tuple[int, int], ...] = (
    (3, 150),
    (6, 130),
    (9, 115),
)
BASE_WEIGHT = 100


def elapsed_hours(start_time: int, bet_time: int) -> int:
    return max(0, bet_time - start_time) // SECONDS_PER_HOUR


def calculate_weight(start_time: int, bet_time: int) -> int:
    hours = elapsed_hours(start_time, bet_time)
    for upper, weight in WEIGHT_TIERS:
        if hours < upper:
            return weight
    return BASE_WEIGHT
