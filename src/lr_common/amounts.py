"""Checked integer arithmetic for lamport-denominated amounts.

All stakes, fees, pools and balances are unsigned 64-bit integers (lamports).
Python ints never wrap, so every stored result is range-checked instead:
anything outside the unsigned range raises MathOverflowError rather than
producing a wrong monetary value. No float, no Decimal.
"""

from src.lr_common.errors import MathOverflowError

U64_MAX = (1 << 64) - 1
U32_MAX = (1 << 32) - 1
I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

BPS_DENOMINATOR = 10_000
LAMPORTS_PER_SOL = 1_000_000_000


def ensure_u64(value: int, what: str = "value") -> int:
    if not (0 <= value <= U64_MAX):
        raise MathOverflowError(f"{what} out of u64 range: {value}")
    return value


def checked_add(a: int, b: int, limit: int = U64_MAX) -> int:
    """a + b, failing if the sum leaves [0, limit]."""
    total = a + b
    if not (0 <= total <= limit):
        raise MathOverflowError(f"Arithmetic overflow: {a} + {b}")
    return total


def checked_sub(a: int, b: int) -> int:
    """a - b, failing on underflow."""
    diff = a - b
    if diff < 0:
        raise MathOverflowError(f"Arithmetic underflow: {a} - {b}")
    return diff


def mul_div(value: int, numerator: int, denominator: int) -> int:
    """floor(value * numerator / denominator) with a widened intermediate.

    The product may exceed u64 (it is an unbounded int here, a u128 in the
    on-chain original); only the quotient has to fit.
    """
    if denominator <= 0:
        raise MathOverflowError(f"Division by non-positive denominator: {denominator}")
    if value < 0 or numerator < 0:
        raise MathOverflowError(f"Negative operand: {value} * {numerator}")
    return ensure_u64((value * numerator) // denominator, "quotient")


def lamports_to_display(lamports: int) -> str:
    """Convert lamports to a SOL string: 1_500_000_000 -> '1.5 SOL'."""
    sign = "-" if lamports < 0 else ""
    whole, frac = divmod(abs(lamports), LAMPORTS_PER_SOL)
    frac_str = f"{frac:09d}".rstrip("0")
    if frac_str:
        return f"{sign}{whole:,}.{frac_str} SOL"
    return f"{sign}{whole:,} SOL"
