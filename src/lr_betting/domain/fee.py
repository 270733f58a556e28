"""Fee split taken from a gross bet at placement time.

    treasury_fee = floor(gross * fee_bps / 10000)
    referrer_fee = floor(gross * referrer_fee_bps / 10000)   (referrer only)
    net_amount   = gross - treasury_fee - referrer_fee

Fees are paid out immediately and never revisited at settlement or payout.
"""

from src.lr_account.domain.models import VAULT_PREFIX
from src.lr_betting.domain.models import FeeSplit
from src.lr_common.amounts import BPS_DENOMINATOR, checked_sub, ensure_u64, mul_div


def resolve_referrer(referrer: str | None, bettor: str) -> str | None:
    """Drop self-referral and round vaults silently: no fee, no error.

    Vault balances must stay equal to pool - paid.
    """
    if referrer is None or referrer == bettor or referrer.startswith(VAULT_PREFIX):
        return None
    return referrer


def split_fees(
    gross_amount: int,
    fee_bps: int,
    referrer_fee_bps: int,
    has_referrer: bool,
) -> FeeSplit:
    ensure_u64(gross_amount, "gross_amount")
    treasury_fee = mul_div(gross_amount, fee_bps, BPS_DENOMINATOR)
    referrer_fee = (
        mul_div(gross_amount, referrer_fee_bps, BPS_DENOMINATOR) if has_referrer else 0
    )
    net_amount = checked_sub(checked_sub(gross_amount, treasury_fee), referrer_fee)
    return FeeSplit(
        treasury_fee=treasury_fee,
        referrer_fee=referrer_fee,
        net_amount=net_amount,
    )
