"""Config rules: parameter validation, initialization, admin-only updates."""

from src.lr_common.amounts import BPS_DENOMINATOR, U64_MAX
from src.lr_common.errors import (
    InvalidBetLimitsError,
    InvalidFeeBpsError,
    UnauthorizedError,
)
from src.lr_common.events import ConfigUpdated
from src.lr_config.domain.models import GameConfig


def validate_params(
    fee_bps: int, referrer_fee_bps: int, min_bet: int, max_bet: int
) -> None:
    """Enforce 0 <= referrer_fee_bps <= fee_bps <= 10000 and min_bet < max_bet."""
    if not (0 <= referrer_fee_bps <= fee_bps <= BPS_DENOMINATOR):
        raise InvalidFeeBpsError(fee_bps, referrer_fee_bps)
    if not (0 <= min_bet < max_bet <= U64_MAX):
        raise InvalidBetLimitsError(min_bet, max_bet)


def require_admin(config: GameConfig, caller: str) -> None:
    if caller != config.admin:
        raise UnauthorizedError()


def initialize_config(
    admin: str,
    treasury: str,
    fee_bps: int,
    referrer_fee_bps: int,
    min_bet: int,
    max_bet: int,
) -> tuple[GameConfig, ConfigUpdated]:
    """Create the singleton config; the caller becomes admin."""
    validate_params(fee_bps, referrer_fee_bps, min_bet, max_bet)
    config = GameConfig(
        admin=admin,
        fee_bps=fee_bps,
        referrer_fee_bps=referrer_fee_bps,
        min_bet=min_bet,
        max_bet=max_bet,
        treasury=treasury,
        round_counter=0,
        version=1,
    )
    return config, _config_updated(config)


def update_config(
    config: GameConfig,
    caller: str,
    fee_bps: int | None = None,
    referrer_fee_bps: int | None = None,
    min_bet: int | None = None,
    max_bet: int | None = None,
    treasury: str | None = None,
) -> ConfigUpdated:
    """Apply a partial update. Validates the merged result before mutating."""
    require_admin(config, caller)
    new_fee = config.fee_bps if fee_bps is None else fee_bps
    new_ref = config.referrer_fee_bps if referrer_fee_bps is None else referrer_fee_bps
    new_min = config.min_bet if min_bet is None else min_bet
    new_max = config.max_bet if max_bet is None else max_bet
    validate_params(new_fee, new_ref, new_min, new_max)

    config.fee_bps = new_fee
    config.referrer_fee_bps = new_ref
    config.min_bet = new_min
    config.max_bet = new_max
    if treasury is not None:
        config.treasury = treasury
    config.version += 1
    return _config_updated(config)


def _config_updated(config: GameConfig) -> ConfigUpdated:
    return ConfigUpdated(
        fee_bps=config.fee_bps,
        referrer_fee_bps=config.referrer_fee_bps,
        min_bet=config.min_bet,
        max_bet=config.max_bet,
        version=config.version,
    )
