"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account (custody)
  3xxx: Game config
  4xxx: Round
  5xxx: Bet / payout
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class UnauthorizedError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Unauthorized: only admin can perform this action", 403)


# --- 2xxx: Account ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            422,
        )


class AccountNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Account not found for user {user_id}", 404)


# --- 3xxx: Game config ---

class InvalidFeeBpsError(AppError):
    def __init__(self, fee_bps: int, referrer_fee_bps: int) -> None:
        super().__init__(
            3001,
            f"Fee basis points must satisfy 0 <= referrer ({referrer_fee_bps})"
            f" <= fee ({fee_bps}) <= 10000",
            422,
        )


class InvalidBetLimitsError(AppError):
    def __init__(self, min_bet: int, max_bet: int) -> None:
        super().__init__(
            3002,
            f"Minimum bet must be less than maximum bet: min={min_bet}, max={max_bet}",
            422,
        )


class ConfigNotInitializedError(AppError):
    def __init__(self) -> None:
        super().__init__(3003, "Game config has not been initialized", 404)


class ConfigAlreadyInitializedError(AppError):
    def __init__(self) -> None:
        super().__init__(3004, "Game config is already initialized", 409)


# --- 4xxx: Round ---

class RoundNotFoundError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4001, f"Round not found: {round_id}", 404)


class InvalidAssetSymbolError(AppError):
    def __init__(self, symbol: str) -> None:
        super().__init__(4002, f"Invalid asset symbol: {symbol!r}", 422)


class RoundNotOpenError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4003, f"Round {round_id} is not accepting bets", 422)


class BettingPeriodEndedError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4004, f"Round {round_id} betting period has ended", 422)


class RoundNotEndedError(AppError):
    def __init__(self, round_id: int, end_time: int) -> None:
        super().__init__(
            4005, f"Round {round_id} has not ended yet (ends at {end_time})", 422
        )


class RoundAlreadySettledError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4006, f"Round {round_id} has already been settled", 409)


class RoundNotSettlingError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4007, f"Round {round_id} is not in settling state", 422)


class NoBetsToSettleError(AppError):
    def __init__(self, round_id: int) -> None:
        super().__init__(4008, f"Round {round_id} has no bets to settle", 422)


# --- 5xxx: Bet / payout ---

class InvalidSideError(AppError):
    def __init__(self, side: object) -> None:
        super().__init__(
            5001, f"Invalid side {side!r}: must be 0 (LEFT) or 1 (RIGHT)", 422
        )


class BetTooSmallError(AppError):
    def __init__(self, amount: int, min_bet: int) -> None:
        super().__init__(5002, f"Bet amount {amount} is below minimum {min_bet}", 422)


class BetTooLargeError(AppError):
    def __init__(self, amount: int, max_bet: int) -> None:
        super().__init__(5003, f"Bet amount {amount} exceeds maximum {max_bet}", 422)


class BetNotFoundError(AppError):
    def __init__(self, round_id: int, bet_index: int) -> None:
        super().__init__(
            5004, f"Bet not found: round={round_id} index={bet_index}", 404
        )


class PayoutAlreadyProcessedError(AppError):
    def __init__(self, round_id: int, bet_index: int) -> None:
        super().__init__(
            5005,
            f"Payout already processed for bet {bet_index} in round {round_id}",
            409,
        )


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class MathOverflowError(AppError):
    def __init__(self, detail: str = "Arithmetic overflow") -> None:
        super().__init__(9003, detail, 422)
