"""JWT token creation and verification — the service's `isSigner` check.

A request is signed by identity X when it carries a valid, unexpired access
token whose `sub` claim is X. HS256 with a single shared JWT_SECRET.
No revocation: tokens stay valid until expiry.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.lr_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _issue(user_id: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: str) -> str:
    """Issue a short-lived access token (default: 30 min)."""
    return _issue(user_id, "access", _ACCESS_EXPIRE)


def create_refresh_token(user_id: str) -> str:
    """Issue a long-lived refresh token (default: 7 days)."""
    return _issue(user_id, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh". A token of the other type is
                       rejected even when its signature is valid.

    Raises:
        InvalidCredentialsError: invalid/expired token, expected_type="access".
        InvalidRefreshTokenError: invalid/expired token, expected_type="refresh".
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],
        )
    except JWTError:
        raise _auth_error(expected_type) from None

    if payload.get("type") != expected_type:
        raise _auth_error(expected_type)
    return payload


def _auth_error(expected_type: str) -> Exception:
    if expected_type == "access":
        return InvalidCredentialsError()
    return InvalidRefreshTokenError()
