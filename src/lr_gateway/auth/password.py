"""Password hashing with the ``bcrypt`` library (>=4.0), used directly."""

import bcrypt

_ENCODING = "utf-8"


def hash_password(plain: str) -> str:
    """Hash a plain-text password with a fresh random salt."""
    return bcrypt.hashpw(plain.encode(_ENCODING), bcrypt.gensalt()).decode(_ENCODING)


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(_ENCODING), hashed.encode(_ENCODING))
