"""User domain service: register, login, refresh."""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lr_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    UsernameExistsError,
)
from src.lr_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.lr_gateway.auth.password import hash_password, verify_password
from src.lr_gateway.user.db_models import UserModel

_CREATE_ACCOUNT_SQL = text(
    "INSERT INTO accounts (user_id, available_balance, version) "
    "VALUES (:user_id, 0, 0) ON CONFLICT (user_id) DO NOTHING"
)


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> UserModel:
        """Register a user and open their custody account in one transaction.

        The caller must wrap this in `async with db.begin()`.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        result = await db.execute(
            select(UserModel).where(UserModel.email == email)
        )
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.flush()  # assigns user.id

        await db.execute(_CREATE_ACCOUNT_SQL, {"user_id": user.identity})
        return user

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown user and wrong password raise the same error.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(user.identity),
            create_refresh_token(user.identity),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate a refresh token and return a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
