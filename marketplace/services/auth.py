"""
Authentication service for registration, login, token refresh and token
to user resolution.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.user import UserRepository
from marketplace.models.user import User, UserRole, UserStatus
from marketplace.database import utcnow
from marketplace.schemas.auth import RegisterRequest
from marketplace.utils.auth import (
    create_access_token,
    create_refresh_token,
    verify_token
)
from marketplace.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveUserError,
    DuplicateResourceError,
    BadRequestError
)
from jose import JWTError
from jose.exceptions import ExpiredSignatureError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Manages user authentication flows and JWT issuance.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: RegisterRequest) -> User:
        """
        Create a regular account.

        Raises:
            DuplicateResourceError: The email is already registered
            BadRequestError: The email or password was rejected
        """
        if await self.user_repo.get_by_email(data.email):
            raise DuplicateResourceError("User", data.email)

        try:
            user = await self.user_repo.create_user({
                **data.model_dump(),
                "role": UserRole.USER,
                "status": UserStatus.ACTIVE,
            })
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"User registered: {user.email} (ID: {user.id})")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
            InactiveUserError: The account is disabled
        """
        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Login attempt on inactive account: {email}")
            raise InactiveUserError()

        return user

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """Access and refresh token pair for ``user``."""
        access_token = create_access_token(
            user_id=user.id,
            email=user.email,
            role=user.role
        )
        refresh_token = create_refresh_token(
            user_id=user.id,
            email=user.email
        )
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate, record the login time and issue tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        user = await self.user_repo.update(user, {"last_login": utcnow()})

        access_token, refresh_token = self.create_tokens(user)
        logger.info(f"User logged in: {user.email}")
        return user, access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Exchange a refresh token for a new access token.

        Raises:
            TokenExpiredError: The refresh token expired
            InvalidTokenError: Malformed token or unknown user
            InactiveUserError: The account was disabled since login
        """
        user = await self._user_from_token(refresh_token, "refresh")
        return create_access_token(user_id=user.id, email=user.email, role=user.role)

    async def get_current_user(self, token: str) -> User:
        """Resolve an access token to an active user."""
        return await self._user_from_token(token, "access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User no longer exists")

        if not user.is_active:
            raise InactiveUserError()

        return user
