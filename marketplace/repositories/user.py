"""
User repository for authentication and user management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from marketplace.repositories.base import BaseRepository
from marketplace.models.user import User, UserRole, UserStatus
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any], commit: bool = True) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Must include email and either password or hashed_password
            commit: Commit immediately or only flush

        Returns:
            Created user instance

        Raises:
            ValueError: If the email is invalid or already registered
        """
        data = dict(user_data)
        email = User.validate_email_format(data.pop("email"))

        if await self.get_by_email(email):
            raise ValueError(f"User with email {email} already exists")

        password = data.pop("password", None)
        if password is not None:
            data["hashed_password"] = User.hash_password(password)
        elif "hashed_password" not in data:
            data["hashed_password"] = User.random_password_hash()

        data.setdefault("role", UserRole.USER)
        data.setdefault("status", UserStatus.ACTIVE)

        created_user = await self.create({**data, "email": email}, commit=commit)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)."""
        normalized_email = email.lower().strip()
        result = await self.db.execute(select(User).where(User.email == normalized_email))
        return result.scalar_one_or_none()

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User instance if the password matches, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def search_users(
        self,
        skip: int = 0,
        limit: int = 10,
        filter_by: Optional[str] = None,
        search: Optional[str] = None
    ) -> Tuple[List[User], int]:
        """
        Paginated user listing for the back-office.

        Args:
            filter_by: "active", "inactive" or "admin"
            search: Matches first name, last name or email
        """
        conditions = []
        if filter_by == "active":
            conditions.append(User.status == UserStatus.ACTIVE)
        elif filter_by == "inactive":
            conditions.append(User.status == UserStatus.INACTIVE)
        elif filter_by == "admin":
            conditions.append(User.role == UserRole.ADMIN)

        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
            ))

        query = select(User).where(*conditions).order_by(User.created_at.desc())
        count_query = select(func.count(User.id)).where(*conditions)

        total = (await self.db.execute(count_query)).scalar() or 0
        result = await self.db.execute(query.offset(skip).limit(limit))
        return list(result.scalars().all()), total

    async def count_created_since(self, since: datetime) -> int:
        result = await self.db.execute(select(func.count(User.id)).where(User.created_at >= since))
        return result.scalar() or 0

    async def recent(self, limit: int = 10, since: Optional[datetime] = None) -> List[User]:
        query = select(User)
        if since is not None:
            query = query.where(User.created_at >= since)
        result = await self.db.execute(query.order_by(User.created_at.desc()).limit(limit))
        return list(result.scalars().all())
