"""
User model with authentication, profile and role management.
Accounts are created by registration, by an admin, or implicitly on a first listing submission.
"""

from sqlalchemy import String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from marketplace.database import Base
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from datetime import datetime
from typing import Optional
import enum
import secrets
import uuid

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """User role enumeration for role-based access control."""
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


class UserStatus(str, enum.Enum):
    """Account status."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class User(Base):
    """
    User model for authentication, authorization and public profile data.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # Profile
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    county: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    avatar: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Role and status
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        nullable=False,
        default=UserRole.USER,
        index=True
    )

    status: Mapped[UserStatus] = mapped_column(
        SQLEnum(UserStatus),
        nullable=False,
        default=UserStatus.ACTIVE,
        index=True
    )

    # Notification preferences
    notify_email: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notify_phone: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Raises:
            ValueError: If the password is shorter than 8 characters
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    @classmethod
    def random_password_hash(cls) -> str:
        """Hash of a random password for accounts created without one."""
        return pwd_context.hash(secrets.token_urlsafe(16))

    def verify_password(self, password: str) -> bool:
        return pwd_context.verify(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        self.hashed_password = self.hash_password(password)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        """Admins and moderators may manage any listing."""
        return self.role in (UserRole.ADMIN, UserRole.MODERATOR)

    def can_manage_listing(self, listing_owner_id: uuid.UUID) -> bool:
        """
        Check if user can edit or delete a listing.

        Args:
            listing_owner_id: UUID of the listing's owner

        Returns:
            True for the owner and for admins
        """
        if self.is_admin:
            return True

        return self.id == listing_owner_id
