"""
Pydantic schemas for user requests and responses.
Handles registration, profile updates and back-office user management.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from marketplace.models.user import UserRole, UserStatus
import uuid

PHONE_PATTERN = r"^[0-9]{10}$"


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not value.strip():
        raise ValueError("Name cannot be empty")
    return value.strip()


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    role: UserRole
    status: UserStatus
    notify_email: bool = True
    notify_phone: bool = False
    email_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: datetime


class PublicUserResponse(BaseModel):
    """What anyone may see about a user."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    status: UserStatus


class SellerResponse(PublicUserResponse):
    """Seller contact details shown on a listing."""

    email: str
    phone: Optional[str] = None


class ProfileUpdate(BaseModel):
    """Profile edit form. First and last name are always required."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="Ten digits, e.g. 0712345678")
    city: Optional[str] = Field(None, max_length=100)
    county: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    notify_email: Optional[bool] = None
    notify_phone: Optional[bool] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v):
        return _clean_name(v)

    @field_validator("phone", mode="before")
    @classmethod
    def empty_phone_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class AdminUserCreate(BaseModel):
    """Back-office account creation."""

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: UserRole = UserRole.USER
    status: UserStatus = UserStatus.ACTIVE

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v):
        return _clean_name(v)


class AdminUserUpdate(BaseModel):
    """Back-office account edit; omitted fields are left unchanged."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v):
        return _clean_name(v)


class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    page: int
    limit: int
    total_pages: int
