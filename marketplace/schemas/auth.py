"""
Pydantic schemas for authentication requests and responses.
Handles registration, login and token refresh.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from marketplace.schemas.user import UserResponse, PHONE_PATTERN


class RegisterRequest(BaseModel):
    """Registration form."""

    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    email: EmailStr = Field(..., description="Email address, used as the login")
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN, description="Ten digit phone number")
    password: str = Field(..., min_length=8, max_length=128, description="Password (minimum 8 characters)")
    city: Optional[str] = Field(None, max_length=100)
    county: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        """Require at least one letter and one digit."""
        if not any(c.isalpha() for c in v):
            raise ValueError("Password must contain at least one letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one number")
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=128, description="User's password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., description="Valid refresh token")


class AccessTokenResponse(BaseModel):
    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Access token expiration time in seconds")


class LoginResponse(BaseModel):
    """Complete login response schema."""

    user: UserResponse
    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Access token expiration time in seconds")
