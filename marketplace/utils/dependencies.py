"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.database import get_db
from marketplace.models.user import User, UserRole
from marketplace.services.auth import AuthService
from marketplace.services.listing import ListingService
from marketplace.services.category import CategoryService, CategoryCache, get_category_cache
from marketplace.services.message import MessageService, FavoriteService
from marketplace.services.notification import NotificationService
from marketplace.services.admin import AdminService
from marketplace.services.user import UserService
from marketplace.services.email import EmailService, get_email_service
from marketplace.services.upload import UploadService, get_upload_service
from marketplace.utils.exceptions import (
    UnauthorizedError,
    InactiveUserError,
    InsufficientPermissionsError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_listing_service(
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service)
) -> ListingService:
    return ListingService(db, email_service)


async def get_category_service(
    db: AsyncSession = Depends(get_db),
    cache: CategoryCache = Depends(get_category_cache)
) -> CategoryService:
    return CategoryService(db, cache)


async def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    return MessageService(db)


async def get_favorite_service(db: AsyncSession = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


async def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


async def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


async def get_user_service(
    db: AsyncSession = Depends(get_db),
    upload_service: UploadService = Depends(get_upload_service)
) -> UserService:
    return UserService(db, upload_service)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        TokenExpiredError: If token is expired
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(credentials.credentials)


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise InactiveUserError()

    return current_user


async def get_current_admin_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Get current user with admin role.

    Raises:
        InsufficientPermissionsError: If user is not an admin
    """
    if current_user.role != UserRole.ADMIN:
        raise InsufficientPermissionsError("access admin resources")

    return current_user


async def get_current_staff_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """Admins and moderators; used for listing moderation."""
    if not current_user.is_staff:
        raise InsufficientPermissionsError("moderate listings")

    return current_user


# Optional authentication dependency (for public endpoints that can benefit from user context)
async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if a valid token is provided, otherwise None.
    An invalid or expired token is treated as no token.
    """
    if not credentials:
        return None

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except UnauthorizedError:
        return None
