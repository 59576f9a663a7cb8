"""
Service layer for business logic implementation.
Contains services for authentication, listings, messaging, administration and error handling.
"""

from .auth import AuthService
from .listing import ListingService
from .category import CategoryService, CategoryCache
from .message import MessageService, FavoriteService
from .notification import NotificationService
from .admin import AdminService
from .user import UserService
from .upload import UploadService
from .email import EmailService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "ListingService",
    "CategoryService",
    "CategoryCache",
    "MessageService",
    "FavoriteService",
    "NotificationService",
    "AdminService",
    "UserService",
    "UploadService",
    "EmailService",
    "ErrorHandlerService"
]
