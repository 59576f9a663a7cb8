"""
Database models for the classifieds marketplace.
Importing this package registers every table on the shared metadata.
"""

from marketplace.models.user import User, UserRole, UserStatus
from marketplace.models.category import Category
from marketplace.models.location import Location
from marketplace.models.listing import Listing, ListingStatus, ListingCondition, Currency
from marketplace.models.image import ListingImage
from marketplace.models.validation import ListingValidation
from marketplace.models.message import Message
from marketplace.models.favorite import Favorite
from marketplace.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Category",
    "Location",
    "Listing",
    "ListingStatus",
    "ListingCondition",
    "Currency",
    "ListingImage",
    "ListingValidation",
    "Message",
    "Favorite",
    "Notification",
    "NotificationType",
]
