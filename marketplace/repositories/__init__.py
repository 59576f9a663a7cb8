"""
Repository layer for data access operations.
"""

from marketplace.repositories.base import BaseRepository
from marketplace.repositories.user import UserRepository
from marketplace.repositories.category import CategoryRepository, LocationRepository
from marketplace.repositories.listing import ListingRepository, ListingSearchFilters
from marketplace.repositories.validation import ValidationRepository
from marketplace.repositories.message import (
    MessageRepository,
    FavoriteRepository,
    NotificationRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CategoryRepository",
    "LocationRepository",
    "ListingRepository",
    "ListingSearchFilters",
    "ValidationRepository",
    "MessageRepository",
    "FavoriteRepository",
    "NotificationRepository",
]
