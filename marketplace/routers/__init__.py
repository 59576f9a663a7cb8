"""
API route handlers for the classifieds marketplace.
"""

from .auth import router as auth_router
from .listings import router as listings_router
from .search import router as search_router
from .categories import router as categories_router, locations_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .favorites import router as favorites_router
from .users import router as users_router
from .misc import router as misc_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "listings_router",
    "search_router",
    "categories_router",
    "locations_router",
    "messages_router",
    "notifications_router",
    "favorites_router",
    "users_router",
    "misc_router",
    "admin_router",
]
