"""
Category browsing backed by a read-through cache.

The active category list changes only when the catalogue is seeded or edited,
so it is held by a ``CategoryCache`` for ``category_cache_ttl_seconds`` and
reloaded from the database on expiry or after ``invalidate()``. The cache is
handed to request handlers through a FastAPI dependency.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.repositories.category import CategoryRepository
from marketplace.schemas.category import CategoryResponse, CategoryTreeNode
from marketplace.utils.exceptions import NotFoundError
from typing import Callable, List, Optional
import asyncio
import time
import uuid
import logging

logger = logging.getLogger(__name__)


class CategoryCache:
    """Read-through TTL cache of the active category list."""

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._categories: Optional[List[CategoryResponse]] = None
        self._loaded_at = 0.0
        self._lock = asyncio.Lock()

    def _is_fresh(self) -> bool:
        return (
            self._categories is not None
            and self._clock() - self._loaded_at < self.ttl_seconds
        )

    async def get_all(self, db: AsyncSession) -> List[CategoryResponse]:
        """Cached categories, loading them with ``db`` when stale."""
        if self._is_fresh():
            return self._categories

        async with self._lock:
            if not self._is_fresh():
                rows = await CategoryRepository(db).list_active()
                self._categories = [CategoryResponse.model_validate(row) for row in rows]
                self._loaded_at = self._clock()
                logger.info(f"Category cache loaded {len(self._categories)} categories")

        return self._categories

    def invalidate(self) -> None:
        self._categories = None
        self._loaded_at = 0.0
        logger.debug("Category cache invalidated")


category_cache = CategoryCache(settings.category_cache_ttl_seconds)


def get_category_cache() -> CategoryCache:
    return category_cache


class CategoryService:

    def __init__(self, db_session: AsyncSession, cache: CategoryCache):
        self.db = db_session
        self.cache = cache

    async def list_categories(
        self,
        slug: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
        main_only: bool = False
    ) -> List[CategoryResponse]:
        """
        Active categories in display order.

        Args:
            slug: Keep only the category with this slug
            category_id: Keep only the category with this id
            main_only: Keep only top level categories
        """
        categories = await self.cache.get_all(self.db)

        if slug:
            categories = [c for c in categories if c.slug == slug]
        if category_id:
            categories = [c for c in categories if c.id == category_id]
        if main_only:
            categories = [c for c in categories if c.parent_id is None]

        return categories

    async def get_tree(self) -> List[CategoryTreeNode]:
        """Main categories with their subcategories nested."""
        categories = await self.cache.get_all(self.db)

        nodes = {
            c.id: CategoryTreeNode(**c.model_dump())
            for c in categories if c.parent_id is None
        }
        for category in categories:
            if category.parent_id is not None and category.parent_id in nodes:
                nodes[category.parent_id].subcategories.append(category)

        return list(nodes.values())

    async def get_by_slug(self, slug: str) -> CategoryResponse:
        matches = await self.list_categories(slug=slug)
        if not matches:
            raise NotFoundError("Category", slug)
        return matches[0]
