"""
Category and location repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marketplace.repositories.base import BaseRepository
from marketplace.models.category import Category
from marketplace.models.location import Location
from typing import Optional, List
import logging

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):

    def __init__(self, db: AsyncSession):
        super().__init__(Category, db)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        return await self.get_by_field("slug", slug)

    async def list_active(self) -> List[Category]:
        """Active categories ordered for display."""
        result = await self.db.execute(
            select(Category)
            .where(Category.is_active.is_(True))
            .order_by(Category.order, Category.name)
        )
        return list(result.scalars().all())


class LocationRepository(BaseRepository[Location]):

    def __init__(self, db: AsyncSession):
        super().__init__(Location, db)

    async def get_or_create(self, county: str, city: str, commit: bool = True) -> Location:
        """
        Upsert on the unique (county, city) pair.

        Args:
            county: County name
            city: City name
            commit: Commit immediately or only flush

        Returns:
            Existing or newly created location
        """
        county = county.strip()
        city = city.strip()

        result = await self.db.execute(
            select(Location).where(Location.county == county, Location.city == city)
        )
        location = result.scalar_one_or_none()
        if location:
            return location

        logger.debug(f"Creating location {city}, {county}")
        return await self.create({"county": county, "city": city}, commit=commit)
