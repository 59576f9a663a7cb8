"""
Listing repository: search, detail loading, image sets and cascading deletes.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func, or_, desc, asc
from sqlalchemy.orm import selectinload, aliased
from marketplace.repositories.base import BaseRepository
from marketplace.models.listing import Listing, ListingStatus
from marketplace.models.image import ListingImage
from marketplace.models.category import Category
from marketplace.models.location import Location
from marketplace.models.favorite import Favorite
from marketplace.models.message import Message
from marketplace.models.notification import Notification, NotificationType
from marketplace.models.validation import ListingValidation
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("price_asc", "price_desc", "popular", "recent")


class ListingSearchFilters:
    """Data class for listing search filters."""

    def __init__(
        self,
        query: Optional[str] = None,
        category_slug: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        city: Optional[str] = None,
        county: Optional[str] = None,
        sort_by: str = "recent",
        premium_only: bool = False,
        statuses: Optional[List[ListingStatus]] = None,
        limit: int = 100
    ):
        self.query = query
        self.category_slug = category_slug
        self.min_price = min_price
        self.max_price = max_price
        self.city = city
        self.county = county
        self.sort_by = sort_by if sort_by in SORT_OPTIONS else "recent"
        self.premium_only = premium_only
        self.statuses = statuses or [ListingStatus.ACTIVE]
        self.limit = limit


class ListingRepository(BaseRepository[Listing]):
    """
    Repository for listings. Relationship loading is explicit so that results
    can be serialized outside of the session's lazy-loading context.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Listing, db)

    @staticmethod
    def _with_details(query):
        return query.options(
            selectinload(Listing.user),
            selectinload(Listing.category),
            selectinload(Listing.location),
            selectinload(Listing.images),
        )

    async def get_with_details(self, listing_id: uuid.UUID) -> Optional[Listing]:
        """
        Get a listing with seller, category, location and images, reloading
        any copy already held by the session.
        """
        query = self._with_details(select(Listing).where(Listing.id == listing_id))
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Listing]:
        query = self._with_details(select(Listing).where(Listing.slug == slug))
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str) -> bool:
        result = await self.db.execute(select(func.count(Listing.id)).where(Listing.slug == slug))
        return (result.scalar() or 0) > 0

    async def search(self, filters: ListingSearchFilters) -> List[Listing]:
        """
        Run a search. Every user supplied value is bound as a parameter.

        Args:
            filters: ListingSearchFilters instance

        Returns:
            At most ``filters.limit`` listings in the requested order
        """
        query = select(Listing).where(Listing.status.in_(filters.statuses))

        if filters.query:
            pattern = f"%{filters.query.strip()}%"
            query = query.where(or_(
                Listing.title.ilike(pattern),
                Listing.description.ilike(pattern),
            ))

        if filters.category_slug:
            parent = aliased(Category)
            query = (
                query.join(Category, Listing.category_id == Category.id)
                .outerjoin(parent, Category.parent_id == parent.id)
                .where(or_(Category.slug == filters.category_slug, parent.slug == filters.category_slug))
            )

        if filters.min_price is not None:
            query = query.where(Listing.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.where(Listing.price <= filters.max_price)

        if filters.county or filters.city:
            query = query.join(Location, Listing.location_id == Location.id)
            if filters.county:
                query = query.where(Location.county == filters.county)
            if filters.city:
                query = query.where(Location.city == filters.city)

        if filters.premium_only:
            query = query.where(Listing.is_premium.is_(True))

        order = {
            "price_asc": [asc(Listing.price)],
            "price_desc": [desc(Listing.price)],
            "popular": [desc(Listing.views_count), desc(Listing.created_at)],
        }.get(filters.sort_by, [desc(Listing.created_at)])

        query = self._with_details(query.order_by(*order).limit(filters.limit))
        result = await self.db.execute(query)
        listings = list(result.scalars().all())

        logger.debug(f"Search returned {len(listings)} listings (sort={filters.sort_by})")
        return listings

    async def list_for_user(self, user_id: uuid.UUID) -> List[Listing]:
        query = self._with_details(
            select(Listing).where(Listing.user_id == user_id).order_by(desc(Listing.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_premium(self, limit: int) -> List[Listing]:
        query = self._with_details(
            select(Listing)
            .where(Listing.is_premium.is_(True), Listing.status == ListingStatus.ACTIVE)
            .order_by(desc(Listing.created_at))
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def increment_views(self, listing_id: uuid.UUID) -> Optional[int]:
        """Atomically bump the view counter and return the new value."""
        result = await self.db.execute(
            update(Listing)
            .where(Listing.id == listing_id)
            .values(views_count=Listing.views_count + 1)
        )
        if result.rowcount == 0:
            return None
        await self.db.commit()

        value = await self.db.execute(select(Listing.views_count).where(Listing.id == listing_id))
        return value.scalar()

    async def add_images(self, listing_id: uuid.UUID, images: List[Dict[str, Any]]) -> List[ListingImage]:
        """Insert normalized image rows. Flushes only."""
        rows = [ListingImage(listing_id=listing_id, **image) for image in images]
        self.db.add_all(rows)
        await self.db.flush()
        return rows

    async def replace_images(self, listing: Listing, images: List[Dict[str, Any]]) -> List[ListingImage]:
        """
        Swap the whole image set of a loaded listing. Old rows go through the
        delete-orphan cascade. Flushes only.
        """
        listing.images.clear()
        await self.db.flush()

        rows = [ListingImage(**image) for image in images]
        listing.images.extend(rows)
        await self.db.flush()
        return rows

    async def delete_with_dependents(self, listing_id: uuid.UUID) -> Dict[str, int]:
        """
        Delete a listing after its dependent rows, in referential order.
        Runs inside the caller's transaction and never commits.

        Returns:
            Number of rows removed per table
        """
        message_ids = select(Message.id).where(Message.listing_id == listing_id)
        result = await self.db.execute(
            delete(Notification).where(
                Notification.type == NotificationType.MESSAGE,
                Notification.related_id.in_(message_ids),
            )
        )
        removed = {"notifications": result.rowcount}

        for label, model in (
            ("images", ListingImage),
            ("favorites", Favorite),
            ("messages", Message),
            ("validations", ListingValidation),
        ):
            result = await self.db.execute(delete(model).where(model.listing_id == listing_id))
            removed[label] = result.rowcount

        result = await self.db.execute(delete(Listing).where(Listing.id == listing_id))
        removed["listing"] = result.rowcount
        await self.db.flush()

        logger.debug(f"Removed listing {listing_id} with dependents: {removed}")
        return removed

    async def ids_for_user(self, user_id: uuid.UUID) -> List[uuid.UUID]:
        result = await self.db.execute(select(Listing.id).where(Listing.user_id == user_id))
        return list(result.scalars().all())

    async def admin_search(
        self,
        skip: int = 0,
        limit: int = 10,
        status: Optional[ListingStatus] = None,
        search: Optional[str] = None
    ) -> Tuple[List[Listing], int]:
        """Paginated listing table for the back-office."""
        conditions = []
        if status:
            conditions.append(Listing.status == status)
        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(or_(Listing.title.ilike(pattern), Listing.description.ilike(pattern)))

        total = (await self.db.execute(select(func.count(Listing.id)).where(*conditions))).scalar() or 0
        query = self._with_details(
            select(Listing).where(*conditions).order_by(desc(Listing.created_at)).offset(skip).limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def recent(self, limit: int = 5, since: Optional[datetime] = None) -> List[Listing]:
        query = select(Listing)
        if since is not None:
            query = query.where(Listing.created_at >= since)
        result = await self.db.execute(
            self._with_details(query.order_by(desc(Listing.created_at)).limit(limit))
        )
        return list(result.scalars().all())

    async def count_created_since(self, since: datetime) -> int:
        result = await self.db.execute(select(func.count(Listing.id)).where(Listing.created_at >= since))
        return result.scalar() or 0

    async def count_by_status(self, since: Optional[datetime] = None) -> Dict[str, int]:
        query = select(Listing.status, func.count(Listing.id)).group_by(Listing.status)
        if since is not None:
            query = query.where(Listing.created_at >= since)
        result = await self.db.execute(query)
        counts = {status.value: 0 for status in ListingStatus}
        for status, total in result.all():
            counts[status.value] = total
        return counts

    async def total_views(self) -> int:
        result = await self.db.execute(select(func.coalesce(func.sum(Listing.views_count), 0)))
        return int(result.scalar() or 0)

    async def category_distribution(self, since: Optional[datetime] = None) -> List[Tuple[str, str, int]]:
        """(category name, slug, listing count) rows, largest first."""
        query = (
            select(Category.name, Category.slug, func.count(Listing.id).label("total"))
            .join(Listing, Listing.category_id == Category.id)
            .group_by(Category.id, Category.name, Category.slug)
            .order_by(desc("total"))
        )
        if since is not None:
            query = query.where(Listing.created_at >= since)
        result = await self.db.execute(query)
        return [(name, slug, total) for name, slug, total in result.all()]
