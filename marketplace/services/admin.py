"""
Back-office operations: dashboard figures, listing moderation, account
management and activity reports.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.user import UserRepository
from marketplace.repositories.listing import ListingRepository
from marketplace.repositories.message import MessageRepository, FavoriteRepository, NotificationRepository
from marketplace.models.listing import Listing, ListingStatus
from marketplace.models.user import User, UserStatus
from marketplace.models.notification import NotificationType
from marketplace.database import utcnow
from marketplace.schemas.admin import AdminListingUpdate, ActivityItem, CategoryShare, ReportResponse
from marketplace.schemas.user import AdminUserCreate, AdminUserUpdate
from marketplace.services.listing import ListingService
from marketplace.services.notification import NotificationService
from marketplace.utils.exceptions import (
    BadRequestError,
    NotFoundError,
    ListingNotFoundError,
    DuplicateResourceError
)
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
import csv
import io
import math
import uuid
import logging

logger = logging.getLogger(__name__)

REPORT_PERIODS = ("today", "week", "month", "year")
RECENT_ACTIVITY_LIMIT = 10


def period_start(period: str, now: Optional[datetime] = None) -> datetime:
    """
    First instant covered by a report period.

    Raises:
        BadRequestError: Unknown period
    """
    now = now or utcnow()
    if period == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return now - timedelta(days=30)
    if period == "year":
        return now - timedelta(days=365)
    raise BadRequestError(f"Unknown period '{period}'. Use one of: {', '.join(REPORT_PERIODS)}")


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


class AdminService:

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.listing_repo = ListingRepository(db_session)
        self.message_repo = MessageRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)
        self.notification_repo = NotificationRepository(db_session)
        self.listings = ListingService(db_session)
        self.notifications = NotificationService(db_session)

    async def dashboard(self) -> Dict[str, Any]:
        by_status = await self.listing_repo.count_by_status()
        return {
            "active_users": await self.user_repo.count({"status": UserStatus.ACTIVE}),
            "active_listings": by_status[ListingStatus.ACTIVE.value],
            "pending_listings": by_status[ListingStatus.PENDING.value],
            "total_views": await self.listing_repo.total_views(),
            "recent_listings": await self.listing_repo.recent(limit=5),
        }

    # Listings

    async def list_listings(
        self,
        page: int = 1,
        limit: int = 10,
        status: Optional[ListingStatus] = None,
        search: Optional[str] = None
    ) -> Tuple[List[Listing], int]:
        return await self.listing_repo.admin_search(
            skip=(page - 1) * limit, limit=limit, status=status, search=search
        )

    async def _get_listing(self, listing_id: uuid.UUID) -> Listing:
        listing = await self.listing_repo.get_with_details(listing_id)
        if not listing:
            raise ListingNotFoundError(str(listing_id))
        return listing

    async def update_listing(self, listing_id: uuid.UUID, data: AdminListingUpdate) -> Listing:
        """
        Moderate a listing. A status change notifies the owner and still obeys
        the rule that only validation activates a pending listing.
        """
        listing = await self._get_listing(listing_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        new_status = changes.get("status")
        status_changed = new_status is not None and new_status != listing.status
        if status_changed:
            await self.listings.ensure_status_transition(listing, new_status)

        try:
            await self.listing_repo.update(listing, changes, commit=False)
            if status_changed:
                await self.notifications.notify(
                    listing.user_id,
                    NotificationType.STATUS_UPDATE,
                    title="Listing status changed",
                    content=f"\"{listing.title}\" is now {new_status.value.lower()}",
                    related_id=listing.id,
                    commit=False,
                )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Admin update of listing {listing_id} rolled back", exc_info=True)
            raise

        logger.info(f"Admin updated listing {listing_id}: {sorted(changes)}")
        return await self.listing_repo.get_with_details(listing_id)

    async def delete_listing(self, listing_id: uuid.UUID) -> Dict[str, int]:
        if not await self.listing_repo.exists(listing_id):
            raise ListingNotFoundError(str(listing_id))
        return await self.listings.delete_listing_cascade(listing_id)

    async def set_premium(self, listing_id: uuid.UUID, is_premium: bool) -> Listing:
        listing = await self._get_listing(listing_id)
        await self.listing_repo.update(listing, {"is_premium": is_premium})
        logger.info(f"Listing {listing_id} premium set to {is_premium}")
        return await self.listing_repo.get_with_details(listing_id)

    # Users

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        filter_by: Optional[str] = None,
        search: Optional[str] = None
    ) -> Tuple[List[User], int]:
        return await self.user_repo.search_users(
            skip=(page - 1) * limit, limit=limit, filter_by=filter_by, search=search
        )

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def create_user(self, data: AdminUserCreate) -> User:
        if await self.user_repo.get_by_email(data.email):
            raise DuplicateResourceError("User", data.email)

        try:
            user = await self.user_repo.create_user(data.model_dump())
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"Admin created user {user.email} with role {user.role.value}")
        return user

    async def update_user(self, user_id: uuid.UUID, data: AdminUserUpdate) -> User:
        user = await self.get_user(user_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        password = changes.pop("password", None)
        if password:
            user.set_password(password)

        return await self.user_repo.update(user, changes)

    async def delete_user(self, user_id: uuid.UUID, admin: User) -> Dict[str, int]:
        """
        Remove an account with its listings (and their dependents), messages,
        favorites and notifications in one transaction.

        Raises:
            BadRequestError: An admin deleting their own account
            NotFoundError: Unknown user
        """
        if user_id == admin.id:
            raise BadRequestError("You cannot delete your own account")

        await self.get_user(user_id)

        removed = {"listings": 0, "messages": 0, "favorites": 0, "notifications": 0}
        try:
            for listing_id in await self.listing_repo.ids_for_user(user_id):
                await self.listing_repo.delete_with_dependents(listing_id)
                removed["listings"] += 1

            removed["messages"] = await self.message_repo.delete_for_user(user_id)
            removed["favorites"] = await self.favorite_repo.delete_for_user(user_id)
            removed["notifications"] = await self.notification_repo.delete_for_user(user_id)
            await self.user_repo.delete(user_id, commit=False)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Deletion of user {user_id} rolled back", exc_info=True)
            raise

        logger.info(f"Admin {admin.id} deleted user {user_id}: {removed}")
        return removed

    # Reports

    async def build_report(self, period: str = "month") -> ReportResponse:
        """New users and listings, status breakdown, category shares and recent activity."""
        since = period_start(period)

        distribution = await self.listing_repo.category_distribution(since)
        category_total = sum(count for _, _, count in distribution)
        categories = [
            CategoryShare(
                name=name,
                slug=slug,
                count=count,
                percentage=round(count * 100 / category_total, 1) if category_total else 0.0,
            )
            for name, slug, count in distribution
        ]

        activity = [
            ActivityItem(
                type="listing_created",
                description=f"New listing \"{listing.title}\" by {listing.user.full_name or listing.user.email}",
                listing_id=listing.id,
                user_id=listing.user_id,
                timestamp=listing.created_at,
            )
            for listing in await self.listing_repo.recent(RECENT_ACTIVITY_LIMIT, since)
        ]
        activity.extend(
            ActivityItem(
                type="user_registered",
                description=f"New account {user.email}",
                user_id=user.id,
                timestamp=user.created_at,
            )
            for user in await self.user_repo.recent(RECENT_ACTIVITY_LIMIT, since)
        )
        activity.sort(key=lambda item: item.timestamp.replace(tzinfo=None), reverse=True)

        return ReportResponse(
            period=period,
            since=since,
            new_users=await self.user_repo.count_created_since(since),
            new_listings=await self.listing_repo.count_created_since(since),
            listings_by_status=await self.listing_repo.count_by_status(since),
            category_distribution=categories,
            recent_activity=activity[:RECENT_ACTIVITY_LIMIT],
        )

    def report_to_csv(self, report: ReportResponse) -> str:
        """Flatten a report into CSV sections separated by blank rows."""
        buffer = io.StringIO()
        writer = csv.writer(buffer)

        writer.writerow(["Report", report.period])
        writer.writerow(["Since", report.since.isoformat()])
        writer.writerow(["New users", report.new_users])
        writer.writerow(["New listings", report.new_listings])
        writer.writerow([])

        writer.writerow(["Status", "Listings"])
        for status, count in report.listings_by_status.items():
            writer.writerow([status, count])
        writer.writerow([])

        writer.writerow(["Category", "Slug", "Listings", "Percentage"])
        for share in report.category_distribution:
            writer.writerow([share.name, share.slug, share.count, share.percentage])
        writer.writerow([])

        writer.writerow(["Activity", "Description", "Date"])
        for item in report.recent_activity:
            writer.writerow([item.type, item.description, item.timestamp.isoformat()])

        return buffer.getvalue()
