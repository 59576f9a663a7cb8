"""
Listing service: submission, email validation, search, editing, status
changes and deletion of classified listings.

Multi-step writes (submission, edit, delete, validation) run as one
transaction on the request session. Repositories are called with
``commit=False`` and this service commits or rolls back.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.config import settings
from marketplace.repositories.listing import ListingRepository, ListingSearchFilters
from marketplace.repositories.user import UserRepository
from marketplace.repositories.category import CategoryRepository, LocationRepository
from marketplace.repositories.validation import ValidationRepository
from marketplace.repositories.message import FavoriteRepository
from marketplace.models.listing import Listing, ListingStatus, Currency
from marketplace.models.validation import ListingValidation
from marketplace.models.notification import NotificationType
from marketplace.models.user import User
from marketplace.schemas.listing import ListingCreate, ListingUpdate, ImageInput, ListingResponse
from marketplace.services.email import EmailService
from marketplace.services.notification import NotificationService
from marketplace.services.currency import convert_price, format_price
from marketplace.utils.slug import slugify, with_timestamp
from marketplace.utils.exceptions import (
    APIException,
    BadRequestError,
    ForbiddenError,
    UnauthorizedError,
    ListingNotFoundError,
    InvalidValidationTokenError,
    BusinessRuleViolationError
)
import uuid
import logging

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "toate"


@dataclass
class ListingSubmission:
    """Outcome of a listing submission."""

    listing: Listing
    requires_validation: bool
    email_sent: bool
    message: str


def default_image() -> Dict[str, Any]:
    return {"image_url": settings.default_listing_image, "display_order": 0, "is_primary": True}


def normalize_image_url(url: str) -> str:
    url = (url or "").strip()
    if not url or url.startswith("blob:"):
        return settings.default_listing_image
    if url.startswith(("http://", "https://", "/")):
        return url
    return f"/{url}"


def normalize_images(images: Optional[Sequence[ImageInput]]) -> List[Dict[str, Any]]:
    """
    Turn submitted image references into ListingImage rows.

    Blank and ``blob:`` URLs fall back to the default image, relative paths
    get a leading slash, order defaults to the position in the list and the
    primary flag defaults to ``order == 0``. Exactly one image ends up
    primary; when none is flagged the first one is. An empty list yields the
    single default image.
    """
    normalized = []
    for position, image in enumerate(images or []):
        order = image.order if image.order is not None else position
        is_primary = image.is_primary if image.is_primary is not None else order == 0
        normalized.append({
            "image_url": normalize_image_url(image.url),
            "display_order": order,
            "is_primary": bool(is_primary),
        })

    if not normalized:
        return [default_image()]

    normalized.sort(key=lambda item: item["display_order"])
    primary = next((item for item in normalized if item["is_primary"]), normalized[0])
    for item in normalized:
        item["is_primary"] = item is primary

    return normalized


def parse_price(value: Optional[str], label: str) -> Optional[Decimal]:
    """
    Parse a price query value.

    Raises:
        BadRequestError: Not a number, not finite, or negative
    """
    if value is None or str(value).strip() == "":
        return None
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise BadRequestError(f"Invalid {label}: '{value}' is not a number")
    if not price.is_finite() or price < 0:
        raise BadRequestError(f"Invalid {label}: must be a non-negative number")
    return price


def to_listing_response(listing: Listing, display_currency: Optional[Currency] = None) -> ListingResponse:
    """
    Serialize a loaded listing. With ``display_currency`` the converted price
    is added next to the stored one.
    """
    response = ListingResponse.model_validate(listing)
    shown_currency = display_currency or listing.currency
    shown_price = convert_price(listing.price, listing.currency, shown_currency)

    if display_currency is not None:
        response.display_price = float(shown_price)
        response.display_currency = display_currency
    response.formatted_price = format_price(shown_price, shown_currency)
    return response


class ListingService:
    """
    Listing workflows. Email is sent through an injected ``EmailService``
    only after the submission transaction has committed.
    """

    def __init__(self, db_session: AsyncSession, email_service: Optional[EmailService] = None):
        self.db = db_session
        self.listing_repo = ListingRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.category_repo = CategoryRepository(db_session)
        self.location_repo = LocationRepository(db_session)
        self.validation_repo = ValidationRepository(db_session)
        self.favorite_repo = FavoriteRepository(db_session)
        self.notifications = NotificationService(db_session)
        self.email_service = email_service or EmailService()

    async def generate_slug(self, title: str) -> str:
        """Slug from the title, timestamp-suffixed while it is taken."""
        base = slugify(title)
        slug = base
        while await self.listing_repo.slug_exists(slug):
            slug = with_timestamp(base)
        return slug

    async def create_listing(self, data: ListingCreate, current_user: Optional[User] = None) -> ListingSubmission:
        """
        Submit a listing.

        Authenticated submitters get an ``ACTIVE`` listing and an already
        validated token. Anonymous submitters are matched or created by email,
        get a ``PENDING`` listing and receive the validation link by email.

        Args:
            data: Submitted listing
            current_user: Authenticated submitter, None for anonymous

        Returns:
            ListingSubmission with the reloaded listing

        Raises:
            BadRequestError: Unknown category, or anonymous without email
        """
        authenticated = current_user is not None

        if not authenticated and not data.email:
            raise BadRequestError("Email is required when submitting without an account")

        category = await self.category_repo.get_by_id(data.category_id)
        if not category:
            raise BadRequestError(f"Category {data.category_id} does not exist")

        try:
            submitter = current_user or await self._resolve_submitter(data)
            location = await self.location_repo.get_or_create(data.county, data.city, commit=False)
            slug = await self.generate_slug(data.title)

            listing = await self.listing_repo.create(
                {
                    "title": data.title,
                    "slug": slug,
                    "description": data.description,
                    "price": data.price,
                    "currency": data.currency,
                    "condition": data.condition,
                    "negotiable": data.negotiable,
                    "status": ListingStatus.ACTIVE if authenticated else ListingStatus.PENDING,
                    "contact_phone": data.phone or submitter.phone,
                    "user_id": submitter.id,
                    "category_id": category.id,
                    "location_id": location.id,
                },
                commit=False,
            )
            listing_id = listing.id

            await self.listing_repo.add_images(listing_id, normalize_images(data.images))

            validation = ListingValidation.issue(
                listing_id,
                ttl_hours=settings.validation_token_ttl_hours,
                validated=authenticated,
            )
            await self.validation_repo.add(validation, commit=False)
            token = validation.token

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            if not isinstance(e, APIException):
                logger.error(f"Listing submission rolled back: {e}", exc_info=True)
            raise

        listing = await self.listing_repo.get_with_details(listing_id)
        logger.info(f"Listing created: {listing.slug} (ID: {listing_id}, status: {listing.status.value})")

        if authenticated:
            return ListingSubmission(
                listing=listing,
                requires_validation=False,
                email_sent=False,
                message="Listing published",
            )

        result = await self.email_service.send_validation_email(
            to=data.email,
            listing_title=listing.title,
            listing_id=listing_id,
            token=token,
        )
        if result.success:
            message = "Listing created. Check your email to confirm it"
        else:
            logger.warning(f"Validation email for listing {listing_id} failed: {result.error}")
            message = "Listing created, but the confirmation email could not be sent. Contact support to activate it"

        return ListingSubmission(
            listing=listing,
            requires_validation=True,
            email_sent=result.success,
            message=message,
        )

    async def _resolve_submitter(self, data: ListingCreate) -> User:
        user = await self.user_repo.get_by_email(data.email)
        if user:
            return user

        try:
            user = await self.user_repo.create_user(
                {"email": data.email, "phone": data.phone},
                commit=False,
            )
        except ValueError as e:
            raise BadRequestError(str(e))

        logger.info(f"Created account for anonymous submitter {user.email}")
        return user

    async def validate_listing(self, listing_id: Optional[uuid.UUID], token: Optional[str]) -> Listing:
        """
        Activate a pending listing with its emailed token. Tokens are single use.

        Raises:
            BadRequestError: Missing id or token
            ListingNotFoundError: Unknown listing
            InvalidValidationTokenError: Token unknown, used or expired
        """
        if not listing_id or not token:
            raise BadRequestError("Listing id and token are required")

        listing = await self.listing_repo.get_by_id(listing_id)
        if not listing:
            raise ListingNotFoundError(str(listing_id))

        record = await self.validation_repo.find_usable(listing_id, token)
        if not record:
            raise InvalidValidationTokenError()

        try:
            listing.status = ListingStatus.ACTIVE
            record.validated = True
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Validation of listing {listing_id} rolled back", exc_info=True)
            raise

        logger.info(f"Listing validated: {listing.slug}")
        return listing

    def build_search_filters(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[str] = None,
        max_price: Optional[str] = None,
        city: Optional[str] = None,
        county: Optional[str] = None,
        sort_by: Optional[str] = None,
        premium: bool = False
    ) -> ListingSearchFilters:
        """
        Validate raw search parameters. Runs before any database access.

        Raises:
            BadRequestError: Invalid price bounds
        """
        low = parse_price(min_price, "min_price")
        high = parse_price(max_price, "max_price")
        if low is not None and high is not None and low > high:
            raise BadRequestError("min_price cannot be greater than max_price")

        category_slug = (category or "").strip()
        if category_slug.lower() == ALL_CATEGORIES:
            category_slug = ""

        statuses = [ListingStatus.ACTIVE]
        if settings.search_include_pending:
            statuses.append(ListingStatus.PENDING)

        return ListingSearchFilters(
            query=(query or "").strip() or None,
            category_slug=category_slug or None,
            min_price=low,
            max_price=high,
            city=(city or "").strip() or None,
            county=(county or "").strip() or None,
            sort_by=sort_by or "recent",
            premium_only=premium,
            statuses=statuses,
            limit=settings.search_result_limit,
        )

    async def search(self, filters: ListingSearchFilters) -> List[Listing]:
        return await self.listing_repo.search(filters)

    async def get_by_slug(self, slug: str) -> Listing:
        listing = await self.listing_repo.get_by_slug(slug)
        if not listing:
            raise ListingNotFoundError(slug)
        return listing

    async def get_managed_listing(self, slug: str, current_user: Optional[User]) -> Listing:
        """
        Listing the caller may edit or delete.

        Raises:
            UnauthorizedError: No session
            ListingNotFoundError: Unknown slug
            ForbiddenError: Neither the owner nor an admin
        """
        if current_user is None:
            raise UnauthorizedError()

        listing = await self.get_by_slug(slug)
        if not current_user.can_manage_listing(listing.user_id):
            raise ForbiddenError("You can only modify your own listings")
        return listing

    async def ensure_status_transition(self, listing: Listing, new_status: ListingStatus) -> None:
        """
        A listing becomes ACTIVE only through token validation. Owners and
        admins may switch between ACTIVE and INACTIVE once that happened.

        Raises:
            BusinessRuleViolationError: The change would bypass validation
        """
        if new_status == listing.status or new_status != ListingStatus.ACTIVE:
            return

        if listing.status == ListingStatus.PENDING:
            raise BusinessRuleViolationError(
                "status transition",
                "a pending listing is activated only through its validation link"
            )

        record = await self.validation_repo.latest_for_listing(listing.id)
        if record is None or not record.validated:
            raise BusinessRuleViolationError(
                "status transition",
                "the listing was never validated"
            )

    async def update_listing(self, slug: str, data: ListingUpdate, current_user: Optional[User]) -> Listing:
        """
        Partial edit by the owner or an admin. The slug never changes. A price
        change notifies everyone who saved the listing.
        """
        listing = await self.get_managed_listing(slug, current_user)
        listing_id = listing.id
        owner_id = listing.user_id
        old_price = listing.price
        old_currency = listing.currency

        changes = data.model_dump(exclude_unset=True)
        images = changes.pop("images", None)
        county = changes.pop("county", None)
        city = changes.pop("city", None)
        if "phone" in changes:
            changes["contact_phone"] = changes.pop("phone")

        try:
            if changes.get("category_id") is not None:
                if not await self.category_repo.exists(changes["category_id"]):
                    raise BadRequestError(f"Category {changes['category_id']} does not exist")

            if county and city:
                location = await self.location_repo.get_or_create(county, city, commit=False)
                changes["location_id"] = location.id

            # an explicit null clears only the contact phone
            changes = {k: v for k, v in changes.items() if v is not None or k == "contact_phone"}
            await self.listing_repo.update(listing, changes, commit=False)

            if images is not None:
                await self.listing_repo.replace_images(listing, normalize_images(data.images))

            price_changed = (
                ("price" in changes and changes["price"] != old_price)
                or ("currency" in changes and changes["currency"] != old_currency)
            )
            if price_changed:
                await self._notify_price_change(listing, owner_id)

            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            if not isinstance(e, APIException):
                logger.error(f"Update of listing {listing_id} rolled back: {e}", exc_info=True)
            raise

        logger.info(f"Listing updated: {slug} by user {current_user.id}")
        return await self.listing_repo.get_with_details(listing_id)

    async def _notify_price_change(self, listing: Listing, owner_id: uuid.UUID) -> None:
        user_ids = [
            user_id for user_id in await self.favorite_repo.user_ids_for_listing(listing.id)
            if user_id != owner_id
        ]
        if not user_ids:
            return

        new_price = format_price(listing.price, listing.currency)
        await self.notifications.notify_many(
            user_ids,
            NotificationType.PRICE_CHANGE,
            title="Price changed",
            content=f"The price of \"{listing.title}\" is now {new_price}",
            related_id=listing.id,
        )

    async def change_status(self, slug: str, new_status: ListingStatus, current_user: Optional[User]) -> Listing:
        """Owner switch between ACTIVE and INACTIVE."""
        listing = await self.get_managed_listing(slug, current_user)

        if new_status == ListingStatus.PENDING:
            raise BusinessRuleViolationError("status transition", "listings cannot be set back to pending")
        await self.ensure_status_transition(listing, new_status)

        listing_id = listing.id
        await self.listing_repo.update(listing, {"status": new_status})
        logger.info(f"Listing {slug} status set to {new_status.value}")
        return await self.listing_repo.get_with_details(listing_id)

    async def delete_listing(self, slug: str, current_user: Optional[User]) -> Dict[str, int]:
        """Remove a listing with its images, favorites, messages and tokens."""
        listing = await self.get_managed_listing(slug, current_user)
        return await self.delete_listing_cascade(listing.id)

    async def delete_listing_cascade(self, listing_id: uuid.UUID) -> Dict[str, int]:
        try:
            removed = await self.listing_repo.delete_with_dependents(listing_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(f"Deletion of listing {listing_id} rolled back", exc_info=True)
            raise

        logger.info(f"Listing {listing_id} deleted: {removed}")
        return removed

    async def my_listings(self, current_user: User) -> List[Listing]:
        return await self.listing_repo.list_for_user(current_user.id)

    async def premium_listings(self, limit: Optional[int] = None) -> List[Listing]:
        return await self.listing_repo.list_premium(limit or settings.premium_listing_limit)

    async def increment_views(self, listing_id: uuid.UUID) -> int:
        views = await self.listing_repo.increment_views(listing_id)
        if views is None:
            raise ListingNotFoundError(str(listing_id))
        return views

    async def check_ownership(self, slug: str, current_user: Optional[User]) -> Dict[str, bool]:
        listing = await self.get_by_slug(slug)
        if current_user is None:
            return {"is_owner": False, "can_edit": False}

        return {
            "is_owner": listing.user_id == current_user.id,
            "can_edit": current_user.can_manage_listing(listing.user_id),
        }
