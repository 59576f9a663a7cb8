"""
Listing API endpoints: submission, validation, detail, edit, status,
deletion and the small helpers used by listing pages.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.user import User
from marketplace.services.listing import ListingService, to_listing_response
from marketplace.services.currency import parse_currency
from marketplace.services.error_handler import error_responses
from marketplace.schemas.listing import (
    ListingCreate,
    ListingUpdate,
    ListingStatusUpdate,
    ListingResponse,
    ListingCreateResponse,
    ListingCollectionResponse,
    ValidateListingRequest,
    ValidateListingResponse,
    ViewCountResponse,
    OwnershipResponse,
    DeleteResponse
)
from marketplace.utils.dependencies import (
    get_current_active_user,
    get_optional_current_user,
    get_listing_service
)


router = APIRouter(prefix="/listings", tags=["Listings"])


@router.post(
    "",
    response_model=ListingCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a listing",
    description=(
        "Create a listing. With a bearer token the listing is published immediately. "
        "Without one, `email` is required, the listing stays pending and a validation "
        "link is emailed."
    ),
    responses=error_responses(400, 422)
)
async def create_listing(
    data: ListingCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingCreateResponse:
    submission = await listing_service.create_listing(data, current_user)

    return ListingCreateResponse(
        success=True,
        message=submission.message,
        requires_validation=submission.requires_validation,
        email_sent=submission.email_sent,
        listing=to_listing_response(submission.listing)
    )


async def _validate(listing_service: ListingService, listing_id: Optional[UUID], token: Optional[str]):
    listing = await listing_service.validate_listing(listing_id, token)
    return ValidateListingResponse(
        success=True,
        message="Listing confirmed and published",
        slug=listing.slug
    )


@router.post(
    "/validate",
    response_model=ValidateListingResponse,
    summary="Validate a pending listing",
    responses=error_responses(400, 404)
)
async def validate_listing(
    data: ValidateListingRequest,
    listing_service: ListingService = Depends(get_listing_service)
) -> ValidateListingResponse:
    return await _validate(listing_service, data.id, data.token)


@router.get(
    "/validate",
    response_model=ValidateListingResponse,
    summary="Validate a pending listing from the emailed link",
    responses=error_responses(400, 404)
)
async def validate_listing_link(
    id: Optional[UUID] = Query(None, description="Listing ID"),
    token: Optional[str] = Query(None, max_length=128, description="Validation token"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ValidateListingResponse:
    return await _validate(listing_service, id, token)


@router.get(
    "/mine",
    response_model=ListingCollectionResponse,
    summary="My listings",
    description="All listings of the current user, newest first",
    responses=error_responses(401)
)
async def my_listings(
    current_user: User = Depends(get_current_active_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingCollectionResponse:
    listings = await listing_service.my_listings(current_user)
    return ListingCollectionResponse(listings=[to_listing_response(listing) for listing in listings])


@router.get(
    "/premium",
    response_model=ListingCollectionResponse,
    summary="Premium listings",
    description="Active premium listings for the home page, newest first"
)
async def premium_listings(
    limit: int = Query(settings.premium_listing_limit, ge=1, le=50),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingCollectionResponse:
    listings = await listing_service.premium_listings(limit)
    return ListingCollectionResponse(listings=[to_listing_response(listing) for listing in listings])


@router.post(
    "/view/{listing_id}",
    response_model=ViewCountResponse,
    summary="Count a view",
    responses=error_responses(404)
)
async def increment_views(
    listing_id: UUID = Path(..., description="Listing ID"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ViewCountResponse:
    views = await listing_service.increment_views(listing_id)
    return ViewCountResponse(success=True, views_count=views)


@router.get(
    "/{slug}",
    response_model=ListingResponse,
    summary="Get listing by slug",
    description="Public listing page data. `currency` adds a converted display price.",
    responses=error_responses(400, 404)
)
async def get_listing(
    slug: str = Path(..., max_length=255),
    currency: Optional[str] = Query(None, description="Display currency: RON, EUR, USD or GBP"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    display_currency = parse_currency(currency)
    listing = await listing_service.get_by_slug(slug)
    return to_listing_response(listing, display_currency)


@router.get(
    "/{slug}/ownership",
    response_model=OwnershipResponse,
    summary="Check listing ownership",
    responses=error_responses(404)
)
async def check_ownership(
    slug: str = Path(..., max_length=255),
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> OwnershipResponse:
    return OwnershipResponse(**await listing_service.check_ownership(slug, current_user))


@router.put(
    "/{slug}",
    response_model=ListingResponse,
    summary="Update listing",
    description="Owner or admin only. `images` replaces the whole image set.",
    responses=error_responses(400, 401, 403, 404, 422)
)
async def update_listing(
    data: ListingUpdate,
    slug: str = Path(..., max_length=255),
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    listing = await listing_service.update_listing(slug, data, current_user)
    return to_listing_response(listing)


@router.patch(
    "/{slug}/status",
    response_model=ListingResponse,
    summary="Activate or deactivate a listing",
    responses=error_responses(400, 401, 403, 404)
)
async def change_status(
    data: ListingStatusUpdate,
    slug: str = Path(..., max_length=255),
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    listing = await listing_service.change_status(slug, data.status, current_user)
    return to_listing_response(listing)


@router.delete(
    "/{slug}",
    response_model=DeleteResponse,
    summary="Delete listing",
    description="Owner or admin only. Images, favorites, messages and tokens go with it.",
    responses=error_responses(401, 403, 404)
)
async def delete_listing(
    slug: str = Path(..., max_length=255),
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> DeleteResponse:
    await listing_service.delete_listing(slug, current_user)
    return DeleteResponse(success=True, message="Listing deleted")
