"""
Back-office endpoints. Listing moderation is open to moderators; user
management and reports are admin only.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from fastapi.responses import Response
from typing import Optional
from uuid import UUID

from marketplace.config import settings
from marketplace.models.listing import ListingStatus
from marketplace.models.user import User
from marketplace.services.admin import AdminService, total_pages
from marketplace.services.listing import to_listing_response
from marketplace.services.error_handler import error_responses
from marketplace.schemas.admin import (
    DashboardResponse,
    AdminListingUpdate,
    AdminListingListResponse,
    PremiumUpdate,
    ReportResponse
)
from marketplace.schemas.listing import ListingResponse, DeleteResponse
from marketplace.schemas.user import UserResponse, UserListResponse, AdminUserCreate, AdminUserUpdate
from marketplace.utils.dependencies import (
    get_current_admin_user,
    get_current_staff_user,
    get_admin_service
)


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Dashboard counters",
    responses=error_responses(401, 403)
)
async def dashboard(
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> DashboardResponse:
    stats = await admin_service.dashboard()
    stats["recent_listings"] = [to_listing_response(listing) for listing in stats["recent_listings"]]
    return DashboardResponse(**stats)


# Listings

@router.get(
    "/listings",
    response_model=AdminListingListResponse,
    summary="All listings",
    description="Any status, newest first. `search` matches the title.",
    responses=error_responses(401, 403)
)
async def list_listings(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status_filter: Optional[ListingStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=200),
    current_user: User = Depends(get_current_staff_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminListingListResponse:
    listings, total = await admin_service.list_listings(page, limit, status_filter, search)
    return AdminListingListResponse(
        listings=[to_listing_response(listing) for listing in listings],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit)
    )


@router.put(
    "/listings/{listing_id}",
    response_model=ListingResponse,
    summary="Moderate a listing",
    description="A status change notifies the owner. Pending listings are activated only by validation.",
    responses=error_responses(400, 401, 403, 404, 422)
)
async def update_listing(
    data: AdminListingUpdate,
    listing_id: UUID = Path(...),
    current_user: User = Depends(get_current_staff_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> ListingResponse:
    listing = await admin_service.update_listing(listing_id, data)
    return to_listing_response(listing)


@router.delete(
    "/listings/{listing_id}",
    response_model=DeleteResponse,
    summary="Delete a listing",
    responses=error_responses(401, 403, 404)
)
async def delete_listing(
    listing_id: UUID = Path(...),
    current_user: User = Depends(get_current_staff_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> DeleteResponse:
    await admin_service.delete_listing(listing_id)
    return DeleteResponse(message="Listing deleted")


@router.put(
    "/listings/{listing_id}/premium",
    response_model=ListingResponse,
    summary="Set premium flag",
    responses=error_responses(401, 403, 404, 422)
)
async def set_premium(
    data: PremiumUpdate,
    listing_id: UUID = Path(...),
    current_user: User = Depends(get_current_staff_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> ListingResponse:
    listing = await admin_service.set_premium(listing_id, data.is_premium)
    return to_listing_response(listing)


# Users

@router.get(
    "/users",
    response_model=UserListResponse,
    summary="All users",
    responses=error_responses(401, 403, 422)
)
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    filter: Optional[str] = Query(None, pattern="^(active|inactive|admin)$"),
    search: Optional[str] = Query(None, max_length=200),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserListResponse:
    users, total = await admin_service.list_users(page, limit, filter, search)
    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit)
    )


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
    responses=error_responses(400, 401, 403, 409, 422)
)
async def create_user(
    data: AdminUserCreate,
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserResponse:
    user = await admin_service.create_user(data)
    return UserResponse.model_validate(user)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
    responses=error_responses(401, 403, 404)
)
async def get_user(
    user_id: UUID = Path(...),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserResponse:
    return UserResponse.model_validate(await admin_service.get_user(user_id))


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
    responses=error_responses(401, 403, 404, 422)
)
async def update_user(
    data: AdminUserUpdate,
    user_id: UUID = Path(...),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> UserResponse:
    user = await admin_service.update_user(user_id, data)
    return UserResponse.model_validate(user)


@router.delete(
    "/users/{user_id}",
    response_model=DeleteResponse,
    summary="Delete a user",
    description="Removes the account together with its listings, messages, favorites and notifications.",
    responses=error_responses(400, 401, 403, 404)
)
async def delete_user(
    user_id: UUID = Path(...),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> DeleteResponse:
    removed = await admin_service.delete_user(user_id, current_user)
    return DeleteResponse(message=f"User deleted with {removed['listings']} listings")


# Reports

@router.get(
    "/reports",
    response_model=ReportResponse,
    summary="Activity report",
    responses=error_responses(400, 401, 403)
)
async def report(
    period: str = Query("month", description="today, week, month or year"),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> ReportResponse:
    return await admin_service.build_report(period)


@router.get(
    "/reports/export",
    response_class=Response,
    summary="Export report as CSV",
    responses={**error_responses(400, 401, 403), 200: {"content": {"text/csv": {}}}}
)
async def export_report(
    period: str = Query("month", description="today, week, month or year"),
    current_user: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
) -> Response:
    report = await admin_service.build_report(period)
    return Response(
        content=admin_service.report_to_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=report-{report.period}.csv"}
    )
