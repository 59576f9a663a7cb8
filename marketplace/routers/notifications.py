"""
Notification endpoints for the signed-in user.
"""

from fastapi import APIRouter, Depends, Query, Path
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.notification import NotificationService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.message import (
    NotificationResponse,
    NotificationUpdate,
    NotificationListResponse,
    UnreadCountResponse,
    BulkUpdateResponse
)
from marketplace.utils.dependencies import get_current_active_user, get_notification_service


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
    description="Newest first",
    responses=error_responses(401)
)
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationListResponse:
    notifications = await notification_service.list_notifications(current_user, unread_only=unread_only)
    return NotificationListResponse(
        unread=await notification_service.unread_count(current_user),
        notifications=[NotificationResponse.model_validate(n) for n in notifications]
    )


@router.get(
    "/unread-count",
    response_model=UnreadCountResponse,
    summary="Unread notification count",
    responses=error_responses(401)
)
async def unread_count(
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await notification_service.unread_count(current_user))


@router.put(
    "",
    response_model=BulkUpdateResponse,
    summary="Mark all notifications read",
    responses=error_responses(401)
)
async def mark_all_read(
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> BulkUpdateResponse:
    return BulkUpdateResponse(affected=await notification_service.mark_all_read(current_user))


@router.delete(
    "",
    response_model=BulkUpdateResponse,
    summary="Delete read notifications",
    responses=error_responses(401)
)
async def delete_read(
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> BulkUpdateResponse:
    return BulkUpdateResponse(affected=await notification_service.delete_read(current_user))


@router.put(
    "/{notification_id}",
    response_model=NotificationResponse,
    summary="Mark one notification read or unread",
    responses=error_responses(401, 403, 404)
)
async def set_read(
    data: NotificationUpdate,
    notification_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service)
) -> NotificationResponse:
    notification = await notification_service.set_read(notification_id, current_user, data.is_read)
    return NotificationResponse.model_validate(notification)
