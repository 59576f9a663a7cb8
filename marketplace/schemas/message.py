"""
Schemas for messages, notifications and favorites.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from marketplace.models.notification import NotificationType
from marketplace.schemas.user import PublicUserResponse
from marketplace.schemas.listing import ListingSummary, ListingResponse
import uuid


class MessageCreate(BaseModel):
    receiver_id: uuid.UUID
    listing_id: Optional[uuid.UUID] = None
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    sender_id: uuid.UUID
    receiver_id: uuid.UUID
    listing_id: Optional[uuid.UUID] = None
    content: str
    is_read: bool
    created_at: datetime
    sender: PublicUserResponse
    receiver: PublicUserResponse
    listing: Optional[ListingSummary] = None


class MessageListResponse(BaseModel):
    success: bool = True
    messages: List[MessageResponse]


class UnreadCountResponse(BaseModel):
    unread: int


class ConversationDeleteResponse(BaseModel):
    success: bool = True
    messages_hidden: int
    notifications_removed: int


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    type: NotificationType
    title: str
    content: str
    related_id: Optional[uuid.UUID] = None
    is_read: bool
    created_at: datetime


class NotificationUpdate(BaseModel):
    is_read: bool = True


class NotificationListResponse(BaseModel):
    success: bool = True
    unread: int
    notifications: List[NotificationResponse]


class BulkUpdateResponse(BaseModel):
    success: bool = True
    affected: int


class FavoriteCreate(BaseModel):
    listing_id: Optional[uuid.UUID] = None


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    listing_id: uuid.UUID
    created_at: datetime
    listing: ListingResponse


class FavoriteListResponse(BaseModel):
    success: bool = True
    favorites: List[FavoriteResponse]
