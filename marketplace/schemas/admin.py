"""
Schemas for the admin back-office: dashboard, listing moderation and reports.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from marketplace.models.listing import ListingStatus
from marketplace.schemas.listing import ListingResponse
import uuid


class DashboardResponse(BaseModel):
    active_users: int
    active_listings: int
    pending_listings: int
    total_views: int
    recent_listings: List[ListingResponse]


class AdminListingUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=10000)
    price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ListingStatus] = None
    is_premium: Optional[bool] = None


class PremiumUpdate(BaseModel):
    is_premium: bool = Field(..., strict=True, description="Must be a JSON boolean")


class AdminListingListResponse(BaseModel):
    listings: List[ListingResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class CategoryShare(BaseModel):
    name: str
    slug: str
    count: int
    percentage: float


class ActivityItem(BaseModel):
    type: str
    description: str
    listing_id: Optional[uuid.UUID] = None
    user_id: Optional[uuid.UUID] = None
    timestamp: datetime


class ReportResponse(BaseModel):
    period: str
    since: datetime
    new_users: int
    new_listings: int
    listings_by_status: dict
    category_distribution: List[CategoryShare]
    recent_activity: List[ActivityItem]

    @field_validator("period")
    @classmethod
    def validate_period(cls, v):
        if v not in ("today", "week", "month", "year"):
            raise ValueError("Period must be one of today, week, month, year")
        return v
