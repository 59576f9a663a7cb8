"""
Pydantic schemas for listing requests and responses.
Images use one normalized shape on the way in and on the way out.
"""

from pydantic import (
    AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
)
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from marketplace.models.listing import Currency, ListingCondition, ListingStatus
from marketplace.schemas.user import SellerResponse
from marketplace.schemas.category import CategorySummary, LocationResponse
import uuid

MAX_PRICE = Decimal("999999999.99")


class ImageInput(BaseModel):
    """Image reference supplied with a listing, usually a path returned by /upload."""

    url: str = Field(
        "",
        max_length=500,
        validation_alias=AliasChoices("url", "image_url"),
        description="Public path (e.g. /uploads/1700000000000-car.jpg) or absolute URL"
    )
    order: Optional[int] = Field(None, ge=0, le=100, description="Display order, 0 first")
    is_primary: Optional[bool] = Field(None, description="Defaults to order == 0")

    @field_validator("url")
    @classmethod
    def strip_url(cls, v):
        return (v or "").strip()


class ImageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    image_url: str
    display_order: int
    is_primary: bool


def _strip_required(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


class ListingCreate(BaseModel):
    """
    Listing submission. ``email`` identifies anonymous submitters and is
    ignored when the request carries a valid bearer token.
    """

    title: str = Field(..., min_length=3, max_length=255, description="Listing title")
    description: str = Field(..., min_length=10, max_length=10000, description="Listing description")
    price: Decimal = Field(..., ge=0, description="Price in the listing currency")
    currency: Currency = Field(Currency.RON)
    condition: ListingCondition = Field(ListingCondition.USED)
    negotiable: bool = False
    category_id: uuid.UUID
    county: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = Field(None, description="Contact email, required when not logged in")
    phone: Optional[str] = Field(None, max_length=20)
    images: List[ImageInput] = Field(default_factory=list, max_length=20)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return _strip_required(v, "Description")

    @field_validator("county", "city")
    @classmethod
    def validate_location(cls, v):
        return _strip_required(v, "Location")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip() if v else v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v > MAX_PRICE:
            raise ValueError("Price exceeds maximum allowed value")
        return v


class ListingUpdate(BaseModel):
    """Partial listing edit. ``images`` replaces the whole set when present."""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=10000)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[Currency] = None
    condition: Optional[ListingCondition] = None
    negotiable: Optional[bool] = None
    category_id: Optional[uuid.UUID] = None
    county: Optional[str] = Field(None, min_length=1, max_length=100)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    images: Optional[List[ImageInput]] = Field(None, max_length=20)

    @field_validator("title", "description", "county", "city")
    @classmethod
    def validate_text(cls, v, info):
        if v is None:
            return v
        return _strip_required(v, info.field_name.capitalize())

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v > MAX_PRICE:
            raise ValueError("Price exceeds maximum allowed value")
        return v

    @model_validator(mode="after")
    def validate_location_pair(self):
        if (self.county is None) != (self.city is None):
            raise ValueError("County and city must be provided together")
        return self


class ListingStatusUpdate(BaseModel):
    status: ListingStatus


class ListingResponse(BaseModel):
    """Listing with seller, category, location and images."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    description: str
    price: float
    currency: Currency
    condition: ListingCondition
    negotiable: bool
    status: ListingStatus
    is_premium: bool
    views_count: int
    contact_phone: Optional[str] = None
    user_id: uuid.UUID
    user: SellerResponse
    category: CategorySummary
    location: LocationResponse
    images: List[ImageResponse]
    primary_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    # Filled when a display currency is requested; stored price is untouched
    display_price: Optional[float] = None
    display_currency: Optional[Currency] = None
    formatted_price: Optional[str] = None


class ListingSummary(BaseModel):
    """Short listing reference used in messages and favorites."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    price: float
    currency: Currency
    status: ListingStatus
    primary_image_url: Optional[str] = None


class ListingCreateResponse(BaseModel):
    success: bool = True
    message: str
    requires_validation: bool
    email_sent: bool
    listing: ListingResponse


class ValidateListingRequest(BaseModel):
    id: Optional[uuid.UUID] = None
    token: Optional[str] = Field(None, max_length=128)


class ValidateListingResponse(BaseModel):
    success: bool = True
    message: str
    slug: str


class SearchResponse(BaseModel):
    success: bool = True
    total: int
    listings: List[ListingResponse]


class ListingCollectionResponse(BaseModel):
    success: bool = True
    listings: List[ListingResponse]


class ViewCountResponse(BaseModel):
    success: bool = True
    views_count: int


class OwnershipResponse(BaseModel):
    is_owner: bool
    can_edit: bool


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
