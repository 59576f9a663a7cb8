"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
)
from .user import (
    UserResponse,
    PublicUserResponse,
    SellerResponse,
    ProfileUpdate,
    AdminUserCreate,
    AdminUserUpdate,
    UserListResponse,
)
from .category import (
    CategoryResponse,
    CategorySummary,
    CategoryTreeNode,
    CategoryListResponse,
    CategoryTreeResponse,
    LocationResponse,
    CountyResponse,
)
from .listing import (
    ImageInput,
    ImageResponse,
    ListingCreate,
    ListingUpdate,
    ListingStatusUpdate,
    ListingResponse,
    ListingSummary,
    ListingCreateResponse,
    ValidateListingRequest,
    ValidateListingResponse,
    SearchResponse,
)

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",
    "UserResponse",
    "PublicUserResponse",
    "SellerResponse",
    "ProfileUpdate",
    "AdminUserCreate",
    "AdminUserUpdate",
    "UserListResponse",
    "CategoryResponse",
    "CategorySummary",
    "CategoryTreeNode",
    "CategoryListResponse",
    "CategoryTreeResponse",
    "LocationResponse",
    "CountyResponse",
    "ImageInput",
    "ImageResponse",
    "ListingCreate",
    "ListingUpdate",
    "ListingStatusUpdate",
    "ListingResponse",
    "ListingSummary",
    "ListingCreateResponse",
    "ValidateListingRequest",
    "ValidateListingResponse",
    "SearchResponse",
]
