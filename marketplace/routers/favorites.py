"""
Saved listings.
"""

from fastapi import APIRouter, Depends, Path, status
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.message import FavoriteService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.message import FavoriteCreate, FavoriteResponse, FavoriteListResponse
from marketplace.schemas.listing import DeleteResponse
from marketplace.utils.dependencies import get_current_active_user, get_favorite_service


router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get(
    "",
    response_model=FavoriteListResponse,
    summary="My favorites",
    responses=error_responses(401)
)
async def list_favorites(
    current_user: User = Depends(get_current_active_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteListResponse:
    favorites = await favorite_service.list_favorites(current_user)
    return FavoriteListResponse(favorites=[FavoriteResponse.model_validate(f) for f in favorites])


@router.post(
    "",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a favorite",
    responses=error_responses(400, 401, 404)
)
async def add_favorite(
    data: FavoriteCreate,
    current_user: User = Depends(get_current_active_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteResponse:
    favorite = await favorite_service.add_favorite(data.listing_id, current_user)
    return FavoriteResponse.model_validate(favorite)


@router.delete(
    "/{listing_id}",
    response_model=DeleteResponse,
    summary="Remove a favorite",
    responses=error_responses(401, 404)
)
async def remove_favorite(
    listing_id: UUID = Path(...),
    current_user: User = Depends(get_current_active_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> DeleteResponse:
    await favorite_service.remove_favorite(listing_id, current_user)
    return DeleteResponse(message="Removed from favorites")
