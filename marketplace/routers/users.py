"""
Public user profiles and the signed-in user's own profile.
"""

from fastapi import APIRouter, Depends, Path, UploadFile, File
from uuid import UUID

from marketplace.models.user import User
from marketplace.services.user import UserService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.user import UserResponse, PublicUserResponse, ProfileUpdate
from marketplace.utils.dependencies import get_current_active_user, get_user_service


router = APIRouter(tags=["Users"])


@router.get(
    "/users/{user_id}",
    response_model=PublicUserResponse,
    summary="Public profile",
    responses=error_responses(404)
)
async def get_user(
    user_id: UUID = Path(...),
    user_service: UserService = Depends(get_user_service)
) -> PublicUserResponse:
    user = await user_service.get_public_profile(user_id)
    return PublicUserResponse.model_validate(user)


@router.get(
    "/user/profile",
    response_model=UserResponse,
    summary="My profile",
    responses=error_responses(401)
)
async def get_profile(
    current_user: User = Depends(get_current_active_user)
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/user/profile",
    response_model=UserResponse,
    summary="Update my profile",
    description="First and last name are required. Phone, when given, is ten digits.",
    responses=error_responses(401, 422)
)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.update_profile(current_user, data)
    return UserResponse.model_validate(user)


@router.post(
    "/user/avatar",
    response_model=UserResponse,
    summary="Upload avatar",
    responses=error_responses(400, 401)
)
async def upload_avatar(
    file: UploadFile = File(..., description="Image file"),
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.set_avatar(current_user, file)
    return UserResponse.model_validate(user)
