"""
Authentication API endpoints: registration, login, token refresh and the
current user.
"""

from fastapi import APIRouter, Depends, status
from marketplace.models.user import User
from marketplace.services.auth import AuthService
from marketplace.services.error_handler import error_responses
from marketplace.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse
)
from marketplace.schemas.user import UserResponse
from marketplace.utils.dependencies import (
    get_auth_service,
    get_current_active_user
)
from marketplace.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a regular user account. Fails with 409 when the email is taken.",
    responses=error_responses(400, 409, 422)
)
async def register(
    data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> UserResponse:
    user = await auth_service.register(data)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns JWT tokens",
    responses=error_responses(401, 422)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveUserError: If user account is inactive
    """
    user, access_token, refresh_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )

    return LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=error_responses(401)
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)

    return AccessTokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
    description="Profile of the user owning the bearer token",
    responses=error_responses(401)
)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
) -> UserResponse:
    return UserResponse.model_validate(current_user)
