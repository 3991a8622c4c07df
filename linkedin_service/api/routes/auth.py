"""
Authentication routes
"""
from fastapi import APIRouter, Depends, status

from ...domain.models import User
from ...schemas import (
    UserRegister, UserLogin, PasswordUpdate,
    ApiResponse, AuthData, MeData, UserProfile, UserWithPostsCount, MessageResponse,
)
from ...application.services import AuthService
from ..dependencies import get_auth_service, get_current_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=ApiResponse[AuthData], status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user

    - **name**: 2-50 characters, letters and spaces only
    - **email**: Valid email address, unique
    - **password**: Min 6 characters with uppercase, lowercase and digit
    - **bio**: Optional bio (max 300 characters)
    """
    user, token = await auth_service.register(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        bio=user_data.bio
    )

    return ApiResponse(
        message="User registered successfully",
        data=AuthData(user=UserProfile.from_domain(user), token=token)
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    credentials: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login with email and password

    - **email**: Registered email address
    - **password**: User password
    """
    user, token = await auth_service.login(
        email=credentials.email,
        password=credentials.password
    )

    return ApiResponse(
        message="Login successful",
        data=AuthData(user=UserProfile.from_domain(user), token=token)
    )


@router.get("/me", response_model=ApiResponse[MeData])
async def get_me(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Get current user's profile

    Requires authentication.
    """
    user, posts_count = await auth_service.get_me(current_user.id)

    return ApiResponse(
        data=MeData(
            user=UserWithPostsCount(**UserProfile.profile_fields(user), posts_count=posts_count)
        )
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Logout (the client drops its token; the server only records the time)

    Requires authentication.
    """
    await auth_service.logout(current_user.id)

    return MessageResponse(message="Logout successful")


@router.put("/password", response_model=MessageResponse)
async def update_password(
    password_data: PasswordUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Change current user's password

    Requires authentication.
    """
    await auth_service.change_password(
        user_id=current_user.id,
        current_password=password_data.current_password,
        new_password=password_data.new_password
    )

    return MessageResponse(message="Password updated successfully")
