"""
User routes
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from ...config import settings
from ...domain.models import User
from ...schemas import (
    ProfileUpdate,
    ApiResponse, UserData, ProfileData, UserListData, SuggestedUsersData, StatsData, PostListData,
    UserProfile, UserProfileDetail, SuggestedUserResponse, UserStatsResponse,
    PostResponse, PaginationResponse,
)
from ...application.services import UserService, FeedService
from ..dependencies import get_user_service, get_feed_service, get_current_user


router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/search", response_model=ApiResponse[UserListData])
async def search_users(
    q: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_service: UserService = Depends(get_user_service)
):
    """
    Search active users by name, email or bio

    - **q**: Case-insensitive substring, at least 2 characters
    """
    users, pagination = await user_service.search_users(q, page=page, limit=limit)
    return ApiResponse(
        data=UserListData(
            users=[UserProfile.from_domain(u) for u in users],
            pagination=PaginationResponse.from_domain(pagination)
        )
    )


@router.get("/suggested", response_model=ApiResponse[SuggestedUsersData])
async def get_suggested_users(
    limit: Optional[int] = Query(None, le=settings.SUGGESTED_MAX_LIMIT),
    feed_service: FeedService = Depends(get_feed_service)
):
    """
    Users who posted most in the last 7 days

    - **limit**: Number of users, missing or non-positive means 5
    """
    users = await feed_service.get_suggested_users(limit)
    return ApiResponse(
        data=SuggestedUsersData(users=[SuggestedUserResponse.from_domain(u) for u in users])
    )


@router.get("/stats", response_model=ApiResponse[StatsData])
async def get_user_stats(
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Engagement totals of the current user

    Requires authentication.
    """
    stats = await user_service.get_stats(current_user)
    return ApiResponse(data=StatsData(stats=UserStatsResponse.from_domain(stats)))


@router.get("/profile/{user_id}", response_model=ApiResponse[ProfileData])
async def get_user_profile(
    user_id: str,
    user_service: UserService = Depends(get_user_service)
):
    """Public profile with posts count and recent posts"""
    user, posts_count, recent_posts = await user_service.get_profile(user_id)
    return ApiResponse(
        data=ProfileData(
            user=UserProfileDetail(
                **UserProfile.profile_fields(user),
                posts_count=posts_count,
                recent_posts=[PostResponse.from_domain(p) for p in recent_posts]
            )
        )
    )


@router.put("/profile", response_model=ApiResponse[UserData])
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """
    Update current user's profile

    - **name**: Optional new name, ignored when empty
    - **bio**: Optional bio (max 300 characters)
    - **profilePicture**: Optional http(s) URL, empty string clears it
    """
    user = await user_service.update_profile(
        user_id=current_user.id,
        name=profile_data.name,
        bio=profile_data.bio,
        profile_picture=profile_data.profile_picture
    )
    return ApiResponse(
        message="Profile updated successfully",
        data=UserData(user=UserProfile.from_domain(user))
    )


@router.get("/{user_id}/posts", response_model=ApiResponse[PostListData])
async def get_user_posts(
    user_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_service: UserService = Depends(get_user_service)
):
    """Active posts of one user, newest first"""
    posts, pagination = await user_service.get_user_posts(user_id, page=page, limit=limit)
    return ApiResponse(
        data=PostListData(
            posts=[PostResponse.from_domain(p) for p in posts],
            pagination=PaginationResponse.from_domain(pagination)
        )
    )
