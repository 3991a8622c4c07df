"""
FastAPI dependencies
"""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import Optional

from ..database import get_db
from ..domain.models import User
from ..exceptions import AuthenticationError
from ..infrastructure.auth import decode_token
from ..infrastructure.repositories import UserRepository, PostRepository
from ..application.services import AuthService, UserService, PostService, FeedService


# Security scheme
security = HTTPBearer(auto_error=False)


async def get_user_repository(db: AsyncIOMotorDatabase = Depends(get_db)) -> UserRepository:
    """Get user repository dependency"""
    return UserRepository(db)


async def get_post_repository(
    db: AsyncIOMotorDatabase = Depends(get_db),
    user_repo: UserRepository = Depends(get_user_repository)
) -> PostRepository:
    """Get post repository dependency"""
    return PostRepository(db, user_repo)


async def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    post_repo: PostRepository = Depends(get_post_repository)
) -> AuthService:
    """Get auth service dependency"""
    return AuthService(user_repo, post_repo)


async def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
    post_repo: PostRepository = Depends(get_post_repository)
) -> UserService:
    """Get user service dependency"""
    return UserService(user_repo, post_repo)


async def get_post_service(
    post_repo: PostRepository = Depends(get_post_repository),
    user_repo: UserRepository = Depends(get_user_repository)
) -> PostService:
    """Get post service dependency"""
    return PostService(post_repo, user_repo)


async def get_feed_service(
    post_repo: PostRepository = Depends(get_post_repository)
) -> FeedService:
    """Get feed service dependency"""
    return FeedService(post_repo)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: UserRepository = Depends(get_user_repository)
) -> User:
    """
    Get current authenticated user from JWT token

    Raises:
        AuthenticationError: If token is missing, invalid, or user is not found
    """
    if not credentials:
        raise AuthenticationError("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    if not payload or payload.get("type") != "access":
        raise AuthenticationError("Not authorized, token failed")

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    user = await user_repo.find_by_id(user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    return user
