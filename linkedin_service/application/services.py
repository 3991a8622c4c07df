"""
Application services - Business logic layer
"""
from datetime import datetime, timedelta
from typing import Optional, List, Tuple
import logging
import math

from pymongo.errors import DuplicateKeyError

from ..config import settings
from ..domain.models import (
    User, Post, Comment, SuggestedUser, Pagination, UserStats, PostAnalytics, Engagement,
    clean_post_content, clean_comment_text, clean_name, clean_bio,
)
from ..domain.repositories import IUserRepository, IPostRepository
from ..exceptions import (
    ValidationError, AuthenticationError, AuthorizationError, NotFoundError, ConflictError,
)
from ..infrastructure.auth import (
    hash_password,
    verify_password,
    create_access_token,
    validate_password_strength,
)

logger = logging.getLogger(__name__)

SEARCH_MIN_LENGTH = 2


class AuthService:
    """Authentication service - handles registration, login and credentials"""

    def __init__(self, user_repository: IUserRepository, post_repository: IPostRepository):
        self.user_repo = user_repository
        self.post_repo = post_repository

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        bio: Optional[str] = None
    ) -> Tuple[User, str]:
        """
        Register a new user

        Returns:
            Tuple of (public user, access_token)
        """
        name = clean_name(name)
        bio = clean_bio(bio)

        is_valid, error_msg = validate_password_strength(password)
        if not is_valid:
            raise ValidationError(error_msg)

        if await self.user_repo.find_by_email(email):
            raise ConflictError("User already exists with this email")

        try:
            user = await self.user_repo.create(
                name=name,
                email=email,
                password_hash=hash_password(password),
                bio=bio
            )
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email")

        logger.info(f"Registered user {user.id}")

        token = create_access_token(data={"sub": user.id})
        return user, token

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Login with email and password

        Returns:
            Tuple of (public user, access_token)
        """
        user = await self.user_repo.find_by_email(email, with_password=True)

        if not user:
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        if not verify_password(password, user.password_hash):
            logger.warning(f"Failed login for user {user.id}")
            raise AuthenticationError("Invalid email or password")

        await self.user_repo.update_last_login(user.id)

        refreshed = await self.user_repo.find_by_id(user.id)
        token = create_access_token(data={"sub": user.id})
        return refreshed, token

    async def get_me(self, user_id: str) -> Tuple[User, int]:
        """Current user with their active posts count"""
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        posts_count = await self.post_repo.count_by_author(user_id)
        return user, posts_count

    async def logout(self, user_id: str) -> None:
        """Tokens are not revoked; logout is only recorded"""
        await self.user_repo.update_last_logout(user_id)

    async def change_password(
        self,
        user_id: str,
        current_password: str,
        new_password: str
    ) -> None:
        """Change user password"""
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        # find_by_id never loads the hash
        with_secret = await self.user_repo.find_by_email(user.email, with_password=True)

        if not verify_password(current_password, with_secret.password_hash):
            raise ValidationError("Current password is incorrect")

        is_valid, error_msg = validate_password_strength(new_password)
        if not is_valid:
            raise ValidationError(error_msg)

        await self.user_repo.update_password(user_id, hash_password(new_password))
        logger.info(f"Password changed for user {user_id}")


class UserService:
    """User service - handles profile and user discovery logic"""

    def __init__(self, user_repository: IUserRepository, post_repository: IPostRepository):
        self.user_repo = user_repository
        self.post_repo = post_repository

    async def get_active_user(self, user_id: str) -> User:
        user = await self.user_repo.find_by_id(user_id)
        if not user or not user.is_active:
            raise NotFoundError("User not found")
        return user

    async def get_profile(self, user_id: str) -> Tuple[User, int, List[Post]]:
        """
        Public profile page

        Returns:
            Tuple of (user, posts_count, recent_posts)
        """
        user = await self.get_active_user(user_id)

        posts_count = await self.post_repo.count_by_author(user_id)
        recent_posts, _ = await self.post_repo.find_active(
            author_id=user_id,
            skip=0,
            limit=settings.PROFILE_RECENT_POSTS
        )

        return user, posts_count, recent_posts

    async def update_profile(
        self,
        user_id: str,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        profile_picture: Optional[str] = None
    ) -> User:
        """Update current user's profile, empty names are ignored"""
        updates = {}
        if name and name.strip():
            updates["name"] = clean_name(name)
        if bio is not None:
            updates["bio"] = clean_bio(bio)
        if profile_picture is not None:
            updates["profile_picture"] = profile_picture.strip()

        if not updates:
            user = await self.user_repo.find_by_id(user_id)
        else:
            user = await self.user_repo.update(user_id, updates)

        if not user:
            raise NotFoundError("User not found")

        logger.info(f"Updated profile of user {user_id}: {sorted(updates)}")
        return user

    async def search_users(
        self,
        query: Optional[str],
        page: int,
        limit: int
    ) -> Tuple[List[User], Pagination]:
        """Search active users by name, email or bio"""
        query = (query or "").strip()
        if len(query) < SEARCH_MIN_LENGTH:
            raise ValidationError(f"Search query must be at least {SEARCH_MIN_LENGTH} characters")

        skip = (page - 1) * limit
        users, total = await self.user_repo.search(query, skip, limit)
        return users, Pagination(page=page, limit=limit, total=total)

    async def get_user_posts(
        self,
        user_id: str,
        page: int,
        limit: int
    ) -> Tuple[List[Post], Pagination]:
        """Posts of one active user, newest first"""
        await self.get_active_user(user_id)

        posts, total = await self.post_repo.find_active(
            author_id=user_id,
            skip=(page - 1) * limit,
            limit=limit
        )
        return posts, Pagination(page=page, limit=limit, total=total)

    async def get_stats(self, user: User) -> UserStats:
        """Engagement totals across the user's active posts"""
        posts = await self.post_repo.find_by_author_raw(user.id)
        since = datetime.utcnow() - timedelta(days=settings.USER_STATS_RECENT_DAYS)
        recent_posts_count = await self.post_repo.count_by_author(user.id, since=since)

        return UserStats(
            posts_count=len(posts),
            total_likes=sum(post.likes_count for post in posts),
            total_comments=sum(post.comments_count for post in posts),
            recent_posts_count=recent_posts_count,
            joined_date=user.created_at,
        )


class PostService:
    """Post service - content lifecycle and engagement"""

    def __init__(self, post_repository: IPostRepository, user_repository: IUserRepository):
        self.post_repo = post_repository
        self.user_repo = user_repository

    async def get_post(self, post_id: str) -> Post:
        """Get active post by ID"""
        post = await self.post_repo.find_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found")
        return post

    async def _get_owned_post(self, post_id: str, actor_id: str, action: str) -> Post:
        post = await self.get_post(post_id)
        if not post.is_author(actor_id):
            logger.warning(f"User {actor_id} denied {action} on post {post_id}")
            raise AuthorizationError(f"Not authorized to {action} this post")
        return post

    async def create_post(self, author_id: str, content: str) -> Post:
        """Create a new post"""
        post = await self.post_repo.create(author_id, clean_post_content(content))
        logger.info(f"User {author_id} created post {post.id}")
        return post

    async def update_post(self, post_id: str, actor_id: str, content: str) -> Post:
        """Replace content, author only"""
        content = clean_post_content(content)
        await self._get_owned_post(post_id, actor_id, "update")

        post = await self.post_repo.update_content(post_id, content)
        if not post:
            raise NotFoundError("Post not found")
        return post

    async def delete_post(self, post_id: str, actor_id: str) -> None:
        """Soft delete, author only"""
        await self._get_owned_post(post_id, actor_id, "delete")

        if not await self.post_repo.soft_delete(post_id):
            raise NotFoundError("Post not found")
        logger.info(f"User {actor_id} deleted post {post_id}")

    async def toggle_like(self, post_id: str, user_id: str) -> Tuple[Post, bool]:
        """
        Like the post, or unlike it if already liked

        Returns:
            Tuple of (updated post, is_liked)
        """
        post = await self.get_post(post_id)

        if post.is_liked_by(user_id):
            updated = await self.post_repo.remove_like(post_id, user_id)
        else:
            updated = await self.post_repo.add_like(post_id, user_id)

        if updated is None:
            # A concurrent toggle by the same user already moved the state
            updated = await self.get_post(post_id)

        return updated, updated.is_liked_by(user_id)

    async def add_comment(self, post_id: str, user_id: str, text: str) -> Tuple[Post, Comment]:
        """
        Append a comment

        Returns:
            Tuple of (post with comment authors joined, new comment)
        """
        text = clean_comment_text(text)

        created = await self.post_repo.push_comment(post_id, user_id, text)
        if not created:
            raise NotFoundError("Post not found")

        post = await self.get_post(post_id)
        return post, post.find_comment(created.id) or created

    async def remove_comment(self, post_id: str, comment_id: str, actor_id: str) -> None:
        """Delete a comment permanently, comment author only"""
        post = await self.get_post(post_id)

        comment = post.find_comment(comment_id)
        if not comment:
            raise NotFoundError("Comment not found")

        if not comment.is_author(actor_id):
            logger.warning(f"User {actor_id} denied deleting comment {comment_id}")
            raise AuthorizationError("Not authorized to delete this comment")

        if not await self.post_repo.pull_comment(post_id, comment_id):
            raise NotFoundError("Comment not found")

    async def get_analytics(self, post_id: str, actor_id: str) -> Tuple[Post, PostAnalytics]:
        """Engagement breakdown, author only"""
        post = await self._get_owned_post(post_id, actor_id, "view analytics for")

        likers = await self.user_repo.find_summaries(post.likes)
        age_seconds = (datetime.utcnow() - post.created_at).total_seconds()
        days = max(1, math.ceil(age_seconds / 86400))

        analytics = PostAnalytics(
            total_likes=post.likes_count,
            total_comments=post.comments_count,
            likes_list=[likers[uid] for uid in post.likes if uid in likers],
            comments_list=post.comments,
            created_at=post.created_at,
            engagement=Engagement(
                likes_per_day=post.likes_count / days,
                comments_per_day=post.comments_count / days,
            ),
        )
        return post, analytics


class FeedService:
    """Feed service - listings, trending ranking and suggestions"""

    def __init__(self, post_repository: IPostRepository):
        self.post_repo = post_repository

    async def list_posts(
        self,
        page: int,
        limit: int,
        author_id: Optional[str] = None
    ) -> Tuple[List[Post], Pagination]:
        """Active posts newest first, optionally for one author"""
        posts, total = await self.post_repo.find_active(
            author_id=author_id,
            skip=(page - 1) * limit,
            limit=limit
        )
        return posts, Pagination(page=page, limit=limit, total=total)

    async def get_trending(self) -> List[Post]:
        """Top posts of the trending window"""
        since = datetime.utcnow() - timedelta(hours=settings.TRENDING_WINDOW_HOURS)
        return await self.post_repo.find_trending(since, settings.TRENDING_LIMIT)

    async def get_suggested_users(self, limit: Optional[int] = None) -> List[SuggestedUser]:
        """
        Users who posted recently, most active first

        A missing or non-positive limit falls back to SUGGESTED_DEFAULT_LIMIT.
        """
        if not limit or limit < 1:
            limit = settings.SUGGESTED_DEFAULT_LIMIT
        since = datetime.utcnow() - timedelta(days=settings.SUGGESTED_WINDOW_DAYS)
        return await self.post_repo.find_active_authors(since, limit)
