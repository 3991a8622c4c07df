"""
Pydantic schemas for request/response validation

JSON field names are camelCase; Python attributes stay snake_case.
"""
from pydantic import BaseModel, EmailStr, Field, validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Generic, TypeVar, Dict, Any
from datetime import datetime
import re

from .domain.models import (
    User, UserSummary, Post, Comment, SuggestedUser, Pagination, UserStats, PostAnalytics,
    clean_post_content, clean_comment_text, clean_name, clean_bio,
)


DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# Request Schemas
class UserRegister(CamelModel):
    """User registration request"""
    name: str
    email: EmailStr
    password: str
    bio: Optional[str] = None

    @validator("name")
    def validate_name(cls, v):
        return clean_name(v)

    @validator("email")
    def normalize_email(cls, v):
        return v.strip().lower()

    @validator("bio")
    def validate_bio(cls, v):
        return clean_bio(v)


class UserLogin(CamelModel):
    """User login request"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordUpdate(CamelModel):
    """Change password request"""
    current_password: str = Field(..., min_length=1)
    new_password: str


class ProfileUpdate(CamelModel):
    """Update profile request"""
    name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None

    @validator("bio")
    def validate_bio(cls, v):
        if v is None:
            return v
        return clean_bio(v)

    @validator("profile_picture")
    def validate_profile_picture(cls, v):
        """Validate picture URL, empty string clears it"""
        if v and not re.match(r"^https?://.+", v.strip()):
            raise ValueError("Profile picture must be a valid URL starting with http:// or https://")
        return v


class PostCreate(CamelModel):
    """Post creation/update request"""
    content: str

    @validator("content")
    def validate_content(cls, v):
        return clean_post_content(v)


class CommentCreate(CamelModel):
    """Comment creation request"""
    text: str

    @validator("text")
    def validate_text(cls, v):
        return clean_comment_text(v)


# Response Schemas
class AuthorSummary(CamelModel):
    """Joined author fields"""
    id: str
    name: str
    email: str
    profile_picture: str = ""

    @classmethod
    def from_domain(cls, summary: Optional[UserSummary]) -> Optional["AuthorSummary"]:
        if summary is None:
            return None
        return cls(
            id=summary.id,
            name=summary.name,
            email=summary.email,
            profile_picture=summary.profile_picture,
        )


class CommentResponse(CamelModel):
    """Comment response"""
    id: str
    user_id: str
    user: Optional[AuthorSummary] = None
    text: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            user_id=comment.user_id,
            user=AuthorSummary.from_domain(comment.user),
            text=comment.text,
            created_at=comment.created_at,
        )


class PostResponse(CamelModel):
    """Post response"""
    id: str
    author_id: str
    author: Optional[AuthorSummary] = None
    content: str
    likes: List[str] = []
    comments: List[CommentResponse] = []
    likes_count: int = 0
    comments_count: int = 0
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            author_id=post.author_id,
            author=AuthorSummary.from_domain(post.author),
            content=post.content,
            likes=post.likes,
            comments=[CommentResponse.from_domain(c) for c in post.comments],
            likes_count=post.likes_count,
            comments_count=post.comments_count,
            is_active=post.is_active,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class UserProfile(CamelModel):
    """User profile response, never carries the credential"""
    id: str
    name: str
    email: str
    bio: str = ""
    profile_picture: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @classmethod
    def profile_fields(cls, user: User) -> Dict[str, Any]:
        return dict(
            id=user.id,
            name=user.name,
            email=user.email,
            bio=user.bio,
            profile_picture=user.profile_picture,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_login=user.last_login,
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserProfile":
        return cls(**cls.profile_fields(user))


class UserWithPostsCount(UserProfile):
    """Profile with active posts count"""
    posts_count: int = 0


class UserProfileDetail(UserWithPostsCount):
    """Public profile page"""
    recent_posts: List[PostResponse] = []


class SuggestedUserResponse(CamelModel):
    """Suggested user response"""
    id: str
    name: str
    email: str
    bio: str = ""
    profile_picture: str = ""
    created_at: Optional[datetime] = None
    posts_count: int = 0

    @classmethod
    def from_domain(cls, user: SuggestedUser) -> "SuggestedUserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            bio=user.bio,
            profile_picture=user.profile_picture,
            created_at=user.created_at,
            posts_count=user.posts_count,
        )


class PaginationResponse(CamelModel):
    """Pagination metadata"""
    page: int
    limit: int
    total: int
    pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_domain(cls, pagination: Pagination) -> "PaginationResponse":
        return cls(
            page=pagination.page,
            limit=pagination.limit,
            total=pagination.total,
            pages=pagination.pages,
            has_next_page=pagination.has_next_page,
            has_prev_page=pagination.has_prev_page,
        )


class UserStatsResponse(CamelModel):
    """User statistics"""
    posts_count: int
    total_likes: int
    total_comments: int
    recent_posts_count: int
    joined_date: Optional[datetime] = None

    @classmethod
    def from_domain(cls, stats: UserStats) -> "UserStatsResponse":
        return cls(
            posts_count=stats.posts_count,
            total_likes=stats.total_likes,
            total_comments=stats.total_comments,
            recent_posts_count=stats.recent_posts_count,
            joined_date=stats.joined_date,
        )


class EngagementResponse(CamelModel):
    likes_per_day: float
    comments_per_day: float


class PostAnalyticsResponse(CamelModel):
    """Post analytics"""
    total_likes: int
    total_comments: int
    likes_list: List[AuthorSummary]
    comments_list: List[CommentResponse]
    created_at: Optional[datetime] = None
    engagement: EngagementResponse

    @classmethod
    def from_domain(cls, analytics: PostAnalytics) -> "PostAnalyticsResponse":
        return cls(
            total_likes=analytics.total_likes,
            total_comments=analytics.total_comments,
            likes_list=[AuthorSummary.from_domain(u) for u in analytics.likes_list],
            comments_list=[CommentResponse.from_domain(c) for c in analytics.comments_list],
            created_at=analytics.created_at,
            engagement=EngagementResponse(
                likes_per_day=analytics.engagement.likes_per_day,
                comments_per_day=analytics.engagement.comments_per_day,
            ),
        )


# Envelope payloads
class AuthData(CamelModel):
    user: UserProfile
    token: str


class UserData(CamelModel):
    user: UserProfile


class MeData(CamelModel):
    user: UserWithPostsCount


class ProfileData(CamelModel):
    user: UserProfileDetail


class UserListData(CamelModel):
    users: List[UserProfile]
    pagination: PaginationResponse


class SuggestedUsersData(CamelModel):
    users: List[SuggestedUserResponse]


class StatsData(CamelModel):
    stats: UserStatsResponse


class PostData(CamelModel):
    post: PostResponse


class PostListData(CamelModel):
    posts: List[PostResponse]
    pagination: PaginationResponse


class TrendingData(CamelModel):
    posts: List[PostResponse]


class LikeData(CamelModel):
    post: PostResponse
    is_liked: bool
    likes_count: int


class CommentData(CamelModel):
    post: PostResponse
    comment: CommentResponse


class AnalyticsData(CamelModel):
    post: PostResponse
    analytics: PostAnalyticsResponse


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard response envelope"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class MessageResponse(BaseModel):
    """Generic message response"""
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response"""
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None
    path: Optional[str] = None
