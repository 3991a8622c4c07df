"""
Domain models - Core business entities
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List
import math
import re

from ..exceptions import ValidationError


POST_MAX_LENGTH = 1000
COMMENT_MAX_LENGTH = 500
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
BIO_MAX_LENGTH = 300

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")


def clean_post_content(content: str) -> str:
    """Trim post content and check its length"""
    content = (content or "").strip()
    if not 1 <= len(content) <= POST_MAX_LENGTH:
        raise ValidationError(f"Post content must be between 1 and {POST_MAX_LENGTH} characters")
    return content


def clean_comment_text(text: str) -> str:
    """Trim comment text and check its length"""
    text = (text or "").strip()
    if not 1 <= len(text) <= COMMENT_MAX_LENGTH:
        raise ValidationError(f"Comment must be between 1 and {COMMENT_MAX_LENGTH} characters")
    return text


def clean_name(name: str) -> str:
    """Trim a display name; letters and spaces only"""
    name = (name or "").strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise ValidationError(
            f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        )
    if not NAME_PATTERN.match(name):
        raise ValidationError("Name can only contain letters and spaces")
    return name


def clean_bio(bio: Optional[str]) -> str:
    bio = (bio or "").strip()
    if len(bio) > BIO_MAX_LENGTH:
        raise ValidationError(f"Bio cannot exceed {BIO_MAX_LENGTH} characters")
    return bio


@dataclass
class UserSummary:
    """Public author fields joined into posts and comments"""
    id: str
    name: str
    email: str
    profile_picture: str = ""


@dataclass
class User:
    """User domain model"""
    id: str
    name: str
    email: str
    bio: str = ""
    profile_picture: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
    last_logout: Optional[datetime] = None
    password_hash: Optional[str] = None

    def public_profile(self) -> "User":
        """Copy of the user without the credential"""
        return User(
            id=self.id,
            name=self.name,
            email=self.email,
            bio=self.bio,
            profile_picture=self.profile_picture,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
            last_login=self.last_login,
            last_logout=self.last_logout,
        )


@dataclass
class Comment:
    """Comment embedded in a post"""
    id: str
    user_id: str
    text: str
    created_at: datetime
    user: Optional[UserSummary] = None

    def is_author(self, user_id: str) -> bool:
        """Check if the given user_id wrote this comment"""
        return self.user_id == user_id


@dataclass
class Post:
    """Post domain model"""
    id: str
    author_id: str
    content: str
    likes: List[str] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    author: Optional[UserSummary] = None

    @property
    def likes_count(self) -> int:
        return len(self.likes)

    @property
    def comments_count(self) -> int:
        return len(self.comments)

    def is_author(self, user_id: str) -> bool:
        """Check if the given user_id is the owner of this post"""
        return self.author_id == user_id

    def is_liked_by(self, user_id: str) -> bool:
        return user_id in self.likes

    def find_comment(self, comment_id: str) -> Optional[Comment]:
        for comment in self.comments:
            if comment.id == comment_id:
                return comment
        return None


@dataclass
class SuggestedUser:
    """User ranked by recent posting activity"""
    id: str
    name: str
    email: str
    bio: str = ""
    profile_picture: str = ""
    created_at: Optional[datetime] = None
    posts_count: int = 0


@dataclass
class Pagination:
    """Page metadata for listings"""
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


@dataclass
class UserStats:
    """Engagement totals for one author"""
    posts_count: int
    total_likes: int
    total_comments: int
    recent_posts_count: int
    joined_date: Optional[datetime] = None


@dataclass
class Engagement:
    likes_per_day: float
    comments_per_day: float


@dataclass
class PostAnalytics:
    """Owner-only breakdown of a post's engagement"""
    total_likes: int
    total_comments: int
    likes_list: List[UserSummary]
    comments_list: List[Comment]
    created_at: Optional[datetime]
    engagement: Engagement
