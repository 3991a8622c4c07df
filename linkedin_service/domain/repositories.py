"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple

from .models import User, UserSummary, Post, Comment, SuggestedUser


class IUserRepository(ABC):
    """User repository interface"""

    @abstractmethod
    async def create(self, name: str, email: str, password_hash: str, bio: str = "") -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find user by ID"""
        pass

    @abstractmethod
    async def find_by_email(self, email: str, with_password: bool = False) -> Optional[User]:
        """Find user by email (case-insensitive)"""
        pass

    @abstractmethod
    async def find_summaries(self, user_ids: List[str]) -> Dict[str, UserSummary]:
        """Public author fields for a batch of users, keyed by ID"""
        pass

    @abstractmethod
    async def update(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        """Update user profile fields"""
        pass

    @abstractmethod
    async def update_password(self, user_id: str, password_hash: str) -> None:
        """Update user password"""
        pass

    @abstractmethod
    async def update_last_login(self, user_id: str) -> None:
        """Refresh user's last login timestamp"""
        pass

    @abstractmethod
    async def update_last_logout(self, user_id: str) -> None:
        """Record user's logout timestamp"""
        pass

    @abstractmethod
    async def search(self, query: str, skip: int, limit: int) -> Tuple[List[User], int]:
        """Search active users by name, email or bio"""
        pass


class IPostRepository(ABC):
    """Post repository interface"""

    @abstractmethod
    async def create(self, author_id: str, content: str) -> Post:
        """Create a new post"""
        pass

    @abstractmethod
    async def find_by_id(self, post_id: str) -> Optional[Post]:
        """Find an active post with author and comment authors joined"""
        pass

    @abstractmethod
    async def find_active(
        self,
        author_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Post], int]:
        """List active posts newest first, returns (posts, total)"""
        pass

    @abstractmethod
    async def count_by_author(self, author_id: str, since: Optional[datetime] = None) -> int:
        """Count active posts of an author"""
        pass

    @abstractmethod
    async def find_by_author_raw(self, author_id: str) -> List[Post]:
        """All active posts of an author without joins"""
        pass

    @abstractmethod
    async def update_content(self, post_id: str, content: str) -> Optional[Post]:
        """Replace post content"""
        pass

    @abstractmethod
    async def soft_delete(self, post_id: str) -> bool:
        """Mark post inactive"""
        pass

    @abstractmethod
    async def add_like(self, post_id: str, user_id: str) -> Optional[Post]:
        """Add user to likes if absent, None when nothing matched"""
        pass

    @abstractmethod
    async def remove_like(self, post_id: str, user_id: str) -> Optional[Post]:
        """Remove user from likes if present, None when nothing matched"""
        pass

    @abstractmethod
    async def push_comment(self, post_id: str, user_id: str, text: str) -> Optional[Comment]:
        """Append a comment to an active post"""
        pass

    @abstractmethod
    async def pull_comment(self, post_id: str, comment_id: str) -> bool:
        """Remove a comment from a post"""
        pass

    @abstractmethod
    async def find_trending(self, since: datetime, limit: int) -> List[Post]:
        """Most engaged active posts created after `since`"""
        pass

    @abstractmethod
    async def find_active_authors(self, since: datetime, limit: int) -> List[SuggestedUser]:
        """Active users ranked by active posts created after `since`"""
        pass
