"""
Repository implementations - Data access layer
"""
from datetime import datetime
from typing import Optional, List, Dict, Any, Tuple
import re

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from ..config import settings
from ..domain.models import User, UserSummary, Post, Comment, SuggestedUser
from ..domain.repositories import IUserRepository, IPostRepository


# Never read the credential unless a login needs it
PUBLIC_USER_PROJECTION = {"password": 0}
SUMMARY_PROJECTION = {"name": 1, "email": 1, "profile_picture": 1}


def to_object_id(value: Optional[str]) -> Optional[ObjectId]:
    """Parse a hex identifier, None if it cannot be an ObjectId"""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def _summary_from_document(doc: Dict[str, Any]) -> UserSummary:
    return UserSummary(
        id=str(doc["_id"]),
        name=doc.get("name", ""),
        email=doc.get("email", ""),
        profile_picture=doc.get("profile_picture", ""),
    )


class UserRepository(IUserRepository):
    """User repository implementation using MongoDB"""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db[settings.MONGODB_USERS_COLLECTION]

    def _document_to_user(self, doc: Optional[Dict[str, Any]]) -> Optional[User]:
        """Convert database document to User model"""
        if not doc:
            return None
        return User(
            id=str(doc["_id"]),
            name=doc["name"],
            email=doc["email"],
            bio=doc.get("bio", ""),
            profile_picture=doc.get("profile_picture", ""),
            is_active=doc.get("is_active", True),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
            last_login=doc.get("last_login"),
            last_logout=doc.get("last_logout"),
            password_hash=doc.get("password"),
        )

    async def create(self, name: str, email: str, password_hash: str, bio: str = "") -> User:
        """Create a new user"""
        now = datetime.utcnow()
        doc = {
            "name": name,
            "email": email.lower(),
            "password": password_hash,
            "bio": bio,
            "profile_picture": "",
            "is_active": True,
            "last_login": now,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return self._document_to_user(doc).public_profile()

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """Find user by ID"""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid}, PUBLIC_USER_PROJECTION)
        return self._document_to_user(doc)

    async def find_by_email(self, email: str, with_password: bool = False) -> Optional[User]:
        """Find user by email"""
        projection = None if with_password else PUBLIC_USER_PROJECTION
        doc = await self.collection.find_one({"email": email.strip().lower()}, projection)
        return self._document_to_user(doc)

    async def find_summaries(self, user_ids: List[str]) -> Dict[str, UserSummary]:
        """Public author fields for a batch of users"""
        oids = [oid for oid in (to_object_id(uid) for uid in set(user_ids)) if oid is not None]
        if not oids:
            return {}
        cursor = self.collection.find({"_id": {"$in": oids}}, SUMMARY_PROJECTION)
        docs = await cursor.to_list(length=None)
        return {str(doc["_id"]): _summary_from_document(doc) for doc in docs}

    async def update(self, user_id: str, updates: Dict[str, Any]) -> Optional[User]:
        """Update user information"""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**updates, "updated_at": datetime.utcnow()}},
            projection=PUBLIC_USER_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
        return self._document_to_user(doc)

    async def update_password(self, user_id: str, password_hash: str) -> None:
        """Update user password"""
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"password": password_hash, "updated_at": datetime.utcnow()}},
        )

    async def update_last_login(self, user_id: str) -> None:
        """Refresh user's last login timestamp"""
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"last_login": datetime.utcnow()}},
        )

    async def update_last_logout(self, user_id: str) -> None:
        """Record user's logout timestamp"""
        await self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"last_logout": datetime.utcnow()}},
        )

    async def search(self, query: str, skip: int, limit: int) -> Tuple[List[User], int]:
        """Search active users by name, email or bio"""
        pattern = {"$regex": re.escape(query), "$options": "i"}
        filter_doc = {
            "is_active": True,
            "$or": [
                {"name": pattern},
                {"email": pattern},
                {"bio": pattern},
            ],
        }

        total = await self.collection.count_documents(filter_doc)

        cursor = (
            self.collection.find(filter_doc, PUBLIC_USER_PROJECTION)
            .sort("name", 1)
            .skip(skip)
            .limit(limit)
        )
        docs = await cursor.to_list(length=limit)

        return [self._document_to_user(doc) for doc in docs], total


class PostRepository(IPostRepository):
    """Post repository implementation using MongoDB"""

    def __init__(self, db: AsyncIOMotorDatabase, user_repository: IUserRepository):
        self.collection = db[settings.MONGODB_POSTS_COLLECTION]
        self.user_repo = user_repository

    def _document_to_comment(
        self,
        doc: Dict[str, Any],
        users: Dict[str, UserSummary]
    ) -> Comment:
        user_id = str(doc["user"])
        return Comment(
            id=str(doc["_id"]),
            user_id=user_id,
            text=doc["text"],
            created_at=doc["created_at"],
            user=users.get(user_id),
        )

    def _document_to_post(
        self,
        doc: Dict[str, Any],
        users: Dict[str, UserSummary]
    ) -> Post:
        """Convert database document to Post model"""
        author_id = str(doc["author"])
        return Post(
            id=str(doc["_id"]),
            author_id=author_id,
            content=doc["content"],
            likes=[str(like) for like in doc.get("likes", [])],
            comments=[self._document_to_comment(c, users) for c in doc.get("comments", [])],
            is_active=doc.get("is_active", True),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
            author=users.get(author_id),
        )

    async def _populate(self, docs: List[Dict[str, Any]]) -> List[Post]:
        """Resolve post authors and comment authors in one users query"""
        user_ids = set()
        for doc in docs:
            user_ids.add(str(doc["author"]))
            for comment in doc.get("comments", []):
                user_ids.add(str(comment["user"]))

        users = await self.user_repo.find_summaries(list(user_ids))
        return [self._document_to_post(doc, users) for doc in docs]

    async def _populate_one(self, doc: Optional[Dict[str, Any]]) -> Optional[Post]:
        if not doc:
            return None
        posts = await self._populate([doc])
        return posts[0]

    async def create(self, author_id: str, content: str) -> Post:
        """Create a new post"""
        now = datetime.utcnow()
        doc = {
            "author": to_object_id(author_id),
            "content": content,
            "likes": [],
            "comments": [],
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return await self._populate_one(doc)

    async def find_by_id(self, post_id: str) -> Optional[Post]:
        """Find active post by ID"""
        oid = to_object_id(post_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid, "is_active": True})
        return await self._populate_one(doc)

    async def find_active(
        self,
        author_id: Optional[str] = None,
        skip: int = 0,
        limit: int = 10
    ) -> Tuple[List[Post], int]:
        """List active posts newest first"""
        query: Dict[str, Any] = {"is_active": True}

        if author_id is not None:
            author_oid = to_object_id(author_id)
            if author_oid is None:
                return [], 0
            query["author"] = author_oid

        total = await self.collection.count_documents(query)

        cursor = self.collection.find(query).sort("created_at", -1).skip(skip).limit(limit)
        docs = await cursor.to_list(length=limit)

        return await self._populate(docs), total

    async def count_by_author(self, author_id: str, since: Optional[datetime] = None) -> int:
        """Count active posts of an author"""
        query: Dict[str, Any] = {"author": to_object_id(author_id), "is_active": True}
        if since is not None:
            query["created_at"] = {"$gte": since}
        return await self.collection.count_documents(query)

    async def find_by_author_raw(self, author_id: str) -> List[Post]:
        """All active posts of an author without joins"""
        cursor = self.collection.find({"author": to_object_id(author_id), "is_active": True})
        docs = await cursor.to_list(length=None)
        return [self._document_to_post(doc, {}) for doc in docs]

    async def update_content(self, post_id: str, content: str) -> Optional[Post]:
        """Replace post content"""
        doc = await self.collection.find_one_and_update(
            {"_id": to_object_id(post_id), "is_active": True},
            {"$set": {"content": content, "updated_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return await self._populate_one(doc)

    async def soft_delete(self, post_id: str) -> bool:
        """Mark post inactive, the document stays in the collection"""
        result = await self.collection.update_one(
            {"_id": to_object_id(post_id), "is_active": True},
            {"$set": {"is_active": False, "updated_at": datetime.utcnow()}},
        )
        return result.modified_count > 0

    async def add_like(self, post_id: str, user_id: str) -> Optional[Post]:
        """Add like, matches only while the user has not liked yet"""
        user_oid = to_object_id(user_id)
        doc = await self.collection.find_one_and_update(
            {"_id": to_object_id(post_id), "is_active": True, "likes": {"$ne": user_oid}},
            {"$addToSet": {"likes": user_oid}},
            return_document=ReturnDocument.AFTER,
        )
        return await self._populate_one(doc)

    async def remove_like(self, post_id: str, user_id: str) -> Optional[Post]:
        """Remove like, matches only while the user has liked"""
        user_oid = to_object_id(user_id)
        doc = await self.collection.find_one_and_update(
            {"_id": to_object_id(post_id), "is_active": True, "likes": user_oid},
            {"$pull": {"likes": user_oid}},
            return_document=ReturnDocument.AFTER,
        )
        return await self._populate_one(doc)

    async def push_comment(self, post_id: str, user_id: str, text: str) -> Optional[Comment]:
        """Append a comment to an active post"""
        comment_doc = {
            "_id": ObjectId(),
            "user": to_object_id(user_id),
            "text": text,
            "created_at": datetime.utcnow(),
        }
        result = await self.collection.update_one(
            {"_id": to_object_id(post_id), "is_active": True},
            {"$push": {"comments": comment_doc}},
        )
        if result.matched_count == 0:
            return None
        return self._document_to_comment(comment_doc, {})

    async def pull_comment(self, post_id: str, comment_id: str) -> bool:
        """Remove a comment permanently"""
        result = await self.collection.update_one(
            {"_id": to_object_id(post_id)},
            {"$pull": {"comments": {"_id": to_object_id(comment_id)}}},
        )
        return result.modified_count > 0

    async def find_trending(self, since: datetime, limit: int) -> List[Post]:
        """Most engaged posts: likes, then comments, then recency"""
        pipeline = [
            {"$match": {"is_active": True, "created_at": {"$gte": since}}},
            {"$addFields": {
                "likes_count": {"$size": "$likes"},
                "comments_count": {"$size": "$comments"},
            }},
            {"$sort": {"likes_count": -1, "comments_count": -1, "created_at": -1}},
            {"$limit": limit},
            {"$lookup": {
                "from": settings.MONGODB_USERS_COLLECTION,
                "localField": "author",
                "foreignField": "_id",
                "as": "author_doc",
            }},
            {"$unwind": "$author_doc"},
        ]

        docs = await self.collection.aggregate(pipeline).to_list(length=limit)

        posts = []
        for doc in docs:
            author = _summary_from_document(doc["author_doc"])
            posts.append(self._document_to_post(doc, {author.id: author}))
        return posts

    async def find_active_authors(self, since: datetime, limit: int) -> List[SuggestedUser]:
        """Active users ranked by how much they posted since `since`"""
        pipeline = [
            {"$match": {"is_active": True, "created_at": {"$gte": since}}},
            {"$group": {"_id": "$author", "posts_count": {"$sum": 1}}},
            {"$lookup": {
                "from": settings.MONGODB_USERS_COLLECTION,
                "localField": "_id",
                "foreignField": "_id",
                "as": "user",
            }},
            {"$unwind": "$user"},
            {"$match": {"user.is_active": True}},
            {"$sort": {"posts_count": -1, "user.created_at": -1}},
            {"$limit": limit},
        ]

        docs = await self.collection.aggregate(pipeline).to_list(length=limit)

        return [
            SuggestedUser(
                id=str(doc["user"]["_id"]),
                name=doc["user"]["name"],
                email=doc["user"]["email"],
                bio=doc["user"].get("bio", ""),
                profile_picture=doc["user"].get("profile_picture", ""),
                created_at=doc["user"].get("created_at"),
                posts_count=doc["posts_count"],
            )
            for doc in docs
        ]
