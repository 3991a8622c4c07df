"""
MongoDB database connection and utilities
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)


class MongoDB:
    """MongoDB connection manager"""

    def __init__(self):
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self, client: Optional[AsyncIOMotorClient] = None):
        """
        Connect to MongoDB

        Args:
            client: Optional pre-built client, used instead of MONGODB_URL
        """
        self.client = client or AsyncIOMotorClient(
            settings.MONGODB_URL,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
        )
        self.db = self.client[settings.MONGODB_DATABASE]

        await self.create_indexes()

        logger.info(f"Connected to MongoDB database '{settings.MONGODB_DATABASE}'")

    async def disconnect(self):
        """Disconnect from MongoDB"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
        self.client = None
        self.db = None

    async def create_indexes(self):
        """Create database indexes for optimization"""
        users = self.db[settings.MONGODB_USERS_COLLECTION]
        posts = self.db[settings.MONGODB_POSTS_COLLECTION]

        # Email is the login key and must be globally unique
        await users.create_index("email", unique=True)
        await users.create_index([("created_at", -1)])

        # Author feed sorted by date
        await posts.create_index([("author", 1), ("created_at", -1)])

        # Global feed and trending window
        await posts.create_index([("created_at", -1)])

        await posts.create_index("likes")

        logger.info("MongoDB indexes created")


# Global MongoDB instance
mongodb = MongoDB()


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency for getting database instance"""
    return mongodb.db
