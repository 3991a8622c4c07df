"""
Pytest configuration and fixtures for API testing.

The application runs in-process on an httpx ASGI transport; MongoDB is
replaced by mongomock-motor's in-memory client.
"""
from datetime import datetime
from typing import Optional, List

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from linkedin_service.config import settings
from linkedin_service.database import mongodb
from linkedin_service.main import app

API = settings.API_PREFIX
DEFAULT_PASSWORD = "Secret123"


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database with indexes"""
    await mongodb.connect(client=AsyncMongoMockClient())
    yield mongodb.db
    mongodb.client = None
    mongodb.db = None


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def api(client, db):
    """API client fixture - provides helper methods for API calls."""
    class APIClient:
        def __init__(self):
            self.client = client
            self.db = db
            self._counter = 0

        async def get(self, path: str, token: Optional[str] = None, **kwargs):
            return await self.client.get(f"{API}{path}", headers=self.headers(token), **kwargs)

        async def post(self, path: str, json: dict = None, token: Optional[str] = None):
            return await self.client.post(f"{API}{path}", json=json, headers=self.headers(token))

        async def put(self, path: str, json: dict = None, token: Optional[str] = None):
            return await self.client.put(f"{API}{path}", json=json, headers=self.headers(token))

        async def delete(self, path: str, token: Optional[str] = None):
            return await self.client.delete(f"{API}{path}", headers=self.headers(token))

        @staticmethod
        def headers(token: Optional[str]) -> dict:
            return {"Authorization": f"Bearer {token}"} if token else {}

        async def register(
            self,
            name: str = "Test User",
            email: Optional[str] = None,
            password: str = DEFAULT_PASSWORD,
            bio: Optional[str] = None,
        ) -> dict:
            """Register a user, returns {"user", "token"}"""
            if email is None:
                self._counter += 1
                email = f"user{self._counter}@example.com"
            payload = {"name": name, "email": email, "password": password}
            if bio is not None:
                payload["bio"] = bio
            r = await self.post("/auth/register", json=payload)
            assert r.status_code == 201, f"Register failed: {r.text}"
            return r.json()["data"]

        async def create_post(self, token: str, content: str = "hello") -> dict:
            r = await self.post("/posts", json={"content": content}, token=token)
            assert r.status_code == 201, f"Create post failed: {r.text}"
            return r.json()["data"]["post"]

        async def seed_post(
            self,
            author_id: str,
            content: str = "seeded",
            created_at: Optional[datetime] = None,
            likes: Optional[List[str]] = None,
            comments: int = 0,
            is_active: bool = True,
        ) -> str:
            """Insert a post document directly, with explicit timestamps and engagement"""
            created_at = created_at or datetime.utcnow()
            doc = {
                "author": ObjectId(author_id),
                "content": content,
                "likes": [ObjectId(uid) for uid in (likes or [])],
                "comments": [
                    {
                        "_id": ObjectId(),
                        "user": ObjectId(author_id),
                        "text": f"comment {i}",
                        "created_at": created_at,
                    }
                    for i in range(comments)
                ],
                "is_active": is_active,
                "created_at": created_at,
                "updated_at": created_at,
            }
            result = await self.db[settings.MONGODB_POSTS_COLLECTION].insert_one(doc)
            return str(result.inserted_id)

        async def raw_post(self, post_id: str) -> dict:
            return await self.db[settings.MONGODB_POSTS_COLLECTION].find_one({"_id": ObjectId(post_id)})

        async def raw_user(self, user_id: str) -> dict:
            return await self.db[settings.MONGODB_USERS_COLLECTION].find_one({"_id": ObjectId(user_id)})

    return APIClient()


@pytest.fixture
def fake_user_ids():
    """Identifiers of users who exist only as likers"""
    return [str(ObjectId()) for _ in range(10)]
