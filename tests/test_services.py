"""
Service tests with mocked repositories
"""
from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from linkedin_service.application.services import PostService, UserService
from linkedin_service.domain.models import Post
from linkedin_service.exceptions import AuthorizationError, NotFoundError, ValidationError


def _post(likes=None):
    now = datetime.utcnow()
    return Post(id="p1", author_id="a1", content="hello", likes=likes or [], created_at=now, updated_at=now)


@pytest.mark.asyncio
async def test_toggle_like_rereads_when_guarded_update_misses():
    post_repo = AsyncMock()
    # Another request by the same user liked the post in between
    post_repo.find_by_id.side_effect = [_post(), _post(likes=["u1"])]
    post_repo.add_like.return_value = None

    service = PostService(post_repo, AsyncMock())
    post, is_liked = await service.toggle_like("p1", "u1")

    assert is_liked is True
    assert post.likes == ["u1"]
    post_repo.add_like.assert_awaited_once_with("p1", "u1")
    post_repo.remove_like.assert_not_awaited()


@pytest.mark.asyncio
async def test_toggle_like_removes_existing_like():
    post_repo = AsyncMock()
    post_repo.find_by_id.return_value = _post(likes=["u1"])
    post_repo.remove_like.return_value = _post()

    service = PostService(post_repo, AsyncMock())
    post, is_liked = await service.toggle_like("p1", "u1")

    assert is_liked is False
    assert post.likes_count == 0


@pytest.mark.asyncio
async def test_update_post_checks_existence_before_ownership():
    post_repo = AsyncMock()
    post_repo.find_by_id.return_value = None
    service = PostService(post_repo, AsyncMock())

    with pytest.raises(NotFoundError):
        await service.update_post("p1", "intruder", "new content")

    post_repo.find_by_id.return_value = _post()
    with pytest.raises(AuthorizationError):
        await service.update_post("p1", "intruder", "new content")
    post_repo.update_content.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("query", [None, "", " ", "a", "  b  "])
async def test_search_rejects_short_queries(query):
    user_repo = AsyncMock()
    service = UserService(user_repo, AsyncMock())

    with pytest.raises(ValidationError):
        await service.search_users(query, page=1, limit=10)
    user_repo.search.assert_not_awaited()


@pytest.mark.asyncio
async def test_search_trims_query_and_paginates():
    user_repo = AsyncMock()
    user_repo.search.return_value = ([], 21)
    service = UserService(user_repo, AsyncMock())

    users, pagination = await service.search_users("  ada ", page=3, limit=10)

    user_repo.search.assert_awaited_once_with("ada", 20, 10)
    assert pagination.pages == 3
    assert not pagination.has_next_page
