"""
Likes and comments API tests
"""
import asyncio

import pytest
from bson import ObjectId


@pytest.mark.asyncio
async def test_like_toggle_restores_original_state(api):
    author = await api.register()
    fan = await api.register()
    post = await api.create_post(author["token"])

    r = await api.put(f"/posts/{post['id']}/like", token=fan["token"])
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Post liked successfully"
    assert body["data"]["isLiked"] is True
    assert body["data"]["likesCount"] == 1
    assert body["data"]["post"]["likes"] == [fan["user"]["id"]]

    r = await api.put(f"/posts/{post['id']}/like", token=fan["token"])
    body = r.json()
    assert body["message"] == "Post unliked successfully"
    assert body["data"]["isLiked"] is False
    assert body["data"]["likesCount"] == 0
    assert body["data"]["post"]["likes"] == []


@pytest.mark.asyncio
async def test_like_never_duplicates_a_user(api):
    author = await api.register()
    fan = await api.register()
    post_id = await api.seed_post(author["user"]["id"], likes=[fan["user"]["id"]])

    # An existing like toggles off instead of being added twice
    r = await api.put(f"/posts/{post_id}/like", token=fan["token"])
    assert r.json()["data"]["isLiked"] is False
    assert r.json()["data"]["likesCount"] == 0

    r = await api.put(f"/posts/{post_id}/like", token=fan["token"])
    assert r.json()["data"]["likesCount"] == 1
    r = await api.put(f"/posts/{post_id}/like", token=author["token"])
    assert r.json()["data"]["likesCount"] == 2

    stored = await api.raw_post(post_id)
    assert sorted(str(uid) for uid in stored["likes"]) == sorted(
        [fan["user"]["id"], author["user"]["id"]]
    )


@pytest.mark.asyncio
async def test_like_requires_auth_and_existing_post(api):
    fan = await api.register()

    r = await api.put(f"/posts/{ObjectId()}/like")
    assert r.status_code == 401

    r = await api.put(f"/posts/{ObjectId()}/like", token=fan["token"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_add_comment(api):
    author = await api.register()
    commenter = await api.register(name="Chatty Person")
    post = await api.create_post(author["token"])

    r = await api.post(f"/posts/{post['id']}/comments", json={"text": "  hi  "}, token=commenter["token"])
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Comment added successfully"

    comment = body["data"]["comment"]
    assert comment["text"] == "hi"
    assert comment["userId"] == commenter["user"]["id"]
    assert comment["user"]["name"] == "Chatty Person"

    post_data = body["data"]["post"]
    assert post_data["commentsCount"] == 1
    assert post_data["comments"][0]["id"] == comment["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text,status", [("", 400), ("   ", 400), ("c" * 501, 400), ("c" * 500, 201)])
async def test_comment_length(api, text, status):
    author = await api.register()
    post = await api.create_post(author["token"])
    r = await api.post(f"/posts/{post['id']}/comments", json={"text": text}, token=author["token"])
    assert r.status_code == status


@pytest.mark.asyncio
async def test_comment_on_missing_post_is_404(api):
    user = await api.register()
    r = await api.post(f"/posts/{ObjectId()}/comments", json={"text": "hi"}, token=user["token"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_remove_comment(api):
    author = await api.register()
    commenter = await api.register()
    post = await api.create_post(author["token"])
    r = await api.post(f"/posts/{post['id']}/comments", json={"text": "hi"}, token=commenter["token"])
    comment_id = r.json()["data"]["comment"]["id"]

    # Even the post author cannot delete someone else's comment
    r = await api.delete(f"/posts/{post['id']}/comments/{comment_id}", token=author["token"])
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to delete this comment"

    r = await api.delete(f"/posts/{post['id']}/comments/{ObjectId()}", token=commenter["token"])
    assert r.status_code == 404
    assert r.json()["message"] == "Comment not found"

    r = await api.delete(f"/posts/{post['id']}/comments/{comment_id}", token=commenter["token"])
    assert r.status_code == 200
    assert r.json()["message"] == "Comment deleted successfully"

    stored = await api.raw_post(post["id"])
    assert stored["comments"] == []


@pytest.mark.asyncio
async def test_full_engagement_scenario(api):
    a = await api.register(name="Alice")
    b = await api.register(name="Bob")
    c = await api.register(name="Carol")

    post = await api.create_post(a["token"], "hello")
    assert (post["likesCount"], post["commentsCount"]) == (0, 0)

    r = await api.put(f"/posts/{post['id']}/like", token=b["token"])
    assert r.json()["data"]["likesCount"] == 1
    assert r.json()["data"]["isLiked"] is True

    r = await api.put(f"/posts/{post['id']}/like", token=b["token"])
    assert r.json()["data"]["likesCount"] == 0

    r = await api.post(f"/posts/{post['id']}/comments", json={"text": "hi"}, token=c["token"])
    assert r.json()["data"]["post"]["commentsCount"] == 1

    r = await api.delete(f"/posts/{post['id']}", token=a["token"])
    assert r.status_code == 200

    r = await api.get(f"/posts/{post['id']}")
    assert r.status_code == 404

    stored = await api.raw_post(post["id"])
    assert stored["is_active"] is False
    assert len(stored["comments"]) == 1


@pytest.mark.asyncio
async def test_concurrent_likes_from_different_users_are_all_kept(api):
    author = await api.register()
    fans = [await api.register() for _ in range(6)]
    post = await api.create_post(author["token"])

    responses = await asyncio.gather(*[
        api.put(f"/posts/{post['id']}/like", token=fan["token"]) for fan in fans
    ])
    assert all(r.status_code == 200 for r in responses)
    assert all(r.json()["data"]["isLiked"] is True for r in responses)

    stored = await api.raw_post(post["id"])
    assert sorted(str(uid) for uid in stored["likes"]) == sorted(fan["user"]["id"] for fan in fans)


@pytest.mark.asyncio
async def test_concurrent_toggles_by_one_user_never_duplicate(api):
    author = await api.register()
    fan = await api.register()
    post = await api.create_post(author["token"])

    responses = await asyncio.gather(*[
        api.put(f"/posts/{post['id']}/like", token=fan["token"]) for _ in range(5)
    ])
    assert all(r.status_code == 200 for r in responses)

    stored = await api.raw_post(post["id"])
    assert len(stored["likes"]) <= 1
    assert len(set(stored["likes"])) == len(stored["likes"])
